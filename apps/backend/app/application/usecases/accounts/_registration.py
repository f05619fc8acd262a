"""Pasos compartidos por signup y admin-signup."""

from __future__ import annotations

from ....domain.repositories import ProfileRepository
from .account_results import (
    MSG_DUPLICATE_ID_NUMBER,
    MSG_MISSING_FIELDS,
    AccountData,
    AccountError,
    AccountErrorCode,
)


def precheck_account(
    data: AccountData,
    profiles: ProfileRepository,
    *,
    extra_required: dict | None = None,
) -> AccountError | None:
    missing = data.missing_fields(extra_required)
    if missing:
        return AccountError(
            AccountErrorCode.VALIDATION_ERROR,
            MSG_MISSING_FIELDS.format(fields=", ".join(missing)),
        )
    if profiles.get_profile_by_id_number(data.id_number.strip()) is not None:
        return AccountError(AccountErrorCode.CONFLICT, MSG_DUPLICATE_ID_NUMBER)
    return None
