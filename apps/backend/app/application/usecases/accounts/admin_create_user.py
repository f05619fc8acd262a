"""
===============================================================================
USE CASE: Admin Create User
===============================================================================

Business Goal:
    Un administrador (rol activo) da de alta un usuario ya confirmado con el
    rol indicado, usando la API privilegiada del servicio de auth.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    AdminCreateUserUseCase

Responsibilities:
    - Exigir rol activo administrador.
    - Validar campos (incluido el rol) y unicidad de la cédula.
    - Crear identidad confirmada, Profile y RoleGrant(role).
    - Auditar users.create.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ....audit import AuditAction, emit_audit_event
from ....crosscutting.exceptions import AuthError
from ....domain.repositories import (
    AuditEventRepository,
    ProfileRepository,
    RoleGrantRepository,
)
from ....domain.roles import AppRole, UnknownRoleError, parse_role
from ....domain.services import AuthGateway, NewAccount
from ._registration import precheck_account
from .account_results import (
    MSG_FORBIDDEN,
    MSG_UNKNOWN_ROLE,
    MSG_USER_CREATED,
    AccountData,
    AccountError,
    AccountErrorCode,
    AccountResult,
)


@dataclass(frozen=True)
class AdminCreateUserInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    account: AccountData
    role: str = ""


class AdminCreateUserUseCase:
    def __init__(
        self,
        *,
        auth: AuthGateway,
        profiles: ProfileRepository,
        grants: RoleGrantRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._auth = auth
        self._profiles = profiles
        self._grants = grants
        self._audit_repo = audit_repo

    def execute(self, input_data: AdminCreateUserInput) -> AccountResult:
        if input_data.actor_role != AppRole.ADMINISTRATOR:
            return self._error(AccountErrorCode.FORBIDDEN, MSG_FORBIDDEN)

        data = input_data.account
        error = precheck_account(
            data, self._profiles, extra_required={"role": input_data.role}
        )
        if error is not None:
            return AccountResult(error=error)

        try:
            role = parse_role(input_data.role)
        except UnknownRoleError:
            return self._error(
                AccountErrorCode.VALIDATION_ERROR,
                MSG_UNKNOWN_ROLE.format(value=input_data.role),
            )

        try:
            identity = self._auth.admin_create_user(
                NewAccount(
                    email=data.email.strip(),
                    password=data.password,
                    metadata=data.user_metadata(),
                )
            )
        except AuthError as exc:
            return self._error(AccountErrorCode.VALIDATION_ERROR, exc.message)

        self._profiles.create_profile(data.to_profile(identity.user_id))
        self._grants.add_role(identity.user_id, role)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.USER_CREATED,
            actor_id=input_data.actor_id,
            target_id=identity.user_id,
            metadata={"table_name": "profiles", "role": role},
        )
        return AccountResult(
            user_id=identity.user_id,
            email=identity.email or data.email.strip(),
            role=role,
            message=MSG_USER_CREATED,
        )

    @staticmethod
    def _error(code: AccountErrorCode, message: str) -> AccountResult:
        return AccountResult(error=AccountError(code=code, message=message))
