"""
===============================================================================
USE CASE: Sign Up
===============================================================================

Business Goal:
    Registro público de clientes: identidad en el servicio de auth, fila de
    perfil y rol inicial "client".

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    SignUpUseCase

Responsibilities:
    - Validar campos requeridos y unicidad de la cédula.
    - Crear la identidad (AuthGateway.sign_up) con los datos como metadata.
    - Crear Profile + RoleGrant(client).

Error Mapping:
    - VALIDATION_ERROR: campos faltantes o rechazo del servicio de auth.
    - CONFLICT: cédula duplicada.
    - BackendError / BackendTimeoutError: se propagan (502 / 504).
    - DatabaseError al escribir perfil o rol inicial: se propaga (503); la
      identidad de auth ya creada no se revierte.
===============================================================================
"""

from __future__ import annotations

from ....audit import AuditAction, emit_audit_event
from ....crosscutting.exceptions import AuthError
from ....domain.repositories import (
    AuditEventRepository,
    ProfileRepository,
    RoleGrantRepository,
)
from ....domain.roles import DEFAULT_SIGNUP_ROLE
from ....domain.services import AuthGateway, NewAccount
from ._registration import precheck_account
from .account_results import (
    MSG_SIGNED_UP,
    AccountData,
    AccountError,
    AccountErrorCode,
    AccountResult,
)


class SignUpUseCase:
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

    def execute(self, data: AccountData) -> AccountResult:
        error = precheck_account(data, self._profiles)
        if error is not None:
            return AccountResult(error=error)

        try:
            identity = self._auth.sign_up(
                NewAccount(
                    email=data.email.strip(),
                    password=data.password,
                    metadata=data.user_metadata(),
                )
            )
        except AuthError as exc:
            return AccountResult(
                error=AccountError(AccountErrorCode.VALIDATION_ERROR, exc.message)
            )

        self._profiles.create_profile(data.to_profile(identity.user_id))
        self._grants.add_role(identity.user_id, DEFAULT_SIGNUP_ROLE)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.USER_SIGNUP,
            actor_id=identity.user_id,
            target_id=identity.user_id,
            metadata={"table_name": "profiles", "role": DEFAULT_SIGNUP_ROLE},
        )
        return AccountResult(
            user_id=identity.user_id,
            email=identity.email or data.email.strip(),
            role=DEFAULT_SIGNUP_ROLE,
            message=MSG_SIGNED_UP,
        )
