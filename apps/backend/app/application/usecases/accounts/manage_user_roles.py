"""
===============================================================================
USE CASE: Manage User Roles (administración)
===============================================================================

Business Goal:
    El administrador cambia o retira roles de un usuario existente desde el
    gestor de usuarios. El cambio toma efecto en la siguiente request del
    usuario: una selección guardada que ya no está otorgada se descarta, y sin
    roles la sesión se cierra en la próxima selección.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    ReplaceUserRolesUseCase, RevokeUserRoleUseCase

Responsibilities:
    - Exigir rol activo administrador.
    - Validar que el usuario exista y que los roles sean conocidos.
    - Reemplazar el conjunto completo de grants o retirar uno.
    - Auditar user_roles.replace / user_roles.delete con roles previos y nuevos.

Error Mapping:
    - FORBIDDEN: rol activo distinto de administrador.
    - NOT_FOUND: usuario sin perfil, o rol no otorgado (retiro).
    - VALIDATION_ERROR: lista vacía o rol desconocido.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from ....audit import AuditAction, emit_audit_event
from ....domain.repositories import (
    AuditEventRepository,
    ProfileRepository,
    RoleGrantRepository,
)
from ....domain.roles import AppRole, UnknownRoleError, parse_role, role_label
from .account_results import (
    MSG_FORBIDDEN,
    MSG_PROFILE_NOT_FOUND,
    MSG_ROLE_NOT_HELD,
    MSG_ROLE_REVOKED,
    MSG_ROLES_REQUIRED,
    MSG_ROLES_UPDATED,
    MSG_UNKNOWN_ROLE,
    AccountError,
    AccountErrorCode,
    UserRolesResult,
)


@dataclass(frozen=True)
class ReplaceUserRolesInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    user_id: UUID
    roles: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RevokeUserRoleInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    user_id: UUID
    role: str = ""


def _error(code: AccountErrorCode, message: str) -> UserRolesResult:
    return UserRolesResult(error=AccountError(code=code, message=message))


class _UserRolesUseCase:
    def __init__(
        self,
        *,
        profiles: ProfileRepository,
        grants: RoleGrantRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._profiles = profiles
        self._grants = grants
        self._audit_repo = audit_repo

    def _precheck(
        self, actor_role: Optional[AppRole], user_id: UUID
    ) -> UserRolesResult | None:
        if actor_role != AppRole.ADMINISTRATOR:
            return _error(AccountErrorCode.FORBIDDEN, MSG_FORBIDDEN)
        if self._profiles.get_profile(user_id) is None:
            return _error(AccountErrorCode.NOT_FOUND, MSG_PROFILE_NOT_FOUND)
        return None


class ReplaceUserRolesUseCase(_UserRolesUseCase):
    def execute(self, input_data: ReplaceUserRolesInput) -> UserRolesResult:
        error = self._precheck(input_data.actor_role, input_data.user_id)
        if error is not None:
            return error

        values = [v for v in input_data.roles if (v or "").strip()]
        if not values:
            return _error(AccountErrorCode.VALIDATION_ERROR, MSG_ROLES_REQUIRED)
        roles: list[AppRole] = []
        for value in values:
            try:
                role = parse_role(value)
            except UnknownRoleError:
                return _error(
                    AccountErrorCode.VALIDATION_ERROR, MSG_UNKNOWN_ROLE.format(value=value)
                )
            if role not in roles:
                roles.append(role)

        previous = self._grants.list_roles(input_data.user_id)
        self._grants.replace_roles(input_data.user_id, roles)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.USER_ROLES_REPLACED,
            actor_id=input_data.actor_id,
            target_id=input_data.user_id,
            metadata={"table_name": "user_roles", "previous": previous, "roles": roles},
        )
        return UserRolesResult(
            user_id=input_data.user_id, roles=roles, message=MSG_ROLES_UPDATED
        )


class RevokeUserRoleUseCase(_UserRolesUseCase):
    def execute(self, input_data: RevokeUserRoleInput) -> UserRolesResult:
        error = self._precheck(input_data.actor_role, input_data.user_id)
        if error is not None:
            return error

        try:
            role = parse_role(input_data.role)
        except UnknownRoleError:
            return _error(
                AccountErrorCode.VALIDATION_ERROR,
                MSG_UNKNOWN_ROLE.format(value=input_data.role),
            )

        if not self._grants.remove_role(input_data.user_id, role):
            return _error(
                AccountErrorCode.NOT_FOUND, MSG_ROLE_NOT_HELD.format(label=role_label(role))
            )

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.USER_ROLE_REVOKED,
            actor_id=input_data.actor_id,
            target_id=input_data.user_id,
            metadata={"table_name": "user_roles", "role": role},
        )
        return UserRolesResult(
            user_id=input_data.user_id,
            roles=self._grants.list_roles(input_data.user_id),
            message=MSG_ROLE_REVOKED,
        )
