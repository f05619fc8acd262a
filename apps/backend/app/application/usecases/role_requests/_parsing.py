"""Conversión de listas de roles crudas (body JSON) a AppRole."""

from __future__ import annotations

from typing import Iterable

from ....domain.roles import AppRole, UnknownRoleError, parse_role
from .role_request_results import (
    MSG_UNKNOWN_ROLE,
    RoleRequestError,
    RoleRequestErrorCode,
)


def parse_roles(values: Iterable[str]) -> tuple[list[AppRole], RoleRequestError | None]:
    roles: list[AppRole] = []
    for value in values:
        try:
            role = parse_role(value)
        except UnknownRoleError:
            return [], RoleRequestError(
                RoleRequestErrorCode.VALIDATION_ERROR,
                MSG_UNKNOWN_ROLE.format(value=value),
            )
        if role not in roles:
            roles.append(role)
    return roles, None
