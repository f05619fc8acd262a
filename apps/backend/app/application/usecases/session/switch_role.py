"""
===============================================================================
USE CASE: Switch Role
===============================================================================

Business Goal:
    Cambiar el rol activo desde el selector del encabezado. Aplica la misma
    elegibilidad que la selección inicial (un empleado no puede pasar a su rol
    de empleado fuera de horario).

Error Mapping:
    - NOT_AUTHENTICATED: no hay un rol activo que cambiar.
    - resto: igual que SelectRoleUseCase.
===============================================================================
"""

from __future__ import annotations

from ....domain.services import SELECTED_ROLE_KEY
from ....domain.session import AuthSession
from .select_role import SelectRoleInput, SelectRoleUseCase
from .session_results import (
    MSG_NO_ACTIVE_ROLE,
    SessionError,
    SessionErrorCode,
    SessionResult,
)

SwitchRoleInput = SelectRoleInput


class SwitchRoleUseCase(SelectRoleUseCase):
    operation = "switch_role"

    def _precheck(self, session: AuthSession) -> SessionResult | None:
        if self._store.get_item(session.session_id, SELECTED_ROLE_KEY) is None:
            return SessionResult(
                session=session,
                error=SessionError(
                    code=SessionErrorCode.NOT_AUTHENTICATED,
                    message=MSG_NO_ACTIVE_ROLE,
                ),
            )
        return None
