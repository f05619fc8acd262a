"""
===============================================================================
USE CASE: Select Role
===============================================================================

Business Goal:
    Confirmar el rol elegido en el selector. Roles y horarios se vuelven a leer
    al confirmar: la elegibilidad mostrada pudo cambiar mientras el usuario
    decidía.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    SelectRoleUseCase

Responsibilities:
    - Reconstruir la sesión (CredentialsAccepted -> opciones) desde el token.
    - Activar el rol si está otorgado y es seleccionable.
    - Persistir selectedRole.
    - Cerrar sesión si los roles no se pueden leer o ya no hay ninguno.

Error Mapping:
    - NO_ROLES: el usuario ya no tiene roles (se cierra la sesión).
    - BACKEND_ERROR: no se pudieron leer los roles (se cierra la sesión).
    - ROLE_NOT_GRANTED: el rol no está entre los otorgados.
    - SCHEDULE_DENIED: fuera de horario (la sesión NO se activa ni se cierra).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_session_outcome
from ....domain.repositories import RoleGrantRepository, ScheduleRepository
from ....domain.roles import AppRole, role_label
from ....domain.services import SELECTED_ROLE_KEY, AuthGateway, SelectionStore
from ....domain.session import AuthSession
from .session_results import (
    MSG_NO_ROLES,
    MSG_ROLE_NOT_GRANTED,
    MSG_ROLES_LOAD_FAILED,
    SessionError,
    SessionErrorCode,
    SessionResult,
)
from .session_support import (
    Clock,
    SessionCredentials,
    accepted_session,
    cooperative_now,
    load_role_snapshot,
    schedule_denied,
    sign_out_quietly,
)


@dataclass(frozen=True)
class SelectRoleInput:
    credentials: SessionCredentials
    role: AppRole


class SelectRoleUseCase:
    operation = "select_role"

    def __init__(
        self,
        *,
        auth: AuthGateway,
        grants: RoleGrantRepository,
        schedules: ScheduleRepository,
        store: SelectionStore,
        clock: Clock = cooperative_now,
    ) -> None:
        self._auth = auth
        self._grants = grants
        self._schedules = schedules
        self._store = store
        self._clock = clock

    def execute(self, input_data: SelectRoleInput) -> SessionResult:
        result = self._select(input_data)
        record_session_outcome(
            self.operation,
            result.error.code.value.lower() if result.error else "role_active",
        )
        return result

    def _select(self, input_data: SelectRoleInput) -> SessionResult:
        credentials = input_data.credentials
        session = accepted_session(credentials)

        precheck = self._precheck(session)
        if precheck is not None:
            return precheck

        try:
            snapshot = load_role_snapshot(
                credentials.user_id,
                grants=self._grants,
                schedules=self._schedules,
                now=self._clock(),
            )
        except DatabaseError as exc:
            logger.error(
                "Selección de rol: no se pudieron cargar los roles",
                extra={"user_id": str(credentials.user_id), "error": exc.message},
            )
            return self._abort(
                session, SessionErrorCode.BACKEND_ERROR, MSG_ROLES_LOAD_FAILED
            )
        if not snapshot.roles:
            return self._abort(session, SessionErrorCode.NO_ROLES, MSG_NO_ROLES)

        offered = session.offer_roles(snapshot.eligibility)
        choice = offered.choice_for(input_data.role)
        if choice is None:
            return SessionResult(
                session=offered,
                error=SessionError(
                    code=SessionErrorCode.ROLE_NOT_GRANTED,
                    message=MSG_ROLE_NOT_GRANTED.format(label=role_label(input_data.role)),
                    role=input_data.role,
                ),
            )
        if not choice.selectable:
            return SessionResult(session=offered, error=schedule_denied(choice))

        active = offered.activate(input_data.role)
        self._store.set_item(credentials.session_id, SELECTED_ROLE_KEY, input_data.role.value)
        return SessionResult(session=active)

    def _precheck(self, session: AuthSession) -> SessionResult | None:
        return None

    def _abort(
        self, session: AuthSession, code: SessionErrorCode, message: str
    ) -> SessionResult:
        """Sin roles legibles no hay sesión posible: se cierra y se olvida la selección."""
        self._store.remove_item(session.session_id, SELECTED_ROLE_KEY)
        sign_out_quietly(self._auth, session.access_token)
        return SessionResult(
            session=session.cancel(), error=SessionError(code=code, message=message)
        )
