"""
===============================================================================
USE CASE: Restore Session
===============================================================================

Business Goal:
    Reanudar una sesión existente (recarga de la app) a partir del token y de
    la selección persistida.

Reglas:
    - selectedRole presente y todavía otorgado -> RoleActive, SIN revalidar
      horarios (una sesión ya iniciada no se corta al terminar la ventana).
    - ausente o revocado -> se borra y se recalcula como en el login.
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.metrics import record_session_outcome
from ....domain.repositories import RoleGrantRepository, ScheduleRepository
from ....domain.roles import UnknownRoleError, parse_role
from ....domain.services import SELECTED_ROLE_KEY, AuthGateway, SelectionStore
from .session_results import SessionResult
from .session_support import (
    Clock,
    SessionCredentials,
    accepted_session,
    cooperative_now,
    establish_session,
    load_role_snapshot,
)


class RestoreSessionUseCase:
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

    def execute(self, credentials: SessionCredentials) -> SessionResult:
        result = self._restore(credentials)
        record_session_outcome(
            "restore",
            result.error.code.value.lower() if result.error else result.session.state.value,
        )
        return result

    def _restore(self, credentials: SessionCredentials) -> SessionResult:
        session = accepted_session(credentials)
        stored = self._store.get_item(credentials.session_id, SELECTED_ROLE_KEY)

        if stored is not None:
            try:
                role = parse_role(stored)
            except UnknownRoleError:
                role = None
            if role is not None and role in self._grants.list_roles(credentials.user_id):
                return SessionResult(session=session.resume(role))
            self._store.remove_item(credentials.session_id, SELECTED_ROLE_KEY)

        snapshot = load_role_snapshot(
            credentials.user_id,
            grants=self._grants,
            schedules=self._schedules,
            now=self._clock(),
        )
        return establish_session(session, snapshot, auth=self._auth, store=self._store)
