"""
===============================================================================
USE CASES: Cancel Role Selection / Sign Out
===============================================================================

Business Goal:
    Salir del selector de roles (o de la aplicación) dejando al usuario
    completamente deslogueado: sin selectedRole y con la sesión cerrada en el
    servicio de auth.

Notas:
    - Primero se borra la selección local y luego se cierra la sesión remota.
    - Una falla del sign-out remoto se loguea y no mantiene la sesión viva.
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.metrics import record_session_outcome
from ....domain.services import SELECTED_ROLE_KEY, AuthGateway, SelectionStore
from ....domain.session import AuthSession
from .session_results import SessionResult
from .session_support import SessionCredentials, sign_out_quietly


class CancelRoleSelectionUseCase:
    operation = "cancel"

    def __init__(self, *, auth: AuthGateway, store: SelectionStore) -> None:
        self._auth = auth
        self._store = store

    def execute(self, credentials: SessionCredentials) -> SessionResult:
        self._store.remove_item(credentials.session_id, SELECTED_ROLE_KEY)
        sign_out_quietly(self._auth, credentials.access_token)
        record_session_outcome(self.operation, "signed_out")
        return SessionResult(session=AuthSession.awaiting())


class SignOutUseCase(CancelRoleSelectionUseCase):
    operation = "sign_out"
