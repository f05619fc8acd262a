"""
===============================================================================
USE CASE: Login
===============================================================================

Business Goal:
    Autenticar credenciales contra el servicio de auth y llevar la sesión a
    RoleActive (un único rol permitido) o a la elección de rol pendiente.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    LoginUseCase

Responsibilities:
    - Sign-in con email/contraseña.
    - Cargar roles -> validar horario -> construir opciones (en ese orden).
    - Cerrar sesión cuando el usuario no puede quedar con un rol activo.
    - Registrar el resultado (métrica session_outcomes_total).

Collaborators:
    - AuthGateway, RoleGrantRepository, ScheduleRepository, SelectionStore
    - session_support (snapshot + establish_session)

Error Mapping:
    - INVALID_CREDENTIALS: el servicio rechazó las credenciales.
    - BACKEND_TIMEOUT / BACKEND_ERROR: el servicio no respondió o falló.
    - BACKEND_ERROR: no se pudieron leer los roles (se cierra la sesión).
    - NO_ROLES: el usuario no tiene roles (se cierra la sesión).
    - SCHEDULE_DENIED: único rol fuera de horario (se cierra la sesión).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.exceptions import (
    AuthError,
    BackendError,
    BackendTimeoutError,
    DatabaseError,
)
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_session_outcome
from ....domain.repositories import RoleGrantRepository, ScheduleRepository
from ....domain.services import AuthGateway, SelectionStore
from ....domain.session import AuthSession
from .session_results import (
    MSG_BACKEND_ERROR,
    MSG_BACKEND_TIMEOUT,
    MSG_INVALID_CREDENTIALS,
    MSG_ROLES_LOAD_FAILED,
    SessionError,
    SessionErrorCode,
    SessionResult,
)
from .session_support import (
    Clock,
    cooperative_now,
    establish_session,
    load_role_snapshot,
    sign_out_quietly,
)


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


def _outcome(result: SessionResult) -> str:
    return result.error.code.value.lower() if result.error else result.session.state.value


class LoginUseCase:
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

    def execute(self, input_data: LoginInput) -> SessionResult:
        result = self._login(input_data)
        record_session_outcome("login", _outcome(result))
        return result

    def _login(self, input_data: LoginInput) -> SessionResult:
        session = AuthSession.awaiting()
        email = (input_data.email or "").strip().lower()

        if not email or not input_data.password:
            return self._fail(session, SessionErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)

        try:
            tokens = self._auth.sign_in_with_password(email, input_data.password)
        except AuthError:
            return self._fail(session, SessionErrorCode.INVALID_CREDENTIALS, MSG_INVALID_CREDENTIALS)
        except BackendTimeoutError:
            return self._fail(session, SessionErrorCode.BACKEND_TIMEOUT, MSG_BACKEND_TIMEOUT)
        except BackendError:
            return self._fail(session, SessionErrorCode.BACKEND_ERROR, MSG_BACKEND_ERROR)

        session = session.accept_credentials(
            user_id=tokens.identity.user_id,
            email=tokens.identity.email,
            access_token=tokens.access_token,
            session_id=tokens.session_id,
        )

        try:
            snapshot = load_role_snapshot(
                tokens.identity.user_id,
                grants=self._grants,
                schedules=self._schedules,
                now=self._clock(),
            )
        except DatabaseError as exc:
            logger.error(
                "Login: no se pudieron cargar los roles",
                extra={"user_id": str(tokens.identity.user_id), "error": exc.message},
            )
            sign_out_quietly(self._auth, tokens.access_token)
            return self._fail(session.cancel(), SessionErrorCode.BACKEND_ERROR, MSG_ROLES_LOAD_FAILED)

        return establish_session(session, snapshot, auth=self._auth, store=self._store)

    @staticmethod
    def _fail(
        session: AuthSession, code: SessionErrorCode, message: str
    ) -> SessionResult:
        return SessionResult(session=session, error=SessionError(code=code, message=message))
