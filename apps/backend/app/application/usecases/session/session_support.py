"""
===============================================================================
TARJETA CRC — application/usecases/session/session_support.py
===============================================================================

Responsabilidades:
    - Reloj de la cooperativa (zona horaria configurada).
    - Cargar roles + ventanas y evaluar elegibilidad (en ese orden).
    - Construir la denegación por horario.
    - Cerrar sesión en el servicio de auth sin propagar fallas.
    - Paso común de login/restauración (auto-selección o elección pendiente).

Colaboradores:
    - domain.eligibility / domain.session
    - domain.repositories (RoleGrantRepository, ScheduleRepository)
    - domain.services.AuthGateway
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID

from ....crosscutting.config import get_settings
from ....crosscutting.exceptions import BackofficeError
from ....crosscutting.logger import logger
from ....domain.eligibility import RoleEligibility, evaluate_role_eligibility
from ....domain.repositories import RoleGrantRepository, ScheduleRepository
from ....domain.roles import AppRole, role_label
from ....domain.schedules import NOT_DEFINED
from ....domain.services import SELECTED_ROLE_KEY, AuthGateway, SelectionStore
from ....domain.session import AuthSession, RoleChoice, SessionState
from .session_results import (
    MSG_NO_ROLES,
    MSG_SCHEDULE_DENIED,
    SessionError,
    SessionErrorCode,
    SessionResult,
)

Clock = Callable[[], datetime]


def cooperative_now() -> datetime:
    """Hora local de la cooperativa (las ventanas se definen en hora local)."""
    return datetime.now(get_settings().get_timezone())


@dataclass(frozen=True, slots=True)
class RoleSnapshot:
    roles: list[AppRole]
    eligibility: list[RoleEligibility]


def load_role_snapshot(
    user_id: UUID,
    *,
    grants: RoleGrantRepository,
    schedules: ScheduleRepository,
    now: datetime,
) -> RoleSnapshot:
    """Roles otorgados -> ventanas -> elegibilidad. Propaga DatabaseError."""
    roles = grants.list_roles(user_id)
    if not roles:
        return RoleSnapshot(roles=[], eligibility=[])
    windows = schedules.list_for_user(user_id)
    return RoleSnapshot(
        roles=roles,
        eligibility=evaluate_role_eligibility(user_id, roles, windows, now),
    )


def schedule_denied(choice: RoleChoice) -> SessionError:
    next_available = choice.next_available or NOT_DEFINED
    return SessionError(
        code=SessionErrorCode.SCHEDULE_DENIED,
        message=MSG_SCHEDULE_DENIED.format(
            label=role_label(choice.role), next=next_available
        ),
        role=choice.role,
        next_available=next_available,
    )


def sign_out_quietly(auth: AuthGateway, access_token: str | None) -> None:
    """El cierre de sesión local no depende de que el servicio responda."""
    if not access_token:
        return
    try:
        auth.sign_out(access_token)
    except BackofficeError as exc:
        logger.warning(
            "Sign-out en el servicio de auth falló",
            extra={"error_code": exc.error_code, "error": exc.message},
        )


@dataclass(frozen=True, slots=True)
class SessionCredentials:
    """Identidad reconstruida desde el bearer token de cada request."""

    user_id: UUID
    email: str | None
    access_token: str
    session_id: str


def accepted_session(credentials: SessionCredentials) -> AuthSession:
    return AuthSession.awaiting().accept_credentials(
        user_id=credentials.user_id,
        email=credentials.email,
        access_token=credentials.access_token,
        session_id=credentials.session_id,
    )


def establish_session(
    session: AuthSession,
    snapshot: RoleSnapshot,
    *,
    auth: AuthGateway,
    store: SelectionStore,
) -> SessionResult:
    """
    Paso común de login y restauración (sesión en CredentialsAccepted).

    - sin roles: cierra sesión y devuelve NO_ROLES.
    - un rol: se auto-selecciona si es seleccionable; si no, cierra sesión.
    - dos o más: queda pendiente la elección.
    """
    if not snapshot.roles:
        sign_out_quietly(auth, session.access_token)
        return SessionResult(
            session=session.cancel(),
            error=SessionError(code=SessionErrorCode.NO_ROLES, message=MSG_NO_ROLES),
        )

    offered = session.offer_roles(snapshot.eligibility)
    if offered.state != SessionState.SINGLE_ROLE_AUTO_SELECTED:
        return SessionResult(session=offered)

    choice = offered.choices[0]
    if not choice.selectable:
        sign_out_quietly(auth, session.access_token)
        return SessionResult(session=offered.cancel(), error=schedule_denied(choice))

    active = offered.activate(choice.role)
    store.set_item(active.session_id, SELECTED_ROLE_KEY, choice.role.value)
    return SessionResult(session=active)
