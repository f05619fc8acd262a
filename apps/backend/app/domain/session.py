"""
===============================================================================
TARJETA CRC — domain/session.py
===============================================================================

Módulo:
    Sesión autenticada como valor inmutable + máquina de estados

Responsabilidades:
    - Modelar los estados del flujo de selección de rol.
    - Exponer transiciones que devuelven un NUEVO valor (nunca mutan).
    - Rechazar transiciones inválidas con InvalidSessionTransition.
    - Aplicar la excepción del administrador (siempre seleccionable).

Colaboradores:
    - domain.eligibility.RoleEligibility (entrada de offer_roles)
    - application.usecases.session.* (orquestan las transiciones)

Estados:
    awaiting_credentials -> credentials_accepted
        -> single_role_auto_selected | multi_role_choice_pending
        -> role_active
    cancel(): cualquier estado -> awaiting_credentials
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence
from uuid import UUID

from .eligibility import RoleEligibility
from .roles import AppRole, role_label


class SessionState(str, Enum):
    AWAITING_CREDENTIALS = "awaiting_credentials"
    CREDENTIALS_ACCEPTED = "credentials_accepted"
    SINGLE_ROLE_AUTO_SELECTED = "single_role_auto_selected"
    MULTI_ROLE_CHOICE_PENDING = "multi_role_choice_pending"
    ROLE_ACTIVE = "role_active"


class InvalidSessionTransition(Exception):
    def __init__(self, current: SessionState, transition: str):
        super().__init__(
            f"Transición '{transition}' inválida desde el estado '{current.value}'"
        )
        self.current = current
        self.transition = transition


class RoleNotSelectableError(Exception):
    def __init__(self, role: AppRole):
        super().__init__(f"El rol '{role.value}' no es seleccionable")
        self.role = role


@dataclass(frozen=True, slots=True)
class RoleChoice:
    """Opción presentada al elegir rol."""

    role: AppRole
    label: str
    eligible: bool
    selectable: bool
    next_available: str | None = None

    @classmethod
    def from_eligibility(cls, item: RoleEligibility) -> "RoleChoice":
        return cls(
            role=item.role,
            label=role_label(item.role),
            eligible=item.eligible,
            # R: el administrador siempre puede elegirse, aun si no es elegible.
            selectable=item.eligible or item.role == AppRole.ADMINISTRATOR,
            next_available=item.next_available,
        )


@dataclass(frozen=True, slots=True)
class AuthSession:
    state: SessionState
    user_id: UUID | None = None
    email: str | None = None
    access_token: str | None = None
    session_id: str | None = None
    choices: tuple[RoleChoice, ...] = ()
    active_role: AppRole | None = None

    # ------------------------------------------------------------------
    # Construcción
    # ------------------------------------------------------------------
    @classmethod
    def awaiting(cls) -> "AuthSession":
        return cls(state=SessionState.AWAITING_CREDENTIALS)

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------
    def accept_credentials(
        self,
        *,
        user_id: UUID,
        email: str | None,
        access_token: str,
        session_id: str,
    ) -> "AuthSession":
        self._require(SessionState.AWAITING_CREDENTIALS, "accept_credentials")
        return replace(
            self,
            state=SessionState.CREDENTIALS_ACCEPTED,
            user_id=user_id,
            email=email,
            access_token=access_token,
            session_id=session_id,
        )

    def offer_roles(self, eligibility: Sequence[RoleEligibility]) -> "AuthSession":
        """Un único rol -> auto-selección; dos o más -> elección pendiente."""
        self._require(SessionState.CREDENTIALS_ACCEPTED, "offer_roles")
        if not eligibility:
            raise InvalidSessionTransition(self.state, "offer_roles(sin roles)")

        choices = tuple(RoleChoice.from_eligibility(item) for item in eligibility)
        state = (
            SessionState.SINGLE_ROLE_AUTO_SELECTED
            if len(choices) == 1
            else SessionState.MULTI_ROLE_CHOICE_PENDING
        )
        return replace(self, state=state, choices=choices)

    def activate(self, role: AppRole) -> "AuthSession":
        if self.state not in (
            SessionState.SINGLE_ROLE_AUTO_SELECTED,
            SessionState.MULTI_ROLE_CHOICE_PENDING,
        ):
            raise InvalidSessionTransition(self.state, "activate")

        choice = self.choice_for(role)
        if choice is None or not choice.selectable:
            raise RoleNotSelectableError(role)
        return replace(self, state=SessionState.ROLE_ACTIVE, active_role=role)

    def resume(self, role: AppRole) -> "AuthSession":
        """Restaura una selección persistida (sin reevaluar horarios)."""
        self._require(SessionState.CREDENTIALS_ACCEPTED, "resume")
        return replace(self, state=SessionState.ROLE_ACTIVE, active_role=role)

    def cancel(self) -> "AuthSession":
        return AuthSession.awaiting()

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ROLE_ACTIVE

    def choice_for(self, role: AppRole) -> RoleChoice | None:
        for choice in self.choices:
            if choice.role == role:
                return choice
        return None

    def _require(self, expected: SessionState, transition: str) -> None:
        if self.state != expected:
            raise InvalidSessionTransition(self.state, transition)
