"""
===============================================================================
TARJETA CRC — schemas/session.py
===============================================================================

Módulo:
    Schemas HTTP del flujo de sesión (login / selector de rol)

Responsabilidades:
    - DTOs de request (credenciales, rol elegido).
    - DTO de respuesta con el estado de la sesión y las opciones de rol.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.domain.roles import AppRole
from app.domain.session import AuthSession, RoleChoice, SessionState
from pydantic import BaseModel, Field, field_validator


class LoginReq(BaseModel):
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=256)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class SelectRoleReq(BaseModel):
    role: AppRole


class RoleChoiceRes(BaseModel):
    role: AppRole
    label: str
    eligible: bool
    selectable: bool
    next_available: str | None = None


class SessionRes(BaseModel):
    """Estado de la sesión tras una transición."""

    state: SessionState
    user_id: UUID | None = None
    email: str | None = None
    access_token: str | None = None
    active_role: AppRole | None = None
    choices: list[RoleChoiceRes] = Field(default_factory=list)


def _to_choice_res(choice: RoleChoice) -> RoleChoiceRes:
    return RoleChoiceRes(
        role=choice.role,
        label=choice.label,
        eligible=choice.eligible,
        selectable=choice.selectable,
        next_available=choice.next_available,
    )


def to_session_res(session: AuthSession, *, include_token: bool = False) -> SessionRes:
    return SessionRes(
        state=session.state,
        user_id=session.user_id,
        email=session.email,
        access_token=session.access_token if include_token else None,
        active_role=session.active_role,
        choices=[_to_choice_res(c) for c in session.choices],
    )
