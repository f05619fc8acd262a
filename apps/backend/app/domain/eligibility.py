"""
===============================================================================
TARJETA CRC — domain/eligibility.py
===============================================================================

Módulo:
    Evaluador de elegibilidad de roles (política pura)

Responsabilidades:
    - Decidir, para cada rol otorgado, si puede activarse en un instante dado.
    - Informar la próxima ventana disponible cuando un rol con horario no aplica.

Colaboradores:
    - domain.schedules (ScheduleWindow, day_of_week, earliest_window)
    - domain.roles (AppRole, SCHEDULE_GATED_ROLES, sort_roles)
    - application.usecases.session (login / selección / cambio de rol)

Reglas:
    - administrator: siempre elegible.
    - employee: elegible si alguna ventana activa propia cubre "now".
    - resto de roles: elegibles sin condición.

Restricciones:
    - Función pura: sin I/O, sin reloj. "now" llega como argumento y ya
      convertido a la zona horaria de la cooperativa.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence
from uuid import UUID

from .roles import SCHEDULE_GATED_ROLES, AppRole, sort_roles
from .schedules import (
    ScheduleWindow,
    day_of_week,
    earliest_window,
    format_next_available,
)


@dataclass(frozen=True, slots=True)
class RoleEligibility:
    role: AppRole
    eligible: bool
    next_available: str | None = None


def evaluate_role_eligibility(
    user_id: UUID,
    roles: Iterable[AppRole],
    windows: Sequence[ScheduleWindow],
    now: datetime,
) -> list[RoleEligibility]:
    """
    Evalúa cada rol otorgado (deduplicado, en orden de prioridad).

    Ventanas de otros usuarios o de otros roles se ignoran.
    """
    today = day_of_week(now)
    current = now.time().replace(tzinfo=None)

    results: list[RoleEligibility] = []
    for role in sort_roles(roles):
        if role == AppRole.ADMINISTRATOR or role not in SCHEDULE_GATED_ROLES:
            results.append(RoleEligibility(role=role, eligible=True))
            continue

        own = [w for w in windows if w.employee_id == user_id and w.role == role]
        if any(w.covers(today, current) for w in own):
            results.append(RoleEligibility(role=role, eligible=True))
            continue

        results.append(
            RoleEligibility(
                role=role,
                eligible=False,
                next_available=format_next_available(earliest_window(own)),
            )
        )
    return results


def eligibility_for(
    results: Iterable[RoleEligibility], role: AppRole
) -> RoleEligibility | None:
    for item in results:
        if item.role == role:
            return item
    return None
