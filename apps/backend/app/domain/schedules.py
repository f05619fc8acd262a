"""
===============================================================================
TARJETA CRC — domain/schedules.py
===============================================================================

Módulo:
    Ventanas horarias semanales por (usuario, rol)

Responsabilidades:
    - Representar ScheduleWindow (día 0-6 con domingo = 0, hora inicio/fin).
    - Resolver si una ventana cubre un instante (intervalo semiabierto).
    - Calcular la próxima ventana disponible y formatearla para el usuario.
    - Validar el alta de horarios.

Colaboradores:
    - domain.eligibility: usa covers() / earliest_window().
    - application.usecases.schedules: validate_new_schedule().
    - infrastructure.repositories.*: persistencia en employee_schedules.

Invariantes:
    - start_time < end_time (no hay ventanas que crucen medianoche).
    - day_of_week ∈ [0, 6].
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Optional
from uuid import UUID

from .roles import SCHEDULE_ASSIGNABLE_ROLES, AppRole

# Domingo primero, igual que la columna day_of_week.
DAY_NAMES: tuple[str, ...] = (
    "Domingo",
    "Lunes",
    "Martes",
    "Miércoles",
    "Jueves",
    "Viernes",
    "Sábado",
)

NOT_DEFINED = "No definido"

MSG_MISSING_FIELDS = "Complete todos los campos"
MSG_INVALID_RANGE = "La hora de inicio debe ser anterior a la hora de fin"
MSG_INVALID_DAY = "El día de la semana debe estar entre 0 y 6"
MSG_ROLE_NOT_SCHEDULABLE = "El rol seleccionado no admite horarios"


@dataclass(frozen=True, slots=True)
class ScheduleWindow:
    """Fila de employee_schedules."""

    id: UUID
    employee_id: UUID
    role: AppRole
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool = True
    created_by: UUID | None = None
    created_at: datetime | None = None

    def covers(self, day: int, at: time) -> bool:
        return (
            self.is_active
            and self.day_of_week == day
            and self.start_time <= at < self.end_time
        )

    def sort_key(self) -> tuple[int, time]:
        return (self.day_of_week, self.start_time)


def parse_time_of_day(value: str) -> time:
    """Acepta "HH:MM" o "HH:MM:SS" (formato de columnas TIME)."""
    raw = (value or "").strip()
    parts = raw.split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Hora inválida: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return time(hour, minute, second)


def day_of_week(moment: datetime) -> int:
    """datetime.weekday() es lunes=0; las ventanas usan domingo=0."""
    return (moment.weekday() + 1) % 7


def earliest_window(windows: Iterable[ScheduleWindow]) -> Optional[ScheduleWindow]:
    """Ventana activa con menor (day_of_week, start_time)."""
    active = [w for w in windows if w.is_active]
    if not active:
        return None
    return min(active, key=ScheduleWindow.sort_key)


def format_next_available(window: Optional[ScheduleWindow]) -> str:
    if window is None:
        return NOT_DEFINED
    return f"{DAY_NAMES[window.day_of_week]} {window.start_time.strftime('%H:%M')}"


def validate_new_schedule(
    *,
    role: Optional[AppRole],
    day: Optional[int],
    start: Optional[time],
    end: Optional[time],
) -> Optional[str]:
    """
    Devuelve el mensaje de validación (o None si es válido).

    El orden de los chequeos replica el formulario de horarios.
    """
    if role is None or day is None or start is None or end is None:
        return MSG_MISSING_FIELDS
    if role not in SCHEDULE_ASSIGNABLE_ROLES:
        return MSG_ROLE_NOT_SCHEDULABLE
    if not 0 <= day <= 6:
        return MSG_INVALID_DAY
    if start >= end:
        return MSG_INVALID_RANGE
    return None
