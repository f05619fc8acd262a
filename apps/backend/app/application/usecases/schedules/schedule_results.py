"""
===============================================================================
SCHEDULE USE CASE RESULTS
===============================================================================

Responsibilities:
    - Códigos de error y DTOs de resultado de la gestión de horarios.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.schedules import ScheduleWindow

MSG_FORBIDDEN = "No tienes permisos para gestionar horarios"
MSG_SCHEDULE_NOT_FOUND = "Horario no encontrado"
MSG_INVALID_TIME = "Hora inválida"
MSG_UNKNOWN_ROLE = "Rol desconocido: {value}"
MSG_ROLE_NOT_HELD = "El usuario no tiene asignado el rol {label}"


class ScheduleErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class ScheduleError:
    code: ScheduleErrorCode
    message: str


@dataclass
class ScheduleResult:
    schedule: ScheduleWindow | None = None
    error: ScheduleError | None = None


@dataclass
class ScheduleListResult:
    schedules: List[ScheduleWindow] = field(default_factory=list)
    error: ScheduleError | None = None


@dataclass
class ScheduleDeleteResult:
    deleted: bool = False
    error: ScheduleError | None = None
