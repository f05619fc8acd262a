"""
===============================================================================
USE CASE: List Schedules
===============================================================================

Reglas:
    - Gestión (rol activo en SCHEDULE_MANAGER_ROLES) ve todas las ventanas,
      con filtro opcional por empleado.
    - Cualquier otro usuario ve sólo sus propias ventanas.
    - Orden: (day_of_week, start_time).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ....domain.repositories import ScheduleRepository
from ....domain.roles import SCHEDULE_MANAGER_ROLES, AppRole
from .schedule_results import (
    MSG_FORBIDDEN,
    ScheduleError,
    ScheduleErrorCode,
    ScheduleListResult,
)


@dataclass(frozen=True)
class ListSchedulesInput:
    actor_id: UUID
    actor_role: Optional[AppRole] = None
    employee_id: Optional[UUID] = None


class ListSchedulesUseCase:
    def __init__(self, *, schedules: ScheduleRepository) -> None:
        self._schedules = schedules

    def execute(self, input_data: ListSchedulesInput) -> ScheduleListResult:
        employee_id = input_data.employee_id
        if input_data.actor_role not in SCHEDULE_MANAGER_ROLES:
            if employee_id is not None and employee_id != input_data.actor_id:
                return ScheduleListResult(
                    error=ScheduleError(ScheduleErrorCode.FORBIDDEN, MSG_FORBIDDEN)
                )
            employee_id = input_data.actor_id

        windows = self._schedules.list_schedules(employee_id=employee_id)
        return ScheduleListResult(schedules=sorted(windows, key=lambda w: w.sort_key()))
