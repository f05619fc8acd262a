"""
===============================================================================
USE CASES: Toggle / Delete Schedule
===============================================================================

Responsibilities:
    - Activar/desactivar una ventana existente (schedules.toggle).
    - Eliminar una ventana (schedules.delete).

Notas:
    - Ambos requieren rol activo de gestión (administrador/presidente/gerente).
    - Una ventana desactivada deja de contar para la elegibilidad del empleado.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ....audit import AuditAction, emit_audit_event
from ....domain.repositories import AuditEventRepository, ScheduleRepository
from ....domain.roles import SCHEDULE_MANAGER_ROLES, AppRole
from .schedule_results import (
    MSG_FORBIDDEN,
    MSG_SCHEDULE_NOT_FOUND,
    ScheduleDeleteResult,
    ScheduleError,
    ScheduleErrorCode,
    ScheduleResult,
)

_FORBIDDEN = ScheduleError(ScheduleErrorCode.FORBIDDEN, MSG_FORBIDDEN)
_NOT_FOUND = ScheduleError(ScheduleErrorCode.NOT_FOUND, MSG_SCHEDULE_NOT_FOUND)


@dataclass(frozen=True)
class ToggleScheduleInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    schedule_id: UUID
    is_active: bool


@dataclass(frozen=True)
class DeleteScheduleInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    schedule_id: UUID


class ToggleScheduleUseCase:
    def __init__(
        self,
        *,
        schedules: ScheduleRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._schedules = schedules
        self._audit_repo = audit_repo

    def execute(self, input_data: ToggleScheduleInput) -> ScheduleResult:
        if input_data.actor_role not in SCHEDULE_MANAGER_ROLES:
            return ScheduleResult(error=_FORBIDDEN)

        updated = self._schedules.set_active(input_data.schedule_id, input_data.is_active)
        if updated is None:
            return ScheduleResult(error=_NOT_FOUND)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.SCHEDULE_TOGGLED,
            actor_id=input_data.actor_id,
            target_id=updated.id,
            metadata={
                "table_name": "employee_schedules",
                "is_active": updated.is_active,
            },
        )
        return ScheduleResult(schedule=updated)


class DeleteScheduleUseCase:
    def __init__(
        self,
        *,
        schedules: ScheduleRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._schedules = schedules
        self._audit_repo = audit_repo

    def execute(self, input_data: DeleteScheduleInput) -> ScheduleDeleteResult:
        if input_data.actor_role not in SCHEDULE_MANAGER_ROLES:
            return ScheduleDeleteResult(error=_FORBIDDEN)

        existing = self._schedules.get_schedule(input_data.schedule_id)
        if existing is None or not self._schedules.delete_schedule(input_data.schedule_id):
            return ScheduleDeleteResult(error=_NOT_FOUND)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.SCHEDULE_DELETED,
            actor_id=input_data.actor_id,
            target_id=existing.id,
            metadata={
                "table_name": "employee_schedules",
                "old_values": {
                    "employee_id": existing.employee_id,
                    "role": existing.role,
                    "day_of_week": existing.day_of_week,
                    "start_time": existing.start_time.isoformat(),
                    "end_time": existing.end_time.isoformat(),
                },
            },
        )
        return ScheduleDeleteResult(deleted=True)
