"""
===============================================================================
USE CASE: Create Schedule
===============================================================================

Business Goal:
    Registrar una ventana semanal (día + rango horario) para un rol de un
    usuario. Sólo gerencia/administración (rol activo) puede hacerlo.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    CreateScheduleUseCase

Responsibilities:
    - Validar campos (rol con horarios, día 0..6, inicio < fin).
    - Verificar que el usuario destino tenga el rol otorgado.
    - Persistir y auditar schedules.create.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional
from uuid import UUID, uuid4

from ....audit import AuditAction, emit_audit_event
from ....domain.entities import utcnow
from ....domain.repositories import (
    AuditEventRepository,
    RoleGrantRepository,
    ScheduleRepository,
)
from ....domain.roles import (
    SCHEDULE_MANAGER_ROLES,
    AppRole,
    UnknownRoleError,
    parse_role,
    role_label,
)
from ....domain.schedules import (
    ScheduleWindow,
    parse_time_of_day,
    validate_new_schedule,
)
from .schedule_results import (
    MSG_FORBIDDEN,
    MSG_INVALID_TIME,
    MSG_ROLE_NOT_HELD,
    MSG_UNKNOWN_ROLE,
    ScheduleError,
    ScheduleErrorCode,
    ScheduleResult,
)


@dataclass(frozen=True)
class CreateScheduleInput:
    actor_id: UUID
    actor_role: Optional[AppRole]
    employee_id: UUID
    role: Optional[str]
    day_of_week: Optional[int]
    start_time: Optional[str]
    end_time: Optional[str]


def _parse_optional_time(value: Optional[str]) -> Optional[time]:
    if value is None or not value.strip():
        return None
    return parse_time_of_day(value)


class CreateScheduleUseCase:
    def __init__(
        self,
        *,
        schedules: ScheduleRepository,
        grants: RoleGrantRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._schedules = schedules
        self._grants = grants
        self._audit_repo = audit_repo

    def execute(self, input_data: CreateScheduleInput) -> ScheduleResult:
        if input_data.actor_role not in SCHEDULE_MANAGER_ROLES:
            return self._error(ScheduleErrorCode.FORBIDDEN, MSG_FORBIDDEN)

        role: Optional[AppRole] = None
        if input_data.role:
            try:
                role = parse_role(input_data.role)
            except UnknownRoleError:
                return self._error(
                    ScheduleErrorCode.VALIDATION_ERROR,
                    MSG_UNKNOWN_ROLE.format(value=input_data.role),
                )

        try:
            start = _parse_optional_time(input_data.start_time)
            end = _parse_optional_time(input_data.end_time)
        except ValueError:
            return self._error(ScheduleErrorCode.VALIDATION_ERROR, MSG_INVALID_TIME)

        message = validate_new_schedule(
            role=role, day=input_data.day_of_week, start=start, end=end
        )
        if message is not None:
            return self._error(ScheduleErrorCode.VALIDATION_ERROR, message)

        if role not in self._grants.list_roles(input_data.employee_id):
            return self._error(
                ScheduleErrorCode.VALIDATION_ERROR,
                MSG_ROLE_NOT_HELD.format(label=role_label(role)),
            )

        window = ScheduleWindow(
            id=uuid4(),
            employee_id=input_data.employee_id,
            role=role,
            day_of_week=input_data.day_of_week,
            start_time=start,
            end_time=end,
            is_active=True,
            created_by=input_data.actor_id,
            created_at=utcnow(),
        )
        self._schedules.create_schedule(window)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.SCHEDULE_CREATED,
            actor_id=input_data.actor_id,
            target_id=window.id,
            metadata={
                "table_name": "employee_schedules",
                "employee_id": window.employee_id,
                "role": window.role,
                "day_of_week": window.day_of_week,
                "start_time": window.start_time.isoformat(),
                "end_time": window.end_time.isoformat(),
            },
        )
        return ScheduleResult(schedule=window)

    @staticmethod
    def _error(code: ScheduleErrorCode, message: str) -> ScheduleResult:
        return ScheduleResult(error=ScheduleError(code=code, message=message))
