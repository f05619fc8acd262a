"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/schedule.py
============================================================
Class: PostgresScheduleRepository

Responsibilities:
  - CRUD de `employee_schedules`.
  - Orden estable (day_of_week, start_time, id).

Collaborators:
  - PostgresRepository
  - domain.schedules.ScheduleWindow
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ....domain.schedules import ScheduleWindow
from ._base import PostgresRepository
from .role_grant import _to_role

_SCHEDULE_COLUMNS = (
    "id, employee_id, role, day_of_week, start_time, end_time, "
    "is_active, created_by, created_at"
)
_SCHEDULE_ORDER_BY = "day_of_week ASC, start_time ASC, id ASC"


def _row_to_window(row: tuple) -> ScheduleWindow:
    return ScheduleWindow(
        id=row[0],
        employee_id=row[1],
        role=_to_role(row[2]),
        day_of_week=int(row[3]),
        start_time=row[4],
        end_time=row[5],
        is_active=bool(row[6]),
        created_by=row[7],
        created_at=row[8],
    )


class PostgresScheduleRepository(PostgresRepository):
    def list_for_user(self, user_id: UUID) -> List[ScheduleWindow]:
        return self.list_schedules(employee_id=user_id)

    def list_schedules(
        self, *, employee_id: Optional[UUID] = None
    ) -> List[ScheduleWindow]:
        where = ""
        params: list[object] = []
        if employee_id is not None:
            where = "WHERE employee_id = %s"
            params.append(employee_id)

        rows = self._fetchall(
            query=f"""
                SELECT {_SCHEDULE_COLUMNS}
                FROM employee_schedules
                {where}
                ORDER BY {_SCHEDULE_ORDER_BY}
            """,
            params=params,
            error_message="PostgresScheduleRepository: Failed to list schedules",
            extra={"employee_id": str(employee_id) if employee_id else None},
        )
        return [_row_to_window(row) for row in rows]

    def get_schedule(self, schedule_id: UUID) -> Optional[ScheduleWindow]:
        row = self._fetchone(
            query=f"SELECT {_SCHEDULE_COLUMNS} FROM employee_schedules WHERE id = %s",
            params=[schedule_id],
            error_message="PostgresScheduleRepository: Failed to get schedule",
            extra={"schedule_id": str(schedule_id)},
        )
        return _row_to_window(row) if row else None

    def create_schedule(self, window: ScheduleWindow) -> None:
        self._execute(
            query="""
                INSERT INTO employee_schedules (
                    id, employee_id, role, day_of_week, start_time, end_time,
                    is_active, created_by
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=[
                window.id,
                window.employee_id,
                window.role.value,
                window.day_of_week,
                window.start_time,
                window.end_time,
                window.is_active,
                window.created_by,
            ],
            error_message="PostgresScheduleRepository: Failed to create schedule",
            extra={"schedule_id": str(window.id)},
        )

    def set_active(
        self, schedule_id: UUID, is_active: bool
    ) -> Optional[ScheduleWindow]:
        row = self._fetchone(
            query=f"""
                UPDATE employee_schedules
                SET is_active = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING {_SCHEDULE_COLUMNS}
            """,
            params=[is_active, schedule_id],
            error_message="PostgresScheduleRepository: Failed to toggle schedule",
            extra={"schedule_id": str(schedule_id), "is_active": is_active},
        )
        return _row_to_window(row) if row else None

    def delete_schedule(self, schedule_id: UUID) -> bool:
        deleted = self._execute(
            query="DELETE FROM employee_schedules WHERE id = %s",
            params=[schedule_id],
            error_message="PostgresScheduleRepository: Failed to delete schedule",
            extra={"schedule_id": str(schedule_id)},
        )
        return deleted > 0
