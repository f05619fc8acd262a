"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/schedule.py
============================================================
Class: InMemoryScheduleRepository

Responsibilities:
  - Almacenar ventanas horarias (employee_schedules) en memoria.
  - Listar en orden (day_of_week, start_time) como la consulta real.

Collaborators:
  - domain.repositories.ScheduleRepository (contrato)
  - domain.schedules.ScheduleWindow (inmutable: no requiere copias)
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....domain.entities import utcnow
from ....domain.repositories import ScheduleRepository
from ....domain.schedules import ScheduleWindow


class InMemoryScheduleRepository(ScheduleRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._windows: Dict[UUID, ScheduleWindow] = {}

    def list_for_user(self, user_id: UUID) -> List[ScheduleWindow]:
        return self.list_schedules(employee_id=user_id)

    def list_schedules(
        self, *, employee_id: Optional[UUID] = None
    ) -> List[ScheduleWindow]:
        with self._lock:
            windows = [
                w
                for w in self._windows.values()
                if employee_id is None or w.employee_id == employee_id
            ]
        windows.sort(key=lambda w: (w.day_of_week, w.start_time, str(w.id)))
        return windows

    def get_schedule(self, schedule_id: UUID) -> Optional[ScheduleWindow]:
        with self._lock:
            return self._windows.get(schedule_id)

    def create_schedule(self, window: ScheduleWindow) -> None:
        with self._lock:
            self._windows[window.id] = replace(
                window, created_at=window.created_at or utcnow()
            )

    def set_active(
        self, schedule_id: UUID, is_active: bool
    ) -> Optional[ScheduleWindow]:
        with self._lock:
            current = self._windows.get(schedule_id)
            if current is None:
                return None
            updated = replace(current, is_active=is_active)
            self._windows[schedule_id] = updated
            return updated

    def delete_schedule(self, schedule_id: UUID) -> bool:
        with self._lock:
            return self._windows.pop(schedule_id, None) is not None
