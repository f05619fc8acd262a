"""Schemas HTTP de horarios (employee_schedules)."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.domain.roles import AppRole
from app.domain.schedules import DAY_NAMES, ScheduleWindow
from pydantic import BaseModel, Field


class CreateScheduleReq(BaseModel):
    employee_id: UUID
    role: str | None = None
    day_of_week: int | None = None
    start_time: str | None = Field(default=None, description="HH:MM")
    end_time: str | None = Field(default=None, description="HH:MM")


class ToggleScheduleReq(BaseModel):
    is_active: bool


class ScheduleRes(BaseModel):
    id: UUID
    employee_id: UUID
    role: AppRole
    day_of_week: int
    day_name: str
    start_time: str
    end_time: str
    is_active: bool
    created_by: UUID | None = None
    created_at: datetime | None = None


class SchedulesListRes(BaseModel):
    schedules: list[ScheduleRes]


def to_schedule_res(window: ScheduleWindow) -> ScheduleRes:
    return ScheduleRes(
        id=window.id,
        employee_id=window.employee_id,
        role=window.role,
        day_of_week=window.day_of_week,
        day_name=DAY_NAMES[window.day_of_week],
        start_time=window.start_time.strftime("%H:%M"),
        end_time=window.end_time.strftime("%H:%M"),
        is_active=window.is_active,
        created_by=window.created_by,
        created_at=window.created_at,
    )
