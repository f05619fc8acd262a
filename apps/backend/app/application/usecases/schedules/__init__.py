"""Schedule management (employee_schedules)."""

from .create_schedule import CreateScheduleInput, CreateScheduleUseCase
from .list_schedules import ListSchedulesInput, ListSchedulesUseCase
from .manage_schedule import (
    DeleteScheduleInput,
    DeleteScheduleUseCase,
    ToggleScheduleInput,
    ToggleScheduleUseCase,
)
from .schedule_results import (
    ScheduleDeleteResult,
    ScheduleError,
    ScheduleErrorCode,
    ScheduleListResult,
    ScheduleResult,
)

__all__ = [
    "CreateScheduleInput",
    "CreateScheduleUseCase",
    "ToggleScheduleInput",
    "ToggleScheduleUseCase",
    "DeleteScheduleInput",
    "DeleteScheduleUseCase",
    "ListSchedulesInput",
    "ListSchedulesUseCase",
    "ScheduleDeleteResult",
    "ScheduleError",
    "ScheduleErrorCode",
    "ScheduleListResult",
    "ScheduleResult",
]
