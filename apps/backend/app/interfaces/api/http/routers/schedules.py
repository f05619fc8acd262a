"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/schedules.py
===============================================================================

Responsibilities:
    - Listar ventanas (propias, o todas para gestión).
    - Crear / activar-desactivar / eliminar ventanas (rol activo de gestión).

Notas:
    - El listado acepta cualquier usuario autenticado; el rol activo se
      resuelve si existe para decidir el alcance.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.schedules import (
    CreateScheduleInput,
    CreateScheduleUseCase,
    DeleteScheduleInput,
    DeleteScheduleUseCase,
    ListSchedulesInput,
    ListSchedulesUseCase,
    ScheduleResult,
    ToggleScheduleInput,
    ToggleScheduleUseCase,
)
from app.container import (
    get_create_schedule_use_case,
    get_delete_schedule_use_case,
    get_list_schedules_use_case,
    get_toggle_schedule_use_case,
)
from app.domain.roles import SCHEDULE_MANAGER_ROLES
from app.identity.auth_users import (
    CurrentUser,
    require_active_role,
    require_user,
    resolve_active_role,
)
from fastapi import APIRouter, Depends, Query, Response

from ..error_mapping import raise_schedule_error
from ..schemas.schedules import (
    CreateScheduleReq,
    ScheduleRes,
    SchedulesListRes,
    ToggleScheduleReq,
    to_schedule_res,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])

_require_manager = require_active_role(*sorted(SCHEDULE_MANAGER_ROLES))


def _schedule_response(result: ScheduleResult) -> ScheduleRes:
    if result.error is not None:
        raise_schedule_error(result.error)
    return to_schedule_res(result.schedule)


@router.get("", response_model=SchedulesListRes)
def list_schedules(
    employee_id: UUID | None = Query(None),
    user: CurrentUser = Depends(require_user()),
    use_case: ListSchedulesUseCase = Depends(get_list_schedules_use_case),
):
    result = use_case.execute(
        ListSchedulesInput(
            actor_id=user.user_id,
            actor_role=resolve_active_role(user),
            employee_id=employee_id,
        )
    )
    if result.error is not None:
        raise_schedule_error(result.error)
    return SchedulesListRes(schedules=[to_schedule_res(w) for w in result.schedules])


@router.post("", response_model=ScheduleRes, status_code=201)
def create_schedule(
    req: CreateScheduleReq,
    user: CurrentUser = Depends(_require_manager),
    use_case: CreateScheduleUseCase = Depends(get_create_schedule_use_case),
):
    result = use_case.execute(
        CreateScheduleInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            employee_id=req.employee_id,
            role=req.role,
            day_of_week=req.day_of_week,
            start_time=req.start_time,
            end_time=req.end_time,
        )
    )
    return _schedule_response(result)


@router.patch("/{schedule_id}/active", response_model=ScheduleRes)
def toggle_schedule(
    schedule_id: UUID,
    req: ToggleScheduleReq,
    user: CurrentUser = Depends(_require_manager),
    use_case: ToggleScheduleUseCase = Depends(get_toggle_schedule_use_case),
):
    result = use_case.execute(
        ToggleScheduleInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            schedule_id=schedule_id,
            is_active=req.is_active,
        )
    )
    return _schedule_response(result)


@router.delete("/{schedule_id}", status_code=204)
def delete_schedule(
    schedule_id: UUID,
    user: CurrentUser = Depends(_require_manager),
    use_case: DeleteScheduleUseCase = Depends(get_delete_schedule_use_case),
):
    result = use_case.execute(
        DeleteScheduleInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            schedule_id=schedule_id,
        )
    )
    if result.error is not None:
        raise_schedule_error(result.error)
    return Response(status_code=204)
