"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/incidents.py
===============================================================================

Responsibilities:
    - Listar incidentes de vía (filtro por estado) y ver su detalle + bitácora.
    - Reportar incidentes (conductor / dirigente / administrador).
    - Moderar el estado (administrador / gerente / presidente).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.incidents import (
    GetIncidentUseCase,
    IncidentResult,
    ListIncidentsUseCase,
    ModerateIncidentInput,
    ModerateIncidentUseCase,
    ReportIncidentInput,
    ReportIncidentUseCase,
)
from app.container import (
    get_incident_use_case,
    get_list_incidents_use_case,
    get_moderate_incident_use_case,
    get_report_incident_use_case,
)
from app.domain.roles import INCIDENT_MODERATOR_ROLES, INCIDENT_REPORTER_ROLES
from app.identity.auth_users import CurrentUser, require_active_role, require_user
from fastapi import APIRouter, Depends, Query

from ..error_mapping import raise_incident_error
from ..schemas.incidents import (
    IncidentDetailRes,
    IncidentsListRes,
    ModerateIncidentReq,
    ReportIncidentReq,
    to_incident_log_res,
    to_incident_res,
)

router = APIRouter(prefix="/incidents", tags=["incidents"])

_require_reporter = require_active_role(*sorted(INCIDENT_REPORTER_ROLES))
_require_moderator = require_active_role(*sorted(INCIDENT_MODERATOR_ROLES))


def _detail_response(result: IncidentResult) -> IncidentDetailRes:
    if result.error is not None:
        raise_incident_error(result.error)
    return IncidentDetailRes(
        message=result.message,
        incident=to_incident_res(result.incident),
        history=[to_incident_log_res(e) for e in result.history],
    )


@router.get("", response_model=IncidentsListRes)
def list_incidents(
    status: str | None = Query(None, description="activo|resuelto|cerrado"),
    limit: int = Query(100, ge=1, le=500),
    _user: CurrentUser = Depends(require_user()),
    use_case: ListIncidentsUseCase = Depends(get_list_incidents_use_case),
):
    result = use_case.execute(status=status, limit=limit)
    if result.error is not None:
        raise_incident_error(result.error)
    return IncidentsListRes(incidents=[to_incident_res(i) for i in result.incidents])


@router.post("", response_model=IncidentDetailRes, status_code=201)
def report_incident(
    req: ReportIncidentReq,
    user: CurrentUser = Depends(_require_reporter),
    use_case: ReportIncidentUseCase = Depends(get_report_incident_use_case),
):
    result = use_case.execute(
        ReportIncidentInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            incident_type=req.incident_type,
            title=req.title,
            description=req.description,
            location_description=req.location_description,
            severity=req.severity,
            affected_routes=list(req.affected_routes),
        )
    )
    return _detail_response(result)


@router.get("/{incident_id}", response_model=IncidentDetailRes)
def get_incident(
    incident_id: UUID,
    _user: CurrentUser = Depends(require_user()),
    use_case: GetIncidentUseCase = Depends(get_incident_use_case),
):
    return _detail_response(use_case.execute(incident_id))


@router.patch("/{incident_id}/status", response_model=IncidentDetailRes)
def moderate_incident(
    incident_id: UUID,
    req: ModerateIncidentReq,
    user: CurrentUser = Depends(_require_moderator),
    use_case: ModerateIncidentUseCase = Depends(get_moderate_incident_use_case),
):
    result = use_case.execute(
        ModerateIncidentInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            incident_id=incident_id,
            status=req.status,
            notes=req.notes,
        )
    )
    return _detail_response(result)
