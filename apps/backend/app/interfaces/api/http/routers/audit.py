"""Router de auditoría (rol activo administrador o presidente)."""

from __future__ import annotations

from app.application.usecases.audit import (
    AUDIT_VIEWER_ROLES,
    ListAuditEventsInput,
    ListAuditEventsUseCase,
)
from app.container import get_list_audit_events_use_case
from app.identity.auth_users import CurrentUser, require_active_role
from fastapi import APIRouter, Depends, Query

from ..error_mapping import raise_audit_error
from ..schemas.audit import AuditEventsListRes, to_audit_event_res

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=AuditEventsListRes)
def list_audit_events(
    action_prefix: str | None = Query(None, max_length=100),
    actor: str | None = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: CurrentUser = Depends(require_active_role(*sorted(AUDIT_VIEWER_ROLES))),
    use_case: ListAuditEventsUseCase = Depends(get_list_audit_events_use_case),
):
    result = use_case.execute(
        ListAuditEventsInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            action_prefix=action_prefix,
            actor=actor,
            limit=limit,
            offset=offset,
        )
    )
    if result.error is not None:
        raise_audit_error(result.error)
    return AuditEventsListRes(
        events=[to_audit_event_res(e) for e in result.events],
        limit=result.limit,
        offset=result.offset,
    )
