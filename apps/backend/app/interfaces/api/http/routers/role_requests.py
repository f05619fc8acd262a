"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/role_requests.py
===============================================================================

Responsibilities:
    - POST /functions/v1/create-role-request: el usuario pide roles.
    - POST /functions/v1/approve-role-request: un administrador resuelve
      (parcial o totalmente) una solicitud.
    - GET  /role-requests: listado (todas para administradores, propias para
      el resto).

Notas:
    - approve-role-request exige el rol administrador OTORGADO (no el activo):
      el caso de uso lo verifica contra user_roles.
===============================================================================
"""

from __future__ import annotations

from app.application.usecases.role_requests import (
    ListRoleRequestsInput,
    ListRoleRequestsUseCase,
    ResolveRoleRequestInput,
    ResolveRoleRequestUseCase,
    RoleRequestResult,
    SubmitRoleRequestInput,
    SubmitRoleRequestUseCase,
)
from app.container import (
    get_list_role_requests_use_case,
    get_resolve_role_request_use_case,
    get_submit_role_request_use_case,
)
from app.identity.auth_users import CurrentUser, require_user
from fastapi import APIRouter, Depends, Query

from ..error_mapping import raise_role_request_error
from ..schemas.role_requests import (
    CreateRoleRequestReq,
    ResolveRoleRequestReq,
    RoleRequestActionRes,
    RoleRequestsListRes,
    to_role_request_res,
)

router = APIRouter(tags=["role-requests"])


def _action_response(result: RoleRequestResult) -> RoleRequestActionRes:
    if result.error is not None:
        raise_role_request_error(result.error)
    return RoleRequestActionRes(
        message=result.message or "",
        request=to_role_request_res(result.request),
    )


@router.post("/functions/v1/create-role-request", response_model=RoleRequestActionRes)
def create_role_request(
    req: CreateRoleRequestReq,
    user: CurrentUser = Depends(require_user()),
    use_case: SubmitRoleRequestUseCase = Depends(get_submit_role_request_use_case),
):
    result = use_case.execute(
        SubmitRoleRequestInput(
            actor_id=user.user_id,
            user_id=req.user_id,
            requested_roles=req.requested_roles,
            justification=req.justification,
        )
    )
    return _action_response(result)


@router.post("/functions/v1/approve-role-request", response_model=RoleRequestActionRes)
def approve_role_request(
    req: ResolveRoleRequestReq,
    user: CurrentUser = Depends(require_user()),
    use_case: ResolveRoleRequestUseCase = Depends(get_resolve_role_request_use_case),
):
    result = use_case.execute(
        ResolveRoleRequestInput(
            actor_id=user.user_id,
            request_id=req.request_id,
            approved_roles=req.approved_roles,
            rejected_roles=req.rejected_roles,
            notes=req.notes,
        )
    )
    return _action_response(result)


@router.get("/role-requests", response_model=RoleRequestsListRes)
def list_role_requests(
    status: list[str] | None = Query(None),
    user: CurrentUser = Depends(require_user()),
    use_case: ListRoleRequestsUseCase = Depends(get_list_role_requests_use_case),
):
    result = use_case.execute(
        ListRoleRequestsInput(actor_id=user.user_id, statuses=status or [])
    )
    if result.error is not None:
        raise_role_request_error(result.error)
    return RoleRequestsListRes(
        requests=[to_role_request_res(r) for r in result.requests]
    )
