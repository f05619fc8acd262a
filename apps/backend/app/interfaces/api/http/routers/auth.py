"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/auth.py
===============================================================================

Class/Module:
    Session Router (login + selector de rol)

Responsibilities:
    - Exponer el flujo de sesión: login, selección/cambio de rol, cancelación,
      logout y restauración (equivalente al arranque del cliente).
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir SessionError -> RFC7807.

Collaborators:
    - app.application.usecases.session
    - app.identity.auth_users (require_user)
    - app.container (factories DI)
    - schemas.session (DTOs Pydantic)
===============================================================================
"""

from __future__ import annotations

from app.application.usecases.session import (
    CancelRoleSelectionUseCase,
    LoginInput,
    LoginUseCase,
    RestoreSessionUseCase,
    SelectRoleInput,
    SelectRoleUseCase,
    SessionResult,
    SignOutUseCase,
    SwitchRoleInput,
    SwitchRoleUseCase,
)
from app.container import (
    get_cancel_role_selection_use_case,
    get_login_use_case,
    get_restore_session_use_case,
    get_select_role_use_case,
    get_sign_out_use_case,
    get_switch_role_use_case,
)
from app.identity.auth_users import CurrentUser, require_user
from fastapi import APIRouter, Depends

from ..error_mapping import raise_session_error
from ..schemas.session import LoginReq, SelectRoleReq, SessionRes, to_session_res

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(result: SessionResult, *, include_token: bool = False) -> SessionRes:
    if result.error is not None:
        raise_session_error(result.error)
    return to_session_res(result.session, include_token=include_token)


@router.post("/login", response_model=SessionRes)
def login(
    req: LoginReq,
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    result = use_case.execute(LoginInput(email=req.email, password=req.password))
    return _session_response(result, include_token=True)


@router.post("/select-role", response_model=SessionRes)
def select_role(
    req: SelectRoleReq,
    user: CurrentUser = Depends(require_user()),
    use_case: SelectRoleUseCase = Depends(get_select_role_use_case),
):
    result = use_case.execute(
        SelectRoleInput(credentials=user.credentials(), role=req.role)
    )
    return _session_response(result)


@router.post("/switch-role", response_model=SessionRes)
def switch_role(
    req: SelectRoleReq,
    user: CurrentUser = Depends(require_user()),
    use_case: SwitchRoleUseCase = Depends(get_switch_role_use_case),
):
    result = use_case.execute(
        SwitchRoleInput(credentials=user.credentials(), role=req.role)
    )
    return _session_response(result)


@router.post("/cancel", response_model=SessionRes)
def cancel_selection(
    user: CurrentUser = Depends(require_user()),
    use_case: CancelRoleSelectionUseCase = Depends(get_cancel_role_selection_use_case),
):
    return _session_response(use_case.execute(user.credentials()))


@router.post("/logout", response_model=SessionRes)
def logout(
    user: CurrentUser = Depends(require_user()),
    use_case: SignOutUseCase = Depends(get_sign_out_use_case),
):
    return _session_response(use_case.execute(user.credentials()))


@router.get("/session", response_model=SessionRes)
def restore_session(
    user: CurrentUser = Depends(require_user()),
    use_case: RestoreSessionUseCase = Depends(get_restore_session_use_case),
):
    return _session_response(use_case.execute(user.credentials()))
