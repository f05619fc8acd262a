"""
===============================================================================
TARJETA CRC — app/interfaces/api/http/routers/accounts.py
===============================================================================

Responsibilities:
    - POST /auth/signup: registro público (rol client).
    - GET  /auth/me: identidad + perfil + roles + rol activo.
    - POST /functions/v1/admin-signup: alta por administrador (rol activo).
    - PUT    /admin/users/{user_id}/roles: reemplaza los roles de un usuario.
    - DELETE /admin/users/{user_id}/roles/{role}: retira un rol.

Collaborators:
    - app.application.usecases.accounts
    - app.identity.auth_users (require_user, require_active_role)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.accounts import (
    AdminCreateUserInput,
    AdminCreateUserUseCase,
    AccountResult,
    GetProfileUseCase,
    ReplaceUserRolesInput,
    ReplaceUserRolesUseCase,
    RevokeUserRoleInput,
    RevokeUserRoleUseCase,
    SignUpUseCase,
    UserRolesResult,
)
from app.container import (
    get_admin_create_user_use_case,
    get_profile_use_case,
    get_replace_user_roles_use_case,
    get_revoke_user_role_use_case,
    get_sign_up_use_case,
)
from app.domain.roles import AppRole
from app.identity.auth_users import CurrentUser, require_active_role, require_user
from fastapi import APIRouter, Depends

from ..error_mapping import raise_account_error
from ..schemas.accounts import (
    AccountRes,
    AdminSignUpReq,
    MeRes,
    ReplaceRolesReq,
    SignUpReq,
    UserRolesRes,
    to_me_res,
    to_user_roles_res,
)

router = APIRouter(tags=["accounts"])


def _account_response(result: AccountResult) -> AccountRes:
    if result.error is not None:
        raise_account_error(result.error)
    return AccountRes(
        message=result.message or "",
        user_id=result.user_id,
        email=result.email,
        role=result.role,
    )


@router.post("/auth/signup", response_model=AccountRes, status_code=201)
def sign_up(
    req: SignUpReq,
    use_case: SignUpUseCase = Depends(get_sign_up_use_case),
):
    return _account_response(use_case.execute(req.to_account_data()))


@router.get("/auth/me", response_model=MeRes)
def me(
    user: CurrentUser = Depends(require_user()),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
):
    return to_me_res(use_case.execute(user.credentials()))


@router.post("/functions/v1/admin-signup", response_model=AccountRes)
def admin_signup(
    req: AdminSignUpReq,
    user: CurrentUser = Depends(require_active_role(AppRole.ADMINISTRATOR)),
    use_case: AdminCreateUserUseCase = Depends(get_admin_create_user_use_case),
):
    result = use_case.execute(
        AdminCreateUserInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            account=req.to_account_data(),
            role=req.role,
        )
    )
    return _account_response(result)


def _roles_response(result: UserRolesResult) -> UserRolesRes:
    if result.error is not None:
        raise_account_error(result.error)
    return to_user_roles_res(result)


@router.put("/admin/users/{user_id}/roles", response_model=UserRolesRes)
def replace_user_roles(
    user_id: UUID,
    req: ReplaceRolesReq,
    user: CurrentUser = Depends(require_active_role(AppRole.ADMINISTRATOR)),
    use_case: ReplaceUserRolesUseCase = Depends(get_replace_user_roles_use_case),
):
    result = use_case.execute(
        ReplaceUserRolesInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            user_id=user_id,
            roles=req.roles,
        )
    )
    return _roles_response(result)


@router.delete("/admin/users/{user_id}/roles/{role}", response_model=UserRolesRes)
def revoke_user_role(
    user_id: UUID,
    role: str,
    user: CurrentUser = Depends(require_active_role(AppRole.ADMINISTRATOR)),
    use_case: RevokeUserRoleUseCase = Depends(get_revoke_user_role_use_case),
):
    result = use_case.execute(
        RevokeUserRoleInput(
            actor_id=user.user_id,
            actor_role=user.active_role,
            user_id=user_id,
            role=role,
        )
    )
    return _roles_response(result)
