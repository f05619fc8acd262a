"""Accounts: public sign-up, admin-created users, role management, own profile."""

from .account_results import (
    AccountData,
    AccountError,
    AccountErrorCode,
    AccountResult,
    ProfileResult,
    UserRolesResult,
)
from .admin_create_user import AdminCreateUserInput, AdminCreateUserUseCase
from .get_profile import GetProfileUseCase
from .manage_user_roles import (
    ReplaceUserRolesInput,
    ReplaceUserRolesUseCase,
    RevokeUserRoleInput,
    RevokeUserRoleUseCase,
)
from .sign_up import SignUpUseCase

__all__ = [
    "AccountData",
    "AccountError",
    "AccountErrorCode",
    "AccountResult",
    "ProfileResult",
    "UserRolesResult",
    "AdminCreateUserInput",
    "AdminCreateUserUseCase",
    "GetProfileUseCase",
    "ReplaceUserRolesInput",
    "ReplaceUserRolesUseCase",
    "RevokeUserRoleInput",
    "RevokeUserRoleUseCase",
    "SignUpUseCase",
]
