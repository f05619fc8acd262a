"""Role request workflow: submit, resolve (partial/total), list."""

from .list_role_requests import ListRoleRequestsInput, ListRoleRequestsUseCase
from .resolve_role_request import ResolveRoleRequestInput, ResolveRoleRequestUseCase
from .role_request_results import (
    ListRoleRequestsResult,
    RoleRequestError,
    RoleRequestErrorCode,
    RoleRequestResult,
)
from .submit_role_request import SubmitRoleRequestInput, SubmitRoleRequestUseCase

__all__ = [
    "SubmitRoleRequestInput",
    "SubmitRoleRequestUseCase",
    "ResolveRoleRequestInput",
    "ResolveRoleRequestUseCase",
    "ListRoleRequestsInput",
    "ListRoleRequestsUseCase",
    "ListRoleRequestsResult",
    "RoleRequestError",
    "RoleRequestErrorCode",
    "RoleRequestResult",
]
