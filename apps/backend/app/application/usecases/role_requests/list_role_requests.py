"""
===============================================================================
USE CASE: List Role Requests
===============================================================================

Reglas:
    - Administradores (rol otorgado) ven todas las solicitudes.
    - El resto ve sólo las propias.
    - Filtro opcional por estado; más nuevas primero.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from ....domain.entities import RoleRequestStatus
from ....domain.repositories import RoleGrantRepository, RoleRequestRepository
from ....domain.roles import AppRole
from .role_request_results import (
    ListRoleRequestsResult,
    RoleRequestError,
    RoleRequestErrorCode,
)


@dataclass(frozen=True)
class ListRoleRequestsInput:
    actor_id: UUID
    statuses: List[str] = field(default_factory=list)


class ListRoleRequestsUseCase:
    def __init__(
        self, *, grants: RoleGrantRepository, requests: RoleRequestRepository
    ) -> None:
        self._grants = grants
        self._requests = requests

    def execute(self, input_data: ListRoleRequestsInput) -> ListRoleRequestsResult:
        try:
            statuses = [RoleRequestStatus(s) for s in input_data.statuses]
        except ValueError:
            return ListRoleRequestsResult(
                error=RoleRequestError(
                    RoleRequestErrorCode.VALIDATION_ERROR, "Estado de solicitud inválido"
                )
            )

        is_admin = AppRole.ADMINISTRATOR in self._grants.list_roles(input_data.actor_id)
        requests = self._requests.list_requests(
            requester_id=None if is_admin else input_data.actor_id,
            statuses=statuses or None,
        )
        return ListRoleRequestsResult(requests=requests)
