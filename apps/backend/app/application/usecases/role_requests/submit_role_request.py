"""
===============================================================================
USE CASE: Submit Role Request
===============================================================================

Business Goal:
    Un usuario pide roles adicionales con una justificación; cada
    administrador recibe una notificación.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    SubmitRoleRequestUseCase

Responsibilities:
    - Validar el envío (roles + justificación) antes de escribir nada.
    - Crear la solicitud (pending) con todos los roles en una sola fila.
    - Notificar a cada administrador (best-effort).
    - Auditar role_requests.create.

Collaborators:
    - RoleGrantRepository, RoleRequestRepository, NotificationRepository,
      ProfileRepository, AuditEventRepository
    - domain.role_request_policy

Error Mapping:
    - FORBIDDEN: user_id del body distinto al usuario autenticado.
    - VALIDATION_ERROR: roles/justificación vacíos, rol desconocido o no solicitable.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID, uuid4

from ....audit import AuditAction, emit_audit_event
from ....crosscutting.logger import logger
from ....domain.entities import Notification, NotificationType, RoleRequest
from ....domain.repositories import (
    AuditEventRepository,
    NotificationRepository,
    ProfileRepository,
    RoleGrantRepository,
    RoleRequestRepository,
)
from ....domain.role_request_policy import (
    MSG_ROLES_AND_JUSTIFICATION_REQUIRED,
    NOTIFY_ADMIN_TITLE,
    admin_notification_message,
    validate_submission,
)
from ....domain.roles import AppRole
from ._parsing import parse_roles
from .role_request_results import (
    MSG_FORBIDDEN_OTHER_USER,
    MSG_SUBMITTED,
    RoleRequestError,
    RoleRequestErrorCode,
    RoleRequestResult,
)

_UNKNOWN_REQUESTER = "Un usuario"


@dataclass(frozen=True)
class SubmitRoleRequestInput:
    actor_id: UUID
    requested_roles: List[str] = field(default_factory=list)
    justification: str = ""
    user_id: Optional[UUID] = None


class SubmitRoleRequestUseCase:
    def __init__(
        self,
        *,
        grants: RoleGrantRepository,
        requests: RoleRequestRepository,
        notifications: NotificationRepository,
        profiles: ProfileRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._grants = grants
        self._requests = requests
        self._notifications = notifications
        self._profiles = profiles
        self._audit_repo = audit_repo

    def execute(self, input_data: SubmitRoleRequestInput) -> RoleRequestResult:
        if input_data.user_id is not None and input_data.user_id != input_data.actor_id:
            return self._error(RoleRequestErrorCode.FORBIDDEN, MSG_FORBIDDEN_OTHER_USER)

        justification = (input_data.justification or "").strip()
        if not input_data.requested_roles or not justification:
            return self._error(
                RoleRequestErrorCode.VALIDATION_ERROR, MSG_ROLES_AND_JUSTIFICATION_REQUIRED
            )

        requested, parse_error = parse_roles(input_data.requested_roles)
        if parse_error is not None:
            return RoleRequestResult(error=parse_error)

        current = self._grants.list_roles(input_data.actor_id)
        message = validate_submission(requested, current, justification)
        if message is not None:
            return self._error(RoleRequestErrorCode.VALIDATION_ERROR, message)

        request = RoleRequest(
            id=uuid4(),
            requester_id=input_data.actor_id,
            requested_roles=requested,
            justification=justification,
        )
        self._requests.create_request(request)

        self._notify_admins(request)

        emit_audit_event(
            self._audit_repo,
            action=AuditAction.ROLE_REQUEST_CREATED,
            actor_id=input_data.actor_id,
            target_id=request.id,
            metadata={
                "table_name": "role_requests",
                "requested_roles": request.requested_roles,
            },
        )
        return RoleRequestResult(request=request, message=MSG_SUBMITTED)

    def _notify_admins(self, request: RoleRequest) -> None:
        profile = self._profiles.get_profile(request.requester_id)
        name = profile.display_name if profile and profile.display_name else _UNKNOWN_REQUESTER
        message = admin_notification_message(
            name, request.requested_roles, request.justification
        )
        metadata = {
            "request_id": str(request.id),
            "requester_id": str(request.requester_id),
            "requested_roles": [r.value for r in request.requested_roles],
        }

        for admin_id in self._grants.list_users_with_role(AppRole.ADMINISTRATOR):
            try:
                self._notifications.create_notification(
                    Notification(
                        id=uuid4(),
                        user_id=admin_id,
                        title=NOTIFY_ADMIN_TITLE,
                        message=message,
                        type=NotificationType.ROLE_REQUEST,
                        metadata=dict(metadata),
                    )
                )
            except Exception as exc:
                logger.error(
                    "No se pudo notificar al administrador",
                    extra={"admin_id": str(admin_id), "error": str(exc)},
                )

    @staticmethod
    def _error(code: RoleRequestErrorCode, message: str) -> RoleRequestResult:
        return RoleRequestResult(error=RoleRequestError(code=code, message=message))
