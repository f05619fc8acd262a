"""
===============================================================================
USE CASE: Resolve Role Request
===============================================================================

Business Goal:
    Un administrador aprueba y/o rechaza roles de una solicitud abierta. Se
    puede resolver en varias revisiones: los roles no mencionados siguen
    pendientes.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    ResolveRoleRequestUseCase

Responsibilities:
    - Verificar que el actor tenga el rol administrador otorgado.
    - Validar la resolución y fusionarla con las anteriores.
    - Otorgar cada rol recién aprobado (sin duplicar).
    - Notificar al solicitante (best-effort) y auditar.

Error Mapping:
    - FORBIDDEN: el actor no es administrador.
    - VALIDATION_ERROR: falta request_id, listas vacías, rol ajeno o en ambas listas.
    - NOT_FOUND: la solicitud no existe.
    - CONFLICT: la solicitud ya no está abierta.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional
from uuid import UUID, uuid4

from ....audit import AuditAction, emit_audit_event
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_role_request_resolution
from ....domain.entities import (
    Notification,
    NotificationType,
    RoleRequest,
    utcnow,
)
from ....domain.repositories import (
    AuditEventRepository,
    NotificationRepository,
    RoleGrantRepository,
    RoleRequestRepository,
)
from ....domain.role_request_policy import (
    NOTIFY_REQUESTER_TITLE,
    ResolutionOutcome,
    merge_resolution,
    requester_notification_message,
    validate_resolution,
)
from ....domain.roles import AppRole
from ._parsing import parse_roles
from .role_request_results import (
    MSG_ALREADY_PROCESSED,
    MSG_FORBIDDEN_NOT_ADMIN,
    MSG_REQUEST_NOT_FOUND,
    MSG_RESOLUTION_REQUIRED,
    MSG_RESOLVED,
    RoleRequestError,
    RoleRequestErrorCode,
    RoleRequestResult,
)


@dataclass(frozen=True)
class ResolveRoleRequestInput:
    actor_id: UUID
    request_id: Optional[UUID] = None
    approved_roles: List[str] = field(default_factory=list)
    rejected_roles: List[str] = field(default_factory=list)
    notes: Optional[str] = None


class ResolveRoleRequestUseCase:
    def __init__(
        self,
        *,
        grants: RoleGrantRepository,
        requests: RoleRequestRepository,
        notifications: NotificationRepository,
        audit_repo: AuditEventRepository | None = None,
    ) -> None:
        self._grants = grants
        self._requests = requests
        self._notifications = notifications
        self._audit_repo = audit_repo

    def execute(self, input_data: ResolveRoleRequestInput) -> RoleRequestResult:
        if AppRole.ADMINISTRATOR not in self._grants.list_roles(input_data.actor_id):
            return self._error(RoleRequestErrorCode.FORBIDDEN, MSG_FORBIDDEN_NOT_ADMIN)

        if input_data.request_id is None or not (
            input_data.approved_roles or input_data.rejected_roles
        ):
            return self._error(RoleRequestErrorCode.VALIDATION_ERROR, MSG_RESOLUTION_REQUIRED)

        approve, parse_error = parse_roles(input_data.approved_roles)
        if parse_error is None:
            reject, parse_error = parse_roles(input_data.rejected_roles)
        if parse_error is not None:
            return RoleRequestResult(error=parse_error)

        request = self._requests.get_request(input_data.request_id)
        if request is None:
            return self._error(RoleRequestErrorCode.NOT_FOUND, MSG_REQUEST_NOT_FOUND)
        if not request.is_open:
            return self._error(RoleRequestErrorCode.CONFLICT, MSG_ALREADY_PROCESSED)

        message = validate_resolution(request, approve, reject)
        if message is not None:
            return self._error(RoleRequestErrorCode.VALIDATION_ERROR, message)

        outcome = merge_resolution(request, approve, reject)
        notes = (input_data.notes or "").strip() or None
        resolved = replace(
            request,
            approved_roles=outcome.approved_roles,
            rejected_roles=outcome.rejected_roles,
            status=outcome.status,
            reviewed_at=utcnow(),
            reviewed_by=input_data.actor_id,
            notes=notes or request.notes,
        )
        self._requests.save_resolution(resolved)

        for role in outcome.newly_approved:
            self._grants.add_role(request.requester_id, role)

        if outcome.newly_approved or outcome.newly_rejected:
            self._notify_requester(resolved, outcome, notes)

        record_role_request_resolution(outcome.status.value)
        emit_audit_event(
            self._audit_repo,
            action=AuditAction.ROLE_REQUEST_RESOLVED,
            actor_id=input_data.actor_id,
            target_id=request.id,
            metadata={
                "table_name": "role_requests",
                "approved": outcome.newly_approved,
                "rejected": outcome.newly_rejected,
                "status": outcome.status,
            },
        )
        return RoleRequestResult(request=resolved, message=MSG_RESOLVED)

    def _notify_requester(
        self, request: RoleRequest, outcome: ResolutionOutcome, notes: str | None
    ) -> None:
        try:
            self._notifications.create_notification(
                Notification(
                    id=uuid4(),
                    user_id=request.requester_id,
                    title=NOTIFY_REQUESTER_TITLE,
                    message=requester_notification_message(
                        outcome.newly_approved, outcome.newly_rejected, notes
                    ),
                    type=NotificationType.ROLE_RESPONSE,
                    metadata={
                        "request_id": str(request.id),
                        "approved_roles": [r.value for r in outcome.newly_approved],
                        "rejected_roles": [r.value for r in outcome.newly_rejected],
                        "status": outcome.status.value,
                    },
                )
            )
        except Exception as exc:
            logger.error(
                "No se pudo notificar al solicitante",
                extra={"request_id": str(request.id), "error": str(exc)},
            )

    @staticmethod
    def _error(code: RoleRequestErrorCode, message: str) -> RoleRequestResult:
        return RoleRequestResult(error=RoleRequestError(code=code, message=message))
