from .list_audit_events import (
    AUDIT_VIEWER_ROLES,
    AuditError,
    AuditErrorCode,
    AuditEventListResult,
    ListAuditEventsInput,
    ListAuditEventsUseCase,
)

__all__ = [
    "AUDIT_VIEWER_ROLES",
    "AuditError",
    "AuditErrorCode",
    "AuditEventListResult",
    "ListAuditEventsInput",
    "ListAuditEventsUseCase",
]
