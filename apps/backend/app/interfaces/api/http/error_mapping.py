"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - Los use cases devuelven errores tipados (code + message).
  - La API traduce a RFC7807 (crosscutting.error_responses).
  - VALIDATION_ERROR de un caso de uso => 400 (el 422 queda para el schema).
  - Excepciones de infraestructura (DatabaseError, BackendError, ...) NO pasan
    por acá: las resuelven los exception handlers globales.

Colaboradores:
  - application.usecases.* (códigos de error por feature)
  - crosscutting.error_responses (bad_request, forbidden, etc.)
===============================================================================
"""

from __future__ import annotations

from typing import Callable, NoReturn

from app.application.usecases.accounts import AccountError, AccountErrorCode
from app.application.usecases.audit import AuditError, AuditErrorCode
from app.application.usecases.bus_chat import BusChatError, BusChatErrorCode
from app.application.usecases.incidents import IncidentError, IncidentErrorCode
from app.application.usecases.notifications import (
    NotificationError,
    NotificationErrorCode,
)
from app.application.usecases.role_requests import (
    RoleRequestError,
    RoleRequestErrorCode,
)
from app.application.usecases.schedules import ScheduleError, ScheduleErrorCode
from app.application.usecases.session import SessionError, SessionErrorCode
from app.application.usecases.support_chat import SupportError, SupportErrorCode
from app.crosscutting.error_responses import (
    AppHTTPException,
    backend_error,
    backend_timeout,
    bad_request,
    conflict,
    forbidden,
    internal_error,
    not_found,
    schedule_denied,
    unauthorized,
)

_GENERIC: dict[str, Callable[[str], AppHTTPException]] = {
    "VALIDATION_ERROR": bad_request,
    "FORBIDDEN": forbidden,
    "NOT_FOUND": not_found,
    "CONFLICT": conflict,
}


def _generic(code: str, message: str) -> AppHTTPException:
    factory = _GENERIC.get(code)
    if factory is None:
        # Fallback: código nuevo sin mapeo explícito.
        return internal_error(message)
    return factory(message)


def raise_session_error(error: SessionError) -> NoReturn:
    """Traduce SessionErrorCode -> HTTP."""
    if error.code == SessionErrorCode.INVALID_CREDENTIALS:
        raise unauthorized(error.message)
    if error.code == SessionErrorCode.SCHEDULE_DENIED:
        raise schedule_denied(
            error.message,
            role=error.role.value if error.role else "",
            next_available=error.next_available,
        )
    if error.code in (SessionErrorCode.NO_ROLES, SessionErrorCode.ROLE_NOT_GRANTED):
        raise forbidden(error.message)
    if error.code == SessionErrorCode.NOT_AUTHENTICATED:
        raise conflict(error.message)
    if error.code == SessionErrorCode.BACKEND_TIMEOUT:
        raise backend_timeout(error.message)
    if error.code == SessionErrorCode.BACKEND_ERROR:
        raise backend_error(error.message)
    raise internal_error(error.message)


def raise_role_request_error(error: RoleRequestError) -> NoReturn:
    raise _generic(RoleRequestErrorCode(error.code).value, error.message)


def raise_schedule_error(error: ScheduleError) -> NoReturn:
    raise _generic(ScheduleErrorCode(error.code).value, error.message)


def raise_account_error(error: AccountError) -> NoReturn:
    raise _generic(AccountErrorCode(error.code).value, error.message)


def raise_notification_error(error: NotificationError) -> NoReturn:
    raise _generic(NotificationErrorCode(error.code).value, error.message)


def raise_support_error(error: SupportError) -> NoReturn:
    raise _generic(SupportErrorCode(error.code).value, error.message)


def raise_audit_error(error: AuditError) -> NoReturn:
    raise _generic(AuditErrorCode(error.code).value, error.message)


def raise_bus_chat_error(error: BusChatError) -> NoReturn:
    raise _generic(BusChatErrorCode(error.code).value, error.message)


def raise_incident_error(error: IncidentError) -> NoReturn:
    raise _generic(IncidentErrorCode(error.code).value, error.message)
