"""
===============================================================================
TARJETA CRC — app/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir las fallas de infraestructura del back-office (DB de la
    cooperativa, almacén de selección, servicio de auth) a RFC7807.
  - Loguear cada falla una sola vez con error_id + request_id.
  - No filtrar detalles internos en producción.

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: BackofficeError y derivadas
  - crosscutting.config.get_settings
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    AuthError,
    BackendError,
    BackendTimeoutError,
    BackofficeError,
    DatabaseError,
    SelectionStoreError,
)
from ..crosscutting.logger import logger


@dataclass(frozen=True, slots=True)
class ServiceErrorMapping:
    status_code: int
    code: ErrorCode
    headers: dict[str, str] | None = None


# Subclases antes que BackofficeError.
SERVICE_ERROR_MAPPINGS: dict[type[BackofficeError], ServiceErrorMapping] = {
    DatabaseError: ServiceErrorMapping(503, ErrorCode.DATABASE_ERROR),
    SelectionStoreError: ServiceErrorMapping(503, ErrorCode.SERVICE_UNAVAILABLE),
    BackendTimeoutError: ServiceErrorMapping(504, ErrorCode.BACKEND_TIMEOUT),
    BackendError: ServiceErrorMapping(502, ErrorCode.BACKEND_ERROR),
    AuthError: ServiceErrorMapping(
        401, ErrorCode.UNAUTHORIZED, {"WWW-Authenticate": "Bearer"}
    ),
    BackofficeError: ServiceErrorMapping(500, ErrorCode.INTERNAL_ERROR),
}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def mapping_for(exc: BackofficeError) -> ServiceErrorMapping:
    for error_type in type(exc).__mro__:
        if error_type in SERVICE_ERROR_MAPPINGS:
            return SERVICE_ERROR_MAPPINGS[error_type]
    return SERVICE_ERROR_MAPPINGS[BackofficeError]


async def service_error_handler(request: Request, exc: BackofficeError) -> JSONResponse:
    mapping = mapping_for(exc)

    log = logger.warning if mapping.status_code < 500 else logger.error
    log(
        "Error de servicio",
        extra={
            "code": mapping.code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "detail": exc.message,
            "request_id": _request_id_from(request),
        },
    )

    return await app_exception_handler(
        request,
        AppHTTPException(
            status_code=mapping.status_code,
            code=mapping.code,
            detail=exc.message,
            errors=[{"error_id": exc.error_id}],
            headers=mapping.headers,
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Excepciones no tipadas: stacktrace al log, mensaje genérico en producción."""
    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": _request_id_from(request)},
    )

    detail = "Error interno." if get_settings().is_production() else str(exc)
    return await app_exception_handler(
        request, AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)
    )


def register_exception_handlers(app) -> None:
    for error_type in SERVICE_ERROR_MAPPINGS:
        app.add_exception_handler(error_type, service_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers", "SERVICE_ERROR_MAPPINGS"]
