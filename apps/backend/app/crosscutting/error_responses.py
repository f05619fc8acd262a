# apps/backend/app/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas de error del back-office (RFC 7807 / Problem Details)
===============================================================================

Todas las respuestas de error del API comparten el mismo cuerpo
application/problem+json:

    {"type", "title", "status", "detail", "code", "instance", "errors"}

- detail: mensaje en español para mostrar tal cual en el panel.
- code: valor estable de ErrorCode; el front-end decide por code
  (p.ej. SCHEDULE_DENIED muestra el próximo horario disponible).
- errors: datos extra (rol y próxima ventana, error_id, request_id).

Colaboradores:
  - crosscutting/middleware.py (413 sin pasar por FastAPI)
  - api/exception_handlers.py (fallas de infraestructura)
  - interfaces/api/http/error_mapping.py (errores de casos de uso)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    SCHEDULE_DENIED = "SCHEDULE_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"
    BACKEND_ERROR = "BACKEND_ERROR"
    BACKEND_TIMEOUT = "BACKEND_TIMEOUT"


PROBLEM_TITLES: dict[ErrorCode, str] = {
    ErrorCode.BAD_REQUEST: "Solicitud inválida",
    ErrorCode.UNAUTHORIZED: "No autenticado",
    ErrorCode.FORBIDDEN: "Acceso denegado",
    ErrorCode.SCHEDULE_DENIED: "Fuera de horario",
    ErrorCode.NOT_FOUND: "No encontrado",
    ErrorCode.CONFLICT: "Conflicto",
    ErrorCode.PAYLOAD_TOO_LARGE: "Solicitud demasiado grande",
    ErrorCode.INTERNAL_ERROR: "Error interno",
    ErrorCode.SERVICE_UNAVAILABLE: "Servicio no disponible",
    ErrorCode.DATABASE_ERROR: "Base de datos no disponible",
    ErrorCode.BACKEND_ERROR: "Error del servicio de autenticación",
    ErrorCode.BACKEND_TIMEOUT: "El servicio de autenticación no respondió",
}


class ErrorDetail(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


def problem_details(
    code: ErrorCode,
    status: int,
    detail: str,
    *,
    instance: str | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Cuerpo problem+json listo para serializar."""
    return ErrorDetail(
        type=f"about:blank/{code.value.lower()}",
        title=PROBLEM_TITLES[code],
        status=status,
        detail=detail,
        code=code,
        instance=instance,
        errors=errors or None,
    ).model_dump(exclude_none=True, mode="json")


def _openapi_error(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }


OPENAPI_ERROR_RESPONSES = {
    "400": _openapi_error("Datos inválidos"),
    "401": _openapi_error("Token ausente, inválido o sesión finalizada"),
    "403": _openapi_error("Rol activo sin acceso o fuera de horario"),
    "404": _openapi_error("Recurso inexistente o ajeno"),
    "409": _openapi_error("Estado incompatible (solicitud cerrada, sin sesión)"),
    "502": _openapi_error("Error del servicio de autenticación"),
    "503": _openapi_error("Base de datos o almacén de sesión no disponible"),
    "504": _openapi_error("Timeout del servicio de autenticación"),
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y errors[] opcional."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors


def bad_request(detail: str) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.BAD_REQUEST, detail)


def not_found(detail: str) -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def unauthorized(detail: str = "Autenticación requerida") -> AppHTTPException:
    return AppHTTPException(
        401, ErrorCode.UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(detail: str = "Acceso denegado") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def schedule_denied(
    detail: str, *, role: str, next_available: str | None
) -> AppHTTPException:
    """403 con el rol rechazado y la próxima ventana ("Lunes 08:00" / "No definido")."""
    return AppHTTPException(
        403,
        ErrorCode.SCHEDULE_DENIED,
        detail,
        errors=[{"role": role, "next_available": next_available}],
    )


def internal_error(detail: str = "Ocurrió un error inesperado") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def backend_error(detail: str = "Error del servicio de autenticación") -> AppHTTPException:
    return AppHTTPException(502, ErrorCode.BACKEND_ERROR, detail)


def backend_timeout(
    detail: str = "El servicio de autenticación no respondió a tiempo",
) -> AppHTTPException:
    return AppHTTPException(504, ErrorCode.BACKEND_TIMEOUT, detail)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """AppHTTPException -> problem+json; agrega request_id a errors[]."""
    errors = list(exc.errors or [])
    request_id = getattr(getattr(request, "state", None), "request_id", None)
    if request_id:
        errors.append({"request_id": request_id})

    return JSONResponse(
        status_code=exc.status_code,
        content=problem_details(
            exc.code,
            exc.status_code,
            str(exc.detail),
            instance=str(request.url),
            errors=errors,
        ),
        headers=getattr(exc, "headers", None),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
