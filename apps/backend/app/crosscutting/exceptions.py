# apps/backend/app/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Fallas de infraestructura del back-office
===============================================================================

Los casos de uso devuelven sus errores de negocio en el resultado; estas
excepciones cubren sólo lo que falla *fuera* del negocio:

- DatabaseError: la base de la cooperativa (pool, query, statement_timeout).
- BackendError: el servicio de auth respondió con un error o no se pudo
  contactar.
- BackendTimeoutError: el servicio de auth no respondió dentro de
  backend_timeout_seconds. Es un tipo distinto a BackendError (504 vs 502).
- AuthError: credenciales o token rechazados (401).
- SelectionStoreError: el almacén del selectedRole (redis) no responde.

Cada instancia lleva error_id (uuid4) para cruzar la respuesta RFC7807 con
la línea de log. api/exception_handlers.py las traduce a HTTP.
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class BackofficeError(Exception):
    error_code: str = "BACKOFFICE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error


class DatabaseError(BackofficeError):
    error_code: str = "DATABASE_ERROR"


class _HostedAuthFailure(BackofficeError):
    """Falla de una llamada puntual al servicio de auth (sign_in, get_user, ...)."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, error_id=error_id, original_error=original_error)
        self.operation = operation


class BackendError(_HostedAuthFailure):
    error_code: str = "BACKEND_ERROR"

    def __init__(self, message: str, *, status_code: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        # 0 = sin respuesta HTTP (red caída, payload inválido).
        self.status_code = status_code


class BackendTimeoutError(_HostedAuthFailure):
    error_code: str = "BACKEND_TIMEOUT"


class AuthError(BackofficeError):
    error_code: str = "AUTH_ERROR"


class SelectionStoreError(BackofficeError):
    error_code: str = "SELECTION_STORE_ERROR"
