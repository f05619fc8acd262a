# apps/backend/app/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) del back-office
===============================================================================

Objetivo
--------
Cada línea de log es un objeto JSON con el contexto de sesión del request
(request_id, user_id, session_id, active_role) y sin datos personales de
socios o clientes en claro.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Serializar LogRecord + extras a JSON
  - Enmascarar cédula, teléfono y email; ocultar credenciales
  - Leer nivel/formato desde Settings

Colaboradores:
  - app/context.py (ContextVars)
  - crosscutting/config.py (log_level, log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

# Atributos estándar de LogRecord; todo lo demás viene de extra={...}.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "taskName"}

_HIDDEN = "***"

# Credenciales: nunca se emiten.
SECRET_KEYS = frozenset(
    {
        "password",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "apikey",
        "auth_anon_key",
        "auth_service_key",
        "auth_jwt_secret",
    }
)

# Datos personales: se emiten enmascarados (últimos dígitos / dominio).
MASKED_KEYS = frozenset({"id_number", "phone", "email"})


def mask_value(key: str, value: Any) -> str:
    """
    Enmascara un dato personal.

    - cédula / teléfono: sólo los últimos 3 caracteres
    - email: primera letra + dominio
    """
    text = str(value or "")
    if not text:
        return text
    if key == "email":
        local, _, domain = text.partition("@")
        return f"{local[:1]}{_HIDDEN}@{domain}" if domain else _HIDDEN
    return f"{_HIDDEN}{text[-3:]}" if len(text) > 3 else _HIDDEN


def sanitize(value: Any, *, key: str | None = None, depth: int = 0) -> Any:
    lowered = (key or "").lower()
    if lowered in SECRET_KEYS:
        return _HIDDEN
    if lowered in MASKED_KEYS:
        return mask_value(lowered, value)
    if depth > 4:
        return "…"

    if isinstance(value, dict):
        return {str(k): sanitize(v, key=str(k), depth=depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [sanitize(v, key=key, depth=depth + 1) for v in value]
    if isinstance(value, str) and len(value) > 2_000:
        # R: mensajes de chat y descripciones largas se recortan.
        return value[:2_000] + "…"
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON de una línea, con contexto de sesión y extras saneados."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update(get_context_dict())

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                payload[key] = sanitize(value, key=key)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def setup_logger(name: str = "backoffice-api") -> logging.Logger:
    """
    Logger global del servicio (idempotente ante reimport).

    Si Settings no valida todavía (p.ej. falta DATABASE_URL) arranca en INFO/JSON;
    el error real lo reporta el arranque de la app.
    """
    log = logging.getLogger(name)

    level, use_json = "INFO", True
    try:
        from .config import get_settings

        settings = get_settings()
        level, use_json = (settings.log_level or "INFO").upper(), settings.log_json
    except ValidationError:
        pass

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter() if use_json else logging.Formatter("%(levelname)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
