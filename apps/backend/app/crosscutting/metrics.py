"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus): observabilidad de bajo acoplamiento

Responsabilidades:
    - Definir métricas Prometheus en un registry propio.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO user_id, NO IDs dinámicos en labels).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - application/usecases/session: resultados de login / selección de rol.
    - application/usecases/role_requests: resoluciones de solicitudes.
    - application/usecases/incidents: moderaciones de incidentes de vía.
    - infrastructure/services/hosted_auth_client: llamadas al backend gestionado.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ------------------------
# HTTP
# ------------------------
_requests_total = Counter(
    "backoffice_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "backoffice_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)

# ------------------------
# Sesión / roles
# ------------------------
_session_outcomes_total = Counter(
    "backoffice_session_outcomes_total",
    "Resultados del flujo de selección de rol",
    ["operation", "outcome"],
    registry=_registry,
)

_role_request_resolutions_total = Counter(
    "backoffice_role_request_resolutions_total",
    "Resoluciones de solicitudes de roles por estado resultante",
    ["status"],
    registry=_registry,
)

_incident_moderations_total = Counter(
    "backoffice_incident_moderations_total",
    "Moderaciones de incidentes de vía por estado resultante",
    ["status"],
    registry=_registry,
)

# ------------------------
# Backend gestionado (auth)
# ------------------------
_backend_call_latency = Histogram(
    "backoffice_backend_call_latency_seconds",
    "Latencia de llamadas al servicio de auth (segundos)",
    ["operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
    registry=_registry,
)

_backend_call_failures_total = Counter(
    "backoffice_backend_call_failures_total",
    "Fallas de llamadas al servicio de auth",
    ["operation", "reason"],
    registry=_registry,
)


# -----------------------------------------------------------------------------
# API pública (helpers de registro)
# -----------------------------------------------------------------------------


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP.

    - endpoint se normaliza para no explotar cardinalidad.
    - status se agrupa por 2xx/4xx/5xx.
    """
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized,
        method=method,
        status=_status_bucket(status_code),
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_session_outcome(operation: str, outcome: str) -> None:
    """operation: login|select_role|switch_role|restore; outcome: estado o código de error."""
    _session_outcomes_total.labels(operation=operation, outcome=outcome).inc()


def record_role_request_resolution(status: str) -> None:
    _role_request_resolutions_total.labels(status=status).inc()


def record_incident_moderation(status: str) -> None:
    _incident_moderations_total.labels(status=status).inc()


def observe_backend_call(operation: str, seconds: float) -> None:
    _backend_call_latency.labels(operation=operation).observe(seconds)


def record_backend_failure(operation: str, reason: str) -> None:
    """reason: timeout|network|rejected|http_<status>."""
    _backend_call_failures_total.labels(operation=operation, reason=reason).inc()


# -----------------------------------------------------------------------------
# Helpers internos
# -----------------------------------------------------------------------------


def _normalize_endpoint(path: str) -> str:
    """Normaliza paths para evitar cardinalidad alta.

    Reemplaza UUIDs e IDs numéricos por `{id}`.
    """
    path = re.sub(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        "{id}",
        path,
        flags=re.IGNORECASE,
    )
    path = re.sub(r"/\d+", "/{id}", path)
    return path


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 300 <= code < 400:
        return "3xx"
    if 400 <= code < 500:
        return "4xx"
    return "5xx"


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
