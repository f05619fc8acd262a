# apps/backend/app/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middlewares HTTP del back-office
===============================================================================

RequestContextMiddleware
  - Acepta o genera X-Request-Id y lo devuelve en la respuesta.
  - Abre el contexto de logs del request y lo cierra siempre.
  - Registra latencia/conteo con la plantilla de ruta (/schedules/{schedule_id}),
    nunca con el path crudo.

BodyLimitMiddleware
  - Rechaza con 413 (RFC7807) los cuerpos mayores a max_body_bytes, tanto por
    Content-Length declarado como contando los chunks recibidos.

Colaboradores:
  - app/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, problem_details
from .logger import logger
from .metrics import record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LENGTH = 128
_QUIET_PATHS = frozenset({"/healthz", "/readyz", "/metrics"})
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def resolve_request_id(incoming: str | None) -> str:
    """Reutiliza el X-Request-Id del cliente si es razonable; si no, genera uno."""
    candidate = (incoming or "").strip()
    if 0 < len(candidate) <= _MAX_REQUEST_ID_LENGTH and candidate.isprintable():
        return candidate
    return str(uuid.uuid4())


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path_format", None) or request.url.path


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Contexto de correlación + log y métricas por request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception("request falló", extra={"status_code": status_code})
            raise
        finally:
            latency = time.perf_counter() - start
            endpoint = route_template(request)
            record_request_metrics(
                endpoint=endpoint,
                method=request.method,
                status_code=status_code,
                latency_seconds=latency,
            )
            if request.url.path not in _QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "endpoint": endpoint,
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )
            clear_context()


class BodyLimitMiddleware:
    """ASGI puro: corta cuerpos demasiado grandes antes de que lleguen a pydantic."""

    def __init__(self, app, max_bytes: int):
        self.app = app
        self._max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        declared = dict(scope.get("headers", [])).get(b"content-length", b"").decode()
        if declared.isdigit() and int(declared) > self._max_bytes:
            logger.warning(
                "payload demasiado grande",
                extra={"content_length": int(declared), "endpoint": path},
            )
            await self._send_413(send, path=path)
            return

        if declared.isdigit() or scope.get("method") not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        # Sin Content-Length (chunked): se bufferiza hasta el límite y se reenvía.
        buffered: list[dict] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self._max_bytes:
                logger.warning(
                    "payload demasiado grande (chunked)",
                    extra={"received_bytes": received, "endpoint": path},
                )
                await self._send_413(send, path=path)
                return
            more_body = message.get("more_body", False)

        async def replay_receive():
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay_receive, send)

    async def _send_413(self, send, *, path: str) -> None:
        problem = problem_details(
            ErrorCode.PAYLOAD_TOO_LARGE,
            413,
            f"El cuerpo de la solicitud supera el máximo de {self._max_bytes} bytes",
            instance=path,
        )

        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [(b"content-type", PROBLEM_JSON_MEDIA_TYPE.encode())],
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": json.dumps(problem, ensure_ascii=False).encode("utf-8"),
            }
        )
