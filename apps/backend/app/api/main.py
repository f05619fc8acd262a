"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount the back-office router (auth, role requests, schedules, ...)
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: business endpoints
  - infrastructure.db.pool: Postgres connection pool lifecycle

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - In test env (APP_ENV=test) no pool is created: repositories are in-memory

Notes:
  - Middleware order matters: BodyLimit → RequestContext → CORS → routes
  - /healthz is liveness (process up); /readyz checks DB and selection store
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_auth_gateway, get_selection_store, reset_container
from ..crosscutting.config import get_settings
from ..crosscutting.exceptions import BackofficeError
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..infrastructure.db import (
    DatabasePoolError,
    check_pool,
    close_pool,
    init_pool,
    is_pool_initialized,
)
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers

APP_TITLE = "Cooperativa Mariscal Sucre - Back-office API"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes pool."""
    settings = get_settings()

    if not settings.is_test():
        # R: must happen before any Postgres repository usage
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
            time_zone=settings.cooperative_timezone,
            acquire_timeout_seconds=settings.backend_timeout_seconds,
        )

    try:
        logger.info(
            "Back-office API starting up",
            extra={
                "app_env": settings.app_env,
                "auth_url": settings.auth_url,
                "timezone": settings.cooperative_timezone,
                "selection_store": "redis" if settings.redis_url.strip() else "memory",
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        gateway = get_auth_gateway()
        close = getattr(gateway, "close", None)
        if callable(close):
            close()
        close_pool()
        reset_container()
        logger.info("Back-office API shutting down")


def _get_allowed_origins() -> list[str]:
    return get_settings().get_allowed_origins_list()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Login y selector de rol"},
            {"name": "accounts", "description": "Registro y perfil"},
            {"name": "role-requests", "description": "Solicitudes de roles"},
            {"name": "schedules", "description": "Horarios de empleados"},
            {"name": "notifications", "description": "Notificaciones in-app"},
            {"name": "support", "description": "Chat de soporte"},
            {"name": "audit", "description": "Registro de auditoría"},
        ],
    )

    # R: Middleware order (bottom = first to execute):
    # 1. BodyLimitMiddleware - rejects oversized bodies early
    # 2. RequestContextMiddleware - sets request_id
    # 3. CORSMiddleware - handles preflight
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_allowed_origins(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Request-Id",
            "apikey",
            "x-client-info",
        ],
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(BodyLimitMiddleware, max_bytes=settings.max_body_bytes)

    app.include_router(router)
    register_exception_handlers(app)

    @app.get("/healthz", tags=["ops"])
    def healthz(request: Request):
        """Liveness: el proceso responde."""
        return {
            "ok": True,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/readyz", tags=["ops"])
    def readyz(request: Request, response: Response):
        """
        Readiness: DB (si hay pool) y almacén de selección.

        Returns:
            ok: True si las dependencias responden
            db: "connected" | "disconnected" | "skipped"
            selection_store: "connected" | "disconnected" | "memory"
        """
        db_status = "skipped"
        if is_pool_initialized():
            db_status = "connected"
            try:
                check_pool()
            except DatabasePoolError as exc:
                logger.warning("Ready check: DB unavailable", extra={"error": str(exc)})
                db_status = "disconnected"

        store_status = "memory"
        store = get_selection_store()
        ping = getattr(store, "ping", None)
        if callable(ping):
            store_status = "connected"
            try:
                ping()
            except BackofficeError as exc:
                logger.warning(
                    "Ready check: selection store unavailable",
                    extra={"error": exc.message},
                )
                store_status = "disconnected"

        ok = db_status != "disconnected" and store_status != "disconnected"
        if not ok:
            response.status_code = 503
        return {
            "ok": ok,
            "db": db_status,
            "selection_store": store_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics", tags=["ops"])
    def metrics():
        """Expose Prometheus metrics (text format)."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
