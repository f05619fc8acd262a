"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por feature (auth/accounts/role-requests/bus-chats/incidents/...).

Patrones aplicados:
  - Composition over inheritance: router raíz compone sub-routers.
  - Feature-based modular routing.
  - Factory: build_router() para testear composición sin side-effects al importar.

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.accounts import router as accounts_router
from .routers.audit import router as audit_router
from .routers.auth import router as auth_router
from .routers.bus_chat import router as bus_chat_router
from .routers.incidents import router as incidents_router
from .routers.notifications import router as notifications_router
from .routers.role_requests import router as role_requests_router
from .routers.schedules import router as schedules_router
from .routers.support import router as support_router


def build_router() -> APIRouter:
    """Construye el router raíz."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    # Sesión primero; auditoría al final.
    api_router.include_router(auth_router)
    api_router.include_router(accounts_router)
    api_router.include_router(role_requests_router)
    api_router.include_router(schedules_router)
    api_router.include_router(notifications_router)
    api_router.include_router(support_router)
    api_router.include_router(bus_chat_router)
    api_router.include_router(incidents_router)
    api_router.include_router(audit_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
