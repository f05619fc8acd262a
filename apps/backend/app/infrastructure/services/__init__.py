"""
Infrastructure Services (Infrastructure Layer)

Qué es este módulo
------------------
Facade/Barrel del paquete `infrastructure.services`: expone los adapters del
puerto AuthGateway (servicio de auth gestionado).

CRC (Component Card)
--------------------
Component: infrastructure.services (Facade)
Responsibilities:
  - Publicar los imports canónicos de los gateways de auth
Collaborators:
  - container (inyecta la implementación según APP_ENV)
Constraints:
  - No contener lógica (solo re-export)
"""

from .hosted_auth_client import HostedAuthClient  # noqa: F401
from .in_memory_auth import InMemoryAuthGateway  # noqa: F401

__all__ = [
    "HostedAuthClient",
    "InMemoryAuthGateway",
]
