"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato esperado del servicio de auth gestionado.
    - Definir el contrato del almacén de selección de rol ("local storage").
    - Proteger a application de detalles del proveedor (HTTP, Redis).

Colaboradores:
    - infrastructure/services/hosted_auth_client.py: AuthGateway real (httpx).
    - infrastructure/services/in_memory_auth.py: AuthGateway para tests/local.
    - infrastructure/session_store.py: SelectionStore (redis / memoria).
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces y value objects: nada de implementación.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol
from uuid import UUID

# Clave fija de la selección de rol activo.
SELECTED_ROLE_KEY = "selectedRole"


@dataclass(frozen=True, slots=True)
class AuthIdentity:
    """Identidad autenticada (usuario del servicio de auth)."""

    user_id: UUID
    email: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AuthTokens:
    """Resultado de un sign-in exitoso."""

    access_token: str
    refresh_token: str
    expires_in: int
    identity: AuthIdentity
    session_id: str


@dataclass(frozen=True, slots=True)
class NewAccount:
    email: str
    password: str
    metadata: dict[str, Any] = field(default_factory=dict)


class AuthGateway(Protocol):
    """
    Contrato del servicio de auth gestionado.

    Errores:
      - AuthError: credenciales / token rechazados.
      - BackendError: el servicio respondió con error.
      - BackendTimeoutError: el servicio no respondió a tiempo.
    """

    def sign_in_with_password(self, email: str, password: str) -> AuthTokens: ...

    def get_user(self, access_token: str) -> AuthIdentity: ...

    def sign_up(self, account: NewAccount) -> AuthIdentity: ...

    def sign_out(self, access_token: str) -> None: ...

    def admin_create_user(self, account: NewAccount) -> AuthIdentity:
        """Crea un usuario confirmado usando credenciales privilegiadas."""
        ...


class SelectionStore(Protocol):
    """
    Almacén clave/valor por sesión (equivalente a localStorage del cliente).

    scope: identificador de la sesión de auth.
    """

    def get_item(self, scope: str, key: str) -> Optional[str]: ...

    def set_item(self, scope: str, key: str, value: str) -> None: ...

    def remove_item(self, scope: str, key: str) -> None: ...
