"""
===============================================================================
ACCOUNT USE CASE RESULTS
===============================================================================

Responsibilities:
    - Datos de alta de cuenta (AccountData) y sus validaciones de campos.
    - Códigos de error y DTOs de resultado (signup / admin-signup / perfil /
      gestión de roles).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from ....domain.entities import Profile
from ....domain.roles import AppRole

MSG_MISSING_FIELDS = "Campos faltantes: {fields}"
MSG_DUPLICATE_ID_NUMBER = "Ya existe un usuario con esta cédula"
MSG_USER_CREATED = "Usuario creado exitosamente"
MSG_SIGNED_UP = "Registro exitoso"
MSG_FORBIDDEN = "No tienes permisos para realizar esta acción"
MSG_PROFILE_NOT_FOUND = "Perfil no encontrado"
MSG_UNKNOWN_ROLE = "Rol desconocido: {value}"
MSG_ROLES_REQUIRED = "Debe indicar al menos un rol"
MSG_ROLES_UPDATED = "Rol actualizado correctamente"
MSG_ROLE_REVOKED = "Rol retirado correctamente"
MSG_ROLE_NOT_HELD = "El usuario no tiene asignado el rol {label}"

_REQUIRED_FIELDS = (
    "email",
    "password",
    "first_name",
    "surname_1",
    "id_number",
    "phone",
    "address",
)


class AccountErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class AccountError:
    code: AccountErrorCode
    message: str


@dataclass(frozen=True)
class AccountData:
    email: str = ""
    password: str = ""
    first_name: str = ""
    surname_1: str = ""
    id_number: str = ""
    phone: str = ""
    address: str = ""
    middle_name: Optional[str] = None
    surname_2: Optional[str] = None

    def missing_fields(self, extra: Dict[str, Any] | None = None) -> List[str]:
        values = {name: getattr(self, name) for name in _REQUIRED_FIELDS}
        values.update(extra or {})
        return [name for name, value in values.items() if not (value or "").strip()]

    def user_metadata(self) -> Dict[str, Any]:
        """Metadatos que viajan con la identidad de auth."""
        return {
            "first_name": self.first_name.strip(),
            "middle_name": self.middle_name,
            "surname_1": self.surname_1.strip(),
            "surname_2": self.surname_2,
            "id_number": self.id_number.strip(),
            "phone": self.phone.strip(),
            "address": self.address.strip(),
        }

    def to_profile(self, user_id: UUID) -> Profile:
        return Profile(
            user_id=user_id,
            first_name=self.first_name.strip(),
            middle_name=(self.middle_name or "").strip() or None,
            surname_1=self.surname_1.strip(),
            surname_2=(self.surname_2 or "").strip() or None,
            id_number=self.id_number.strip(),
            phone=self.phone.strip(),
            address=self.address.strip(),
            email=self.email.strip(),
        )


@dataclass
class AccountResult:
    user_id: UUID | None = None
    email: str | None = None
    role: AppRole | None = None
    message: str | None = None
    error: AccountError | None = None


@dataclass
class ProfileResult:
    user_id: UUID | None = None
    email: str | None = None
    profile: Profile | None = None
    roles: List[AppRole] = field(default_factory=list)
    active_role: AppRole | None = None
    error: AccountError | None = None


@dataclass
class UserRolesResult:
    user_id: UUID | None = None
    roles: List[AppRole] = field(default_factory=list)
    message: str | None = None
    error: AccountError | None = None
