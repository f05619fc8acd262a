"""
===============================================================================
TARJETA CRC — domain/roles.py
===============================================================================

Módulo:
    Enumeración cerrada de roles de la cooperativa

Responsabilidades:
    - Definir AppRole como único tipo de rol (datos + clave de autorización).
    - Centralizar etiquetas, prioridad de visualización y conjuntos de política.
    - Verificar al importar que toda tabla cubre exactamente todos los roles.

Colaboradores:
    - domain.eligibility: qué roles están sujetos a horario.
    - domain.session: orden y etiquetas de las opciones de rol.
    - application.usecases.*: validación de solicitudes y permisos.

Notas:
    - Agregar un rol exige completar ROLE_LABELS y ROLE_PRIORITY; si no,
      el módulo falla al importar.
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class AppRole(str, Enum):
    """Roles asignables a una identidad (tabla user_roles)."""

    ADMINISTRATOR = "administrator"
    PRESIDENT = "president"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    PARTNER = "partner"
    DRIVER = "driver"
    OFFICIAL = "official"
    CLIENT = "client"


class UnknownRoleError(ValueError):
    """Valor de rol que no pertenece a AppRole."""

    def __init__(self, value: object):
        super().__init__(f"Rol desconocido: {value!r}")
        self.value = value


ROLE_LABELS: dict[AppRole, str] = {
    AppRole.ADMINISTRATOR: "Administrador",
    AppRole.PRESIDENT: "Presidente",
    AppRole.MANAGER: "Gerente",
    AppRole.EMPLOYEE: "Empleado",
    AppRole.PARTNER: "Socio",
    AppRole.DRIVER: "Conductor",
    AppRole.OFFICIAL: "Dirigente",
    AppRole.CLIENT: "Cliente",
}

# Orden en que se presentan los roles al elegir (más privilegiado primero).
ROLE_PRIORITY: tuple[AppRole, ...] = (
    AppRole.ADMINISTRATOR,
    AppRole.PRESIDENT,
    AppRole.MANAGER,
    AppRole.EMPLOYEE,
    AppRole.PARTNER,
    AppRole.OFFICIAL,
    AppRole.DRIVER,
    AppRole.CLIENT,
)

# Roles que pueden tener filas en employee_schedules.
SCHEDULE_ASSIGNABLE_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.EMPLOYEE, AppRole.DRIVER, AppRole.OFFICIAL}
)

# Roles cuya activación depende de una ventana horaria.
SCHEDULE_GATED_ROLES: frozenset[AppRole] = frozenset({AppRole.EMPLOYEE})

# Roles activos que pueden administrar horarios.
SCHEDULE_MANAGER_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.ADMINISTRATOR, AppRole.PRESIDENT, AppRole.MANAGER}
)

# Roles que un usuario puede solicitar como adicionales.
REQUESTABLE_ROLES: frozenset[AppRole] = frozenset(
    {
        AppRole.DRIVER,
        AppRole.OFFICIAL,
        AppRole.PARTNER,
        AppRole.EMPLOYEE,
        AppRole.MANAGER,
        AppRole.ADMINISTRATOR,
    }
)

# Dueños de bus en el chat con conductores (rol activo).
BUS_OWNER_ROLES: frozenset[AppRole] = frozenset({AppRole.PARTNER, AppRole.ADMINISTRATOR})

# Roles activos que ven el chat de buses.
BUS_CHAT_ROLES: frozenset[AppRole] = BUS_OWNER_ROLES | {AppRole.DRIVER}

# Roles activos que pueden reportar incidentes de vía.
INCIDENT_REPORTER_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.DRIVER, AppRole.OFFICIAL, AppRole.ADMINISTRATOR}
)

# Roles activos que moderan incidentes.
INCIDENT_MODERATOR_ROLES: frozenset[AppRole] = frozenset(
    {AppRole.ADMINISTRATOR, AppRole.MANAGER, AppRole.PRESIDENT}
)

# Rol asignado a toda cuenta creada por registro público.
DEFAULT_SIGNUP_ROLE = AppRole.CLIENT

_PRIORITY_INDEX: dict[AppRole, int] = {
    role: idx for idx, role in enumerate(ROLE_PRIORITY)
}


def _assert_exhaustive() -> None:
    every_role = set(AppRole)
    if set(ROLE_LABELS) != every_role:
        missing = sorted(r.value for r in every_role - set(ROLE_LABELS))
        raise RuntimeError(f"ROLE_LABELS incompleto: {missing}")
    if set(ROLE_PRIORITY) != every_role or len(ROLE_PRIORITY) != len(every_role):
        raise RuntimeError("ROLE_PRIORITY debe listar cada rol exactamente una vez")


_assert_exhaustive()


def parse_role(value: object) -> AppRole:
    """Convierte un valor crudo (ej: columna user_roles.role) en AppRole."""
    if isinstance(value, AppRole):
        return value
    try:
        return AppRole(str(value).strip().lower())
    except ValueError as exc:
        raise UnknownRoleError(value) from exc


def role_label(role: AppRole) -> str:
    return ROLE_LABELS[role]


def sort_roles(roles: Iterable[AppRole]) -> list[AppRole]:
    """Deduplica y ordena por prioridad de visualización."""
    return sorted(set(roles), key=_PRIORITY_INDEX.__getitem__)


def format_role_labels(roles: Iterable[AppRole]) -> str:
    """Etiquetas separadas por coma, en orden de prioridad."""
    return ", ".join(ROLE_LABELS[r] for r in sort_roles(roles))
