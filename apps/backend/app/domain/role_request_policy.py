"""
===============================================================================
TARJETA CRC — domain/role_request_policy.py
===============================================================================

Módulo:
    Política de Solicitudes de Roles (envío y resolución)

Responsabilidades:
    - Calcular qué roles puede solicitar un usuario.
    - Validar un envío ANTES de tocar repositorios.
    - Fusionar una resolución parcial/total del administrador y derivar el estado.
    - Redactar los textos de notificación (admin y solicitante).

Colaboradores:
    - domain.roles (REQUESTABLE_ROLES, etiquetas)
    - domain.entities.RoleRequest / RoleRequestStatus
    - application.usecases.role_requests (orquestación)

Reglas:
    - Los roles no mencionados siguen pendientes.
    - Todos resueltos -> processed; algunos -> partial; ninguno -> pending.
    - Un rol no puede estar aprobado y rechazado a la vez.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .entities import RoleRequest, RoleRequestStatus
from .roles import REQUESTABLE_ROLES, AppRole, format_role_labels, role_label, sort_roles

MSG_ROLES_AND_JUSTIFICATION_REQUIRED = "Roles solicitados y justificación son requeridos"
MSG_ROLE_NOT_REQUESTABLE = "No puedes solicitar el rol {label}"
MSG_ROLE_NOT_IN_REQUEST = "El rol {label} no forma parte de la solicitud"
MSG_ROLE_IN_BOTH_LISTS = "El rol {label} no puede aprobarse y rechazarse a la vez"

NOTIFY_ADMIN_TITLE = "Solicitud de Roles Adicionales"
NOTIFY_REQUESTER_TITLE = "Solicitud de Roles Revisada"


def requestable_roles(current: Iterable[AppRole]) -> list[AppRole]:
    """Complemento de los roles actuales dentro de REQUESTABLE_ROLES."""
    return sort_roles(REQUESTABLE_ROLES - set(current))


def validate_submission(
    requested: Sequence[AppRole],
    current: Iterable[AppRole],
    justification: str | None,
) -> Optional[str]:
    """Devuelve el mensaje de error o None."""
    if not requested or not (justification or "").strip():
        return MSG_ROLES_AND_JUSTIFICATION_REQUIRED

    allowed = set(requestable_roles(current))
    for role in requested:
        if role not in allowed:
            return MSG_ROLE_NOT_REQUESTABLE.format(label=role_label(role))
    return None


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    approved_roles: list[AppRole]
    rejected_roles: list[AppRole]
    newly_approved: list[AppRole]
    newly_rejected: list[AppRole]
    status: RoleRequestStatus


def validate_resolution(
    request: RoleRequest,
    approve: Sequence[AppRole],
    reject: Sequence[AppRole],
) -> Optional[str]:
    requested = set(request.requested_roles)
    for role in [*approve, *reject]:
        if role not in requested:
            return MSG_ROLE_NOT_IN_REQUEST.format(label=role_label(role))
    for role in set(approve) & set(reject):
        return MSG_ROLE_IN_BOTH_LISTS.format(label=role_label(role))
    return None


def merge_resolution(
    request: RoleRequest,
    approve: Sequence[AppRole],
    reject: Sequence[AppRole],
) -> ResolutionOutcome:
    """
    Agrega las decisiones nuevas a las listas existentes.

    Roles ya resueltos en revisiones anteriores no se vuelven a resolver.
    """
    already = set(request.approved_roles) | set(request.rejected_roles)

    newly_approved = [r for r in sort_roles(approve) if r not in already]
    newly_rejected = [r for r in sort_roles(reject) if r not in already]

    approved = [*request.approved_roles, *newly_approved]
    rejected = [*request.rejected_roles, *newly_rejected]

    resolved = set(approved) | set(rejected)
    if resolved >= set(request.requested_roles):
        status = RoleRequestStatus.PROCESSED
    elif resolved:
        status = RoleRequestStatus.PARTIAL
    else:
        status = RoleRequestStatus.PENDING

    return ResolutionOutcome(
        approved_roles=approved,
        rejected_roles=rejected,
        newly_approved=newly_approved,
        newly_rejected=newly_rejected,
        status=status,
    )


def admin_notification_message(
    requester_name: str, roles: Sequence[AppRole], justification: str
) -> str:
    return (
        f"{requester_name} ha solicitado los roles: {format_role_labels(roles)}. "
        f"Justificación: {justification}"
    )


def requester_notification_message(
    approved: Sequence[AppRole],
    rejected: Sequence[AppRole],
    notes: str | None,
) -> str:
    parts: list[str] = []
    if approved:
        parts.append(f"Roles aprobados: {format_role_labels(approved)}.")
    if rejected:
        parts.append(f"Roles rechazados: {format_role_labels(rejected)}.")
    if notes and notes.strip():
        parts.append(f"Notas: {notes.strip()}")
    return " ".join(parts) or "Tu solicitud de roles fue revisada."
