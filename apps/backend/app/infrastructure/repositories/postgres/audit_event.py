"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/audit_event.py
============================================================
Class: PostgresAuditEventRepository

Responsibilities:
  - Persistir eventos de auditoría en PostgreSQL (tabla audit_log).
  - Listar eventos con filtros opcionales (action_prefix, actor) y paginación.
  - Mantener respuestas determinísticas (orden estable) para APIs/tests.

Collaborators:
  - domain.entities.AuditEvent
  - psycopg.types.json.Json (JSON seguro hacia PostgreSQL)
  - PostgresRepository (pool + logging + DatabaseError)

Constraints / Notes:
  - Repo puro: NO define políticas (qué auditar / autorización).
  - audit_log guarda user_id (uuid) y no el actor textual: el actor viaja
    en metadata["actor"] para poder filtrar por "system".
  - table_name / old_values / new_values se toman de metadata si existen.
============================================================
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from psycopg.types.json import Json

from ....domain.entities import AuditEvent
from ._base import PostgresRepository

_ACTOR_USER_PREFIX = "user:"


def _actor_user_id(actor: str) -> Optional[UUID]:
    if not actor.startswith(_ACTOR_USER_PREFIX):
        return None
    try:
        return UUID(actor[len(_ACTOR_USER_PREFIX) :])
    except ValueError:
        return None


def _row_to_event(row: tuple) -> AuditEvent:
    event_id, user_id, action, record_id, metadata, created_at = row
    metadata = dict(metadata or {})
    actor = metadata.get("actor") or (
        f"{_ACTOR_USER_PREFIX}{user_id}" if user_id else "system"
    )
    return AuditEvent(
        id=event_id,
        actor=actor,
        action=action,
        target_id=record_id,
        metadata=metadata,
        created_at=created_at,
    )


class PostgresAuditEventRepository(PostgresRepository):
    """Repositorio PostgreSQL para auditoría (audit_log)."""

    def record_event(self, event: AuditEvent) -> None:
        """
        Inserta un evento (append-only).

        Si falla, se propaga DatabaseError; emit_audit_event decide si lo traga.
        """
        metadata: dict[str, Any] = {**(event.metadata or {}), "actor": event.actor}
        old_values = metadata.pop("old_values", None)
        new_values = metadata.pop("new_values", None)

        self._execute(
            query="""
                INSERT INTO audit_log (
                    id, user_id, action, table_name, record_id,
                    old_values, new_values, metadata
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=[
                event.id,
                _actor_user_id(event.actor),
                event.action,
                metadata.get("table_name", ""),
                event.target_id,
                Json(old_values) if old_values is not None else None,
                Json(new_values) if new_values is not None else None,
                Json(metadata),
            ],
            error_message="PostgresAuditEventRepository: Failed to record audit event",
            extra={"event_id": str(event.id), "action": event.action},
        )

    def list_events(
        self,
        *,
        action_prefix: Optional[str] = None,
        actor: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditEvent]:
        """
        Lista eventos con filtros opcionales.

        Orden: created_at DESC, id DESC -> estable incluso con timestamps iguales.
        """
        if limit <= 0:
            return []
        if offset < 0:
            offset = 0

        conditions: list[str] = []
        params: list[object] = []

        if action_prefix:
            conditions.append("action LIKE %s")
            params.append(f"{action_prefix}%")

        if actor:
            conditions.append("metadata->>'actor' = %s")
            params.append(actor)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        rows = self._fetchall(
            query=f"""
                SELECT id, user_id, action, record_id, metadata, created_at
                FROM audit_log
                {where_clause}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, offset],
            error_message="PostgresAuditEventRepository: Failed to list audit events",
            extra={
                "actor": actor,
                "action_prefix": action_prefix,
                "limit": limit,
                "offset": offset,
            },
        )
        return [_row_to_event(row) for row in rows]
