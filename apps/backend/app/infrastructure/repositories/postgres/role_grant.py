"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/role_grant.py
============================================================
Class: PostgresRoleGrantRepository

Responsibilities:
  - Leer/otorgar/revocar roles en `user_roles` (UNIQUE (user_id, role)).
  - Mapear el enum app_role a AppRole de forma estricta.

Collaborators:
  - PostgresRepository
  - domain.roles.AppRole

Constraints / Notes:
  - Valor de rol desconocido en la DB -> DatabaseError (drift de esquema).
============================================================
"""

from __future__ import annotations

from typing import List, Sequence
from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.roles import AppRole
from ._base import PostgresRepository


def _to_role(value: str) -> AppRole:
    try:
        return AppRole(value)
    except ValueError as exc:
        raise DatabaseError(f"Invalid role in database: {value}") from exc


class PostgresRoleGrantRepository(PostgresRepository):
    def list_roles(self, user_id: UUID) -> List[AppRole]:
        rows = self._fetchall(
            query="""
                SELECT role FROM user_roles
                WHERE user_id = %s
                ORDER BY created_at ASC
            """,
            params=[user_id],
            error_message="PostgresRoleGrantRepository: Failed to list roles",
            extra={"user_id": str(user_id)},
        )
        return [_to_role(row[0]) for row in rows]

    def list_users_with_role(self, role: AppRole) -> List[UUID]:
        rows = self._fetchall(
            query="SELECT user_id FROM user_roles WHERE role = %s ORDER BY user_id",
            params=[role.value],
            error_message="PostgresRoleGrantRepository: Failed to list users with role",
            extra={"role": role.value},
        )
        return [row[0] for row in rows]

    def add_role(self, user_id: UUID, role: AppRole) -> bool:
        inserted = self._execute(
            query="""
                INSERT INTO user_roles (user_id, role)
                VALUES (%s, %s)
                ON CONFLICT (user_id, role) DO NOTHING
            """,
            params=[user_id, role.value],
            error_message="PostgresRoleGrantRepository: Failed to add role",
            extra={"user_id": str(user_id), "role": role.value},
        )
        return inserted > 0

    def remove_role(self, user_id: UUID, role: AppRole) -> bool:
        deleted = self._execute(
            query="DELETE FROM user_roles WHERE user_id = %s AND role = %s",
            params=[user_id, role.value],
            error_message="PostgresRoleGrantRepository: Failed to remove role",
            extra={"user_id": str(user_id), "role": role.value},
        )
        return deleted > 0

    def replace_roles(self, user_id: UUID, roles: Sequence[AppRole]) -> None:
        values = [role.value for role in dict.fromkeys(roles)]
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    conn.execute("DELETE FROM user_roles WHERE user_id = %s", (user_id,))
                    if not values:
                        return
                    conn.execute(
                        """
                        INSERT INTO user_roles (user_id, role)
                        SELECT %s, unnest(%s::app_role[])
                        """,
                        (user_id, values),
                    )
        except Exception as exc:
            logger.exception(
                "PostgresRoleGrantRepository: Failed to replace roles",
                extra={"user_id": str(user_id), "error": str(exc)},
            )
            raise DatabaseError(f"Failed to replace roles: {exc}") from exc
