"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/role_grant.py
============================================================
Class: InMemoryRoleGrantRepository

Responsibilities:
  - Almacenar pares (user_id, role) en memoria (tests / local dev).
  - Dedupe: replica la PK compuesta (user_id, role) de user_roles.

Collaborators:
  - domain.repositories.RoleGrantRepository (contrato)

Constraints / Notes:
  - Thread-safe: Lock protege el diccionario interno.
  - Orden determinístico: roles por orden de inserción, usuarios por str(UUID).
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, List, Sequence
from uuid import UUID

from ....domain.repositories import RoleGrantRepository
from ....domain.roles import AppRole


class InMemoryRoleGrantRepository(RoleGrantRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._grants: Dict[UUID, List[AppRole]] = {}

    def list_roles(self, user_id: UUID) -> List[AppRole]:
        with self._lock:
            return list(self._grants.get(user_id, []))

    def list_users_with_role(self, role: AppRole) -> List[UUID]:
        with self._lock:
            user_ids = [uid for uid, roles in self._grants.items() if role in roles]
        user_ids.sort(key=str)
        return user_ids

    def add_role(self, user_id: UUID, role: AppRole) -> bool:
        with self._lock:
            roles = self._grants.setdefault(user_id, [])
            if role in roles:
                return False
            roles.append(role)
            return True

    def remove_role(self, user_id: UUID, role: AppRole) -> bool:
        with self._lock:
            roles = self._grants.get(user_id, [])
            if role not in roles:
                return False
            roles.remove(role)
            return True

    def replace_roles(self, user_id: UUID, roles: Sequence[AppRole]) -> None:
        with self._lock:
            self._grants[user_id] = list(dict.fromkeys(roles))
