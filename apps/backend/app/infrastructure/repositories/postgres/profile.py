"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/profile.py
============================================================
Class: PostgresProfileRepository

Responsibilities:
  - Leer/crear filas de `profiles` (1:1 con auth.users via user_id).
  - Buscar por cédula (id_number, UNIQUE) para detectar duplicados.

Collaborators:
  - PostgresRepository (pool + errores)
  - domain.entities.Profile

Constraints / Notes:
  - El email vive en el servicio de auth, no en profiles: se mapea como None.
============================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....domain.entities import Profile
from ._base import PostgresRepository

_PROFILE_COLUMNS = (
    "user_id, first_name, middle_name, surname_1, surname_2, id_number, "
    "phone, address, avatar_url, created_at"
)


def _row_to_profile(row: tuple) -> Profile:
    return Profile(
        user_id=row[0],
        first_name=row[1],
        middle_name=row[2],
        surname_1=row[3],
        surname_2=row[4],
        id_number=row[5],
        phone=row[6],
        address=row[7],
        avatar_url=row[8],
        created_at=row[9],
    )


class PostgresProfileRepository(PostgresRepository):
    """Repositorio PostgreSQL para perfiles."""

    def get_profile(self, user_id: UUID) -> Optional[Profile]:
        row = self._fetchone(
            query=f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE user_id = %s",
            params=[user_id],
            error_message="PostgresProfileRepository: Failed to get profile",
            extra={"user_id": str(user_id)},
        )
        return _row_to_profile(row) if row else None

    def get_profile_by_id_number(self, id_number: str) -> Optional[Profile]:
        row = self._fetchone(
            query=f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE id_number = %s",
            params=[(id_number or "").strip()],
            error_message="PostgresProfileRepository: Failed to get profile by id_number",
            extra={},
        )
        return _row_to_profile(row) if row else None

    def create_profile(self, profile: Profile) -> None:
        self._execute(
            query="""
                INSERT INTO profiles (
                    user_id, first_name, middle_name, surname_1, surname_2,
                    id_number, phone, address, avatar_url
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=[
                profile.user_id,
                profile.first_name,
                profile.middle_name,
                profile.surname_1,
                profile.surname_2,
                profile.id_number,
                profile.phone or "",
                profile.address or "",
                profile.avatar_url,
            ],
            error_message="PostgresProfileRepository: Failed to create profile",
            extra={"user_id": str(profile.user_id)},
        )
