"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/profile.py
============================================================
Class: InMemoryProfileRepository

Responsibilities:
  - Almacenar perfiles en memoria (tests / local dev).
  - Reproducir la unicidad de user_id e id_number (cédula) del esquema.

Collaborators:
  - domain.repositories.ProfileRepository (contrato)
  - domain.entities.Profile

Constraints / Notes:
  - Thread-safe: Lock protege el diccionario interno.
  - Copias defensivas: el caller nunca recibe la instancia almacenada.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....domain.entities import Profile, utcnow
from ....domain.repositories import ProfileRepository


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._profiles: Dict[UUID, Profile] = {}

    def get_profile(self, user_id: UUID) -> Optional[Profile]:
        with self._lock:
            profile = self._profiles.get(user_id)
            return replace(profile) if profile else None

    def get_profile_by_id_number(self, id_number: str) -> Optional[Profile]:
        needle = (id_number or "").strip()
        with self._lock:
            for profile in self._profiles.values():
                if profile.id_number == needle:
                    return replace(profile)
        return None

    def create_profile(self, profile: Profile) -> None:
        with self._lock:
            if profile.user_id in self._profiles:
                raise ValueError(f"Profile already exists: {profile.user_id}")
            if any(p.id_number == profile.id_number for p in self._profiles.values()):
                raise ValueError("Duplicate id_number")
            self._profiles[profile.user_id] = replace(
                profile, created_at=profile.created_at or utcnow()
            )
