"""
===============================================================================
USE CASE: Get Profile (/auth/me)
===============================================================================

Responsibilities:
    - Reunir identidad, perfil, roles otorgados y rol activo de la sesión.

Notas:
    - El rol activo se lee del SelectionStore; si ya no está otorgado se
      informa como None (no se borra acá).
    - Un usuario sin fila de perfil no es error: profile=None.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import ProfileRepository, RoleGrantRepository
from ....domain.roles import UnknownRoleError, parse_role, sort_roles
from ....domain.services import SELECTED_ROLE_KEY, SelectionStore
from ..session.session_support import SessionCredentials
from .account_results import ProfileResult


class GetProfileUseCase:
    def __init__(
        self,
        *,
        profiles: ProfileRepository,
        grants: RoleGrantRepository,
        store: SelectionStore,
    ) -> None:
        self._profiles = profiles
        self._grants = grants
        self._store = store

    def execute(self, credentials: SessionCredentials) -> ProfileResult:
        roles = sort_roles(self._grants.list_roles(credentials.user_id))

        active_role = None
        stored = self._store.get_item(credentials.session_id, SELECTED_ROLE_KEY)
        if stored:
            try:
                candidate = parse_role(stored)
            except UnknownRoleError:
                candidate = None
            if candidate in roles:
                active_role = candidate

        return ProfileResult(
            user_id=credentials.user_id,
            email=credentials.email,
            profile=self._profiles.get_profile(credentials.user_id),
            roles=roles,
            active_role=active_role,
        )
