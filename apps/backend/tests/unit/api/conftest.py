"""
Name: API Test Fixtures

Responsibilities:
  - Build the FastAPI app against the container's in-memory singletons
  - Seed users (auth identity + role grants + profile) through the container
  - Log in through the HTTP surface and hand back bearer headers

Notes:
  - TestClient is used without a context manager: lifespan (DB pool) is skipped
"""

from dataclasses import dataclass
from itertools import count
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.api.main import create_app
from app.container import (
    get_auth_gateway,
    get_profile_repository,
    get_role_grant_repository,
)
from app.domain.entities import Profile
from app.domain.roles import AppRole

_seq = count(1)


@dataclass
class ApiUser:
    user_id: UUID
    email: str
    password: str


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def seed_user():
    def _seed(*roles: AppRole, first_name: str = "Ana") -> ApiUser:
        n = next(_seq)
        email = f"api{n}@mariscalsucre.ec"
        password = "secreto123"
        identity = get_auth_gateway().register(email, password)
        for role in roles:
            get_role_grant_repository().add_role(identity.user_id, role)
        get_profile_repository().create_profile(
            Profile(
                user_id=identity.user_id,
                first_name=first_name,
                surname_1="Pérez",
                id_number=f"17{n:08d}",
                phone="0999999999",
                address="Milagro",
            )
        )
        return ApiUser(user_id=identity.user_id, email=email, password=password)

    return _seed


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login_as(client, seed_user):
    """
    R: Seeds a user with the given roles and returns (user, headers).

    With several roles the first one is selected through /auth/select-role.
    Gated roles must not be passed here (the real clock decides them).
    """

    def _login(*roles: AppRole, first_name: str = "Ana"):
        user = seed_user(*roles, first_name=first_name)
        response = client.post(
            "/auth/login", json={"email": user.email, "password": user.password}
        )
        assert response.status_code == 200, response.text
        headers = bearer(response.json()["access_token"])
        if len(roles) > 1:
            selected = client.post(
                "/auth/select-role", json={"role": roles[0].value}, headers=headers
            )
            assert selected.status_code == 200, selected.text
        return user, headers

    return _login
