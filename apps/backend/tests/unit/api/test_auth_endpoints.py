"""
Name: Session Endpoint Tests

Responsibilities:
  - /auth/login: credentials, single-role auto selection, multi-role choice
  - Schedule denial surfaces as RFC7807 403 with role/next_available
  - /auth/select-role, /auth/switch-role, /auth/session, /auth/logout, /auth/cancel
"""

from datetime import datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from app.application.usecases.session import LoginUseCase, SelectRoleUseCase
from app.container import (
    get_auth_gateway,
    get_login_use_case,
    get_role_grant_repository,
    get_schedule_repository,
    get_select_role_use_case,
    get_selection_store,
)
from app.domain.roles import AppRole
from app.domain.schedules import ScheduleWindow, parse_time_of_day
from app.domain.services import SELECTED_ROLE_KEY
from app.identity.tokens import decode_access_token

pytestmark = pytest.mark.unit

_TZ = ZoneInfo("America/Guayaquil")
TUESDAY_0759 = datetime(2025, 1, 7, 7, 59, tzinfo=_TZ)
TUESDAY_1000 = datetime(2025, 1, 7, 10, 0, tzinfo=_TZ)


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _login(client, user):
    return client.post("/auth/login", json={"email": user.email, "password": user.password})


def _add_tuesday_window(user_id, role=AppRole.EMPLOYEE) -> None:
    get_schedule_repository().create_schedule(
        ScheduleWindow(
            id=uuid4(),
            employee_id=user_id,
            role=role,
            day_of_week=2,
            start_time=parse_time_of_day("08:00"),
            end_time=parse_time_of_day("17:00"),
        )
    )


@pytest.fixture
def frozen_at(client):
    """R: Freezes the clock of login and select-role at a cooperative local time."""
    app = client.app

    def _freeze(moment: datetime) -> None:
        app.dependency_overrides[get_login_use_case] = lambda: LoginUseCase(
            auth=get_auth_gateway(),
            grants=get_role_grant_repository(),
            schedules=get_schedule_repository(),
            store=get_selection_store(),
            clock=lambda: moment,
        )
        app.dependency_overrides[get_select_role_use_case] = lambda: SelectRoleUseCase(
            auth=get_auth_gateway(),
            grants=get_role_grant_repository(),
            schedules=get_schedule_repository(),
            store=get_selection_store(),
            clock=lambda: moment,
        )

    yield _freeze
    app.dependency_overrides.clear()


class TestLogin:
    def test_wrong_password_is_401_problem(self, client, seed_user):
        user = seed_user(AppRole.PARTNER)

        response = client.post(
            "/auth/login", json={"email": user.email, "password": "incorrecta"}
        )

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.headers["www-authenticate"] == "Bearer"
        body = response.json()
        assert body["code"] == "UNAUTHORIZED"
        assert body["detail"] == "Credenciales inválidas"
        assert body["status"] == 401

    def test_missing_password_is_422(self, client):
        response = client.post("/auth/login", json={"email": "a@b.ec"})

        assert response.status_code == 422

    def test_single_role_is_auto_selected(self, client, seed_user):
        user = seed_user(AppRole.PARTNER)

        response = _login(client, user)

        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "role_active"
        assert body["active_role"] == "partner"
        assert body["access_token"]
        assert body["user_id"] == str(user.user_id)

    def test_email_is_normalized(self, client, seed_user):
        user = seed_user(AppRole.PARTNER)

        response = client.post(
            "/auth/login",
            json={"email": f"  {user.email.upper()} ", "password": user.password},
        )

        assert response.status_code == 200

    def test_multiple_roles_require_choice(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.ADMINISTRATOR, AppRole.DRIVER)

        body = _login(client, user).json()

        assert body["state"] == "multi_role_choice_pending"
        assert body["active_role"] is None
        assert [c["role"] for c in body["choices"]] == [
            "administrator",
            "driver",
            "client",
        ]
        assert [c["label"] for c in body["choices"]] == [
            "Administrador",
            "Conductor",
            "Cliente",
        ]
        assert all(c["selectable"] for c in body["choices"])

    def test_user_without_roles_is_403(self, client, seed_user):
        user = seed_user()

        response = _login(client, user)

        assert response.status_code == 403
        assert response.json()["detail"] == "No se encontraron roles para este usuario"

    def test_employee_outside_window_is_denied(self, client, seed_user, frozen_at):
        user = seed_user(AppRole.EMPLOYEE)
        _add_tuesday_window(user.user_id)
        frozen_at(TUESDAY_0759)

        response = _login(client, user)

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "SCHEDULE_DENIED"
        assert "Empleado" in body["detail"]
        assert body["errors"][0] == {"role": "employee", "next_available": "Martes 08:00"}
        assert any("request_id" in e for e in body["errors"][1:])

    def test_employee_inside_window_is_admitted(self, client, seed_user, frozen_at):
        user = seed_user(AppRole.EMPLOYEE)
        _add_tuesday_window(user.user_id)
        frozen_at(TUESDAY_1000)

        response = _login(client, user)

        assert response.status_code == 200
        assert response.json()["active_role"] == "employee"

    def test_employee_without_windows_reports_not_defined(
        self, client, seed_user, frozen_at
    ):
        user = seed_user(AppRole.EMPLOYEE)
        frozen_at(TUESDAY_1000)

        response = _login(client, user)

        assert response.status_code == 403
        assert response.json()["errors"][0]["next_available"] == "No definido"


class TestSelectRole:
    def test_select_requires_token(self, client):
        response = client.post("/auth/select-role", json={"role": "driver"})

        assert response.status_code == 401

    def test_select_granted_role(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]

        response = client.post(
            "/auth/select-role", json={"role": "driver"}, headers=_auth(token)
        )

        assert response.status_code == 200
        assert response.json()["state"] == "role_active"
        assert response.json()["active_role"] == "driver"

    def test_select_not_granted_role_is_403(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]

        response = client.post(
            "/auth/select-role", json={"role": "manager"}, headers=_auth(token)
        )

        assert response.status_code == 403
        assert "Gerente" in response.json()["detail"]

    def test_select_unknown_role_is_422(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]

        response = client.post(
            "/auth/select-role", json={"role": "pilot"}, headers=_auth(token)
        )

        assert response.status_code == 422

    def test_select_gated_role_outside_window(self, client, seed_user, frozen_at):
        user = seed_user(AppRole.EMPLOYEE, AppRole.PARTNER)
        _add_tuesday_window(user.user_id)
        frozen_at(TUESDAY_0759)
        login = _login(client, user).json()
        employee = next(c for c in login["choices"] if c["role"] == "employee")
        assert employee["selectable"] is False
        assert employee["next_available"] == "Martes 08:00"

        response = client.post(
            "/auth/select-role",
            json={"role": "employee"},
            headers=_auth(login["access_token"]),
        )

        assert response.status_code == 403
        assert response.json()["code"] == "SCHEDULE_DENIED"


class TestSwitchRole:
    def test_switch_without_selection_is_409(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]

        response = client.post(
            "/auth/switch-role", json={"role": "driver"}, headers=_auth(token)
        )

        assert response.status_code == 409

    def test_switch_between_granted_roles(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]
        client.post("/auth/select-role", json={"role": "client"}, headers=_auth(token))

        response = client.post(
            "/auth/switch-role", json={"role": "driver"}, headers=_auth(token)
        )

        assert response.status_code == 200
        assert response.json()["active_role"] == "driver"


class TestRestoreAndSignOut:
    def test_session_restores_stored_role(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]
        client.post("/auth/select-role", json={"role": "driver"}, headers=_auth(token))

        response = client.get("/auth/session", headers=_auth(token))

        assert response.status_code == 200
        assert response.json()["state"] == "role_active"
        assert response.json()["active_role"] == "driver"
        assert response.json()["access_token"] is None

    def test_session_without_selection_offers_choice(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]

        response = client.get("/auth/session", headers=_auth(token))

        assert response.json()["state"] == "multi_role_choice_pending"

    def test_logout_revokes_token_and_selection(self, client, seed_user):
        user = seed_user(AppRole.PARTNER)
        login = _login(client, user).json()
        token = login["access_token"]

        response = client.post("/auth/logout", headers=_auth(token))

        assert response.status_code == 200
        assert response.json()["state"] == "awaiting_credentials"
        assert client.get("/auth/session", headers=_auth(token)).status_code == 401

    def test_cancel_clears_selection(self, client, seed_user):
        user = seed_user(AppRole.CLIENT, AppRole.DRIVER)
        token = _login(client, user).json()["access_token"]
        client.post("/auth/select-role", json={"role": "driver"}, headers=_auth(token))
        session_id = decode_access_token(token).session_id
        assert get_selection_store().get_item(session_id, SELECTED_ROLE_KEY) == "driver"

        response = client.post("/auth/cancel", headers=_auth(token))

        assert response.status_code == 200
        assert response.json()["state"] == "awaiting_credentials"
        assert get_selection_store().get_item(session_id, SELECTED_ROLE_KEY) is None
