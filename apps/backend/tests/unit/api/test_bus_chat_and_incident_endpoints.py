"""
Name: Bus Chat and Road Incident Endpoint Tests

Responsibilities:
  - /bus-chats: owner opens, driver replies with quick actions, read receipts
  - /bus-chats: active-role gating and closing
  - /incidents: report, list with filter, moderation and history
"""

from uuid import uuid4

import pytest

from app.domain.bus_chat import QUICK_ACTIONS
from app.domain.roles import AppRole

pytestmark = pytest.mark.unit


@pytest.fixture
def owner_and_driver(login_as):
    owner, owner_headers = login_as(AppRole.PARTNER)
    driver, driver_headers = login_as(AppRole.DRIVER, first_name="Luis")
    return (owner, owner_headers), (driver, driver_headers)


def _open(client, owner_headers, driver, bus_id=None):
    return client.post(
        "/bus-chats",
        json={"bus_id": str(bus_id or uuid4()), "driver_id": str(driver.user_id)},
        headers=owner_headers,
    )


class TestBusChats:
    def test_conversation_round_trip(self, client, owner_and_driver):
        (owner, owner_headers), (driver, driver_headers) = owner_and_driver

        opened = _open(client, owner_headers, driver)
        assert opened.status_code == 201
        chat_id = opened.json()["id"]

        sent = client.post(
            f"/bus-chats/{chat_id}/messages",
            json={"quick_action": "location_ping"},
            headers=driver_headers,
        )
        assert sent.status_code == 201
        [message] = sent.json()["messages"]
        assert message["message_type"] == "quick_action"
        assert message["content"] == QUICK_ACTIONS["location_ping"]

        driver_chats = client.get("/bus-chats", headers=driver_headers).json()["chats"]
        assert [c["id"] for c in driver_chats] == [chat_id]

        read = client.get(f"/bus-chats/{chat_id}/messages", headers=owner_headers)
        assert read.status_code == 200
        assert read.json()["messages"][0]["read_at"] is not None

    def test_reopening_same_bus_returns_existing_chat(self, client, owner_and_driver):
        (_, owner_headers), (driver, _) = owner_and_driver
        bus_id = uuid4()

        first = _open(client, owner_headers, driver, bus_id)
        second = _open(client, owner_headers, driver, bus_id)

        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]

    def test_driver_cannot_open_or_close(self, client, owner_and_driver):
        (owner, owner_headers), (driver, driver_headers) = owner_and_driver
        chat_id = _open(client, owner_headers, driver).json()["id"]

        assert _open(client, driver_headers, owner).status_code == 403
        closed = client.post(f"/bus-chats/{chat_id}/close", headers=driver_headers)
        assert closed.status_code == 403

    def test_client_role_is_rejected(self, client, login_as):
        _, headers = login_as(AppRole.CLIENT)

        response = client.get("/bus-chats", headers=headers)

        assert response.status_code == 403

    def test_closed_chat_rejects_messages(self, client, owner_and_driver):
        (_, owner_headers), (driver, driver_headers) = owner_and_driver
        chat_id = _open(client, owner_headers, driver).json()["id"]

        closed = client.post(f"/bus-chats/{chat_id}/close", headers=owner_headers)
        assert closed.status_code == 200
        assert closed.json()["status"] == "closed"

        response = client.post(
            f"/bus-chats/{chat_id}/messages",
            json={"content": "¿Sigo en ruta?"},
            headers=driver_headers,
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "El chat está cerrado"

    def test_target_without_driver_role(self, client, login_as, seed_user):
        _, owner_headers = login_as(AppRole.ADMINISTRATOR)
        not_a_driver = seed_user(AppRole.CLIENT)

        response = _open(client, owner_headers, not_a_driver)

        assert response.status_code == 400


_REPORT = {
    "incident_type": "accidente",
    "title": "Choque en la entrada",
    "description": "Dos vehículos bloquean un carril",
    "location_description": "Entrada a Milagro",
    "severity": "alta",
    "affected_routes": ["Milagro - Guayaquil"],
}


class TestIncidents:
    def test_report_list_and_moderate(self, client, login_as):
        _, driver_headers = login_as(AppRole.DRIVER)
        _, manager_headers = login_as(AppRole.MANAGER)

        reported = client.post("/incidents", json=_REPORT, headers=driver_headers)
        assert reported.status_code == 201
        body = reported.json()
        incident_id = body["incident"]["id"]
        assert body["incident"]["status"] == "activo"
        assert body["incident"]["incident_type_label"] == "Accidente"

        active = client.get(
            "/incidents", params={"status": "activo"}, headers=manager_headers
        ).json()["incidents"]
        assert [i["id"] for i in active] == [incident_id]

        moderated = client.patch(
            f"/incidents/{incident_id}/status",
            json={"status": "resuelto", "notes": "Grúa retiró los vehículos"},
            headers=manager_headers,
        )
        assert moderated.status_code == 200
        assert moderated.json()["incident"]["resolved_at"] is not None

        detail = client.get(f"/incidents/{incident_id}", headers=driver_headers).json()
        assert [e["action"] for e in detail["history"]] == ["created", "status_change"]
        assert detail["history"][1]["changes"] == {
            "old_status": "activo",
            "new_status": "resuelto",
        }

    def test_client_cannot_report(self, client, login_as):
        _, headers = login_as(AppRole.CLIENT)

        response = client.post("/incidents", json=_REPORT, headers=headers)

        assert response.status_code == 403

    def test_driver_cannot_moderate(self, client, login_as):
        _, headers = login_as(AppRole.DRIVER)
        incident_id = client.post("/incidents", json=_REPORT, headers=headers).json()[
            "incident"
        ]["id"]

        response = client.patch(
            f"/incidents/{incident_id}/status", json={"status": "cerrado"}, headers=headers
        )

        assert response.status_code == 403

    def test_invalid_severity_is_400(self, client, login_as):
        _, headers = login_as(AppRole.OFFICIAL)

        response = client.post(
            "/incidents", json={**_REPORT, "severity": "extrema"}, headers=headers
        )

        assert response.status_code == 400

    def test_moderating_to_same_status_is_409(self, client, login_as):
        _, driver_headers = login_as(AppRole.DRIVER)
        _, admin_headers = login_as(AppRole.ADMINISTRATOR)
        incident_id = client.post("/incidents", json=_REPORT, headers=driver_headers).json()[
            "incident"
        ]["id"]

        response = client.patch(
            f"/incidents/{incident_id}/status",
            json={"status": "activo"},
            headers=admin_headers,
        )

        assert response.status_code == 409

    def test_unknown_incident_is_404(self, client, login_as):
        _, headers = login_as(AppRole.CLIENT)

        response = client.get(f"/incidents/{uuid4()}", headers=headers)

        assert response.status_code == 404
