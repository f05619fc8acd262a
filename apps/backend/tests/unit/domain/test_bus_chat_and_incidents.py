"""
Name: Bus Chat Quick Actions and Incident Rules Tests

Responsibilities:
  - Quick actions resolve to canned text + action_type metadata
  - Moderation stamps moderator and timestamps without mutating the input
  - Every incident type has a visible label
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.domain.bus_chat import QUICK_ACTIONS, quick_action_message
from app.domain.entities import IncidentStatus, IncidentType, RoadIncident
from app.domain.incidents import INCIDENT_TYPE_LABELS, moderate

pytestmark = pytest.mark.unit

_T0 = datetime(2025, 1, 7, 13, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("action", sorted(QUICK_ACTIONS))
def test_quick_actions_resolve(action):
    text, metadata = quick_action_message(f"  {action.upper()} ")

    assert text == QUICK_ACTIONS[action]
    assert metadata == {"action_type": action}


def test_unknown_quick_action():
    assert quick_action_message("honk") is None


def test_every_incident_type_has_label():
    assert set(INCIDENT_TYPE_LABELS) == set(IncidentType)


def _incident() -> RoadIncident:
    return RoadIncident(
        id=uuid4(),
        reporter_id=uuid4(),
        incident_type=IncidentType.PROTEST,
        title="Paro",
        description="Manifestación en el puente",
        location_description="Puente de Durán",
        affected_routes=["Durán - Milagro"],
    )


def test_resolve_then_close_keeps_resolution_time():
    incident = _incident()
    moderator = uuid4()

    resolved = moderate(incident, status=IncidentStatus.RESOLVED, moderator_id=moderator, at=_T0)
    closed = moderate(
        resolved,
        status=IncidentStatus.CLOSED,
        moderator_id=moderator,
        at=_T0 + timedelta(hours=1),
    )

    assert incident.status == IncidentStatus.ACTIVE
    assert incident.moderated_at is None
    assert resolved.resolved_at == _T0
    assert closed.resolved_at == _T0
    assert closed.moderated_at == _T0 + timedelta(hours=1)
    assert closed.moderator_id == moderator


def test_close_without_resolution():
    closed = moderate(_incident(), status=IncidentStatus.CLOSED, moderator_id=uuid4(), at=_T0)

    assert closed.resolved_at is None
