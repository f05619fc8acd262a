"""
Name: Road Incident Use Case Tests

Responsibilities:
  - Report: reporter roles only, required fields, defaults and history entry
  - List / get: status filter and chronological history
  - Moderate: moderator roles only, status changes, stale writes rejected
"""

from unittest.mock import Mock
from uuid import uuid4

import pytest

from app.application.usecases.incidents import (
    GetIncidentUseCase,
    IncidentErrorCode,
    ListIncidentsUseCase,
    ModerateIncidentInput,
    ModerateIncidentUseCase,
    ReportIncidentInput,
    ReportIncidentUseCase,
)
from app.crosscutting.exceptions import DatabaseError
from app.domain.entities import IncidentSeverity, IncidentStatus, IncidentType
from app.domain.roles import AppRole

pytestmark = pytest.mark.unit


@pytest.fixture
def report(repos) -> ReportIncidentUseCase:
    return ReportIncidentUseCase(incidents=repos.incidents, audit_repo=repos.audit)


@pytest.fixture
def moderate(repos) -> ModerateIncidentUseCase:
    return ModerateIncidentUseCase(incidents=repos.incidents, audit_repo=repos.audit)


def _report_input(role=AppRole.DRIVER, **overrides) -> ReportIncidentInput:
    values = dict(
        actor_id=uuid4(),
        actor_role=role,
        incident_type="cierre_via",
        title="Vía cerrada",
        description="Derrumbe a la altura del km 12",
        location_description="Km 12 vía Milagro - Durán",
        affected_routes=["Milagro - Durán", " Milagro - Durán ", ""],
    )
    values.update(overrides)
    return ReportIncidentInput(**values)


@pytest.fixture
def incident(report):
    result = report.execute(_report_input())
    assert result.error is None
    return result.incident


def _moderation(incident, status, role=AppRole.MANAGER, notes=None):
    return ModerateIncidentInput(
        actor_id=uuid4(),
        actor_role=role,
        incident_id=incident.id,
        status=status,
        notes=notes,
    )


class TestReport:
    def test_defaults_and_history(self, report, repos):
        result = report.execute(_report_input())

        incident = result.incident
        assert incident.status == IncidentStatus.ACTIVE
        assert incident.severity == IncidentSeverity.MEDIUM
        assert incident.incident_type == IncidentType.ROAD_CLOSURE
        assert incident.affected_routes == ["Milagro - Durán"]
        [entry] = result.history
        assert entry.action == "created"
        assert entry.notes == "Incidente creado"
        [event] = repos.audit.list_events(action_prefix="road_incidents.")
        assert event.metadata["incident_type"] == "cierre_via"

    @pytest.mark.parametrize("role", [AppRole.OFFICIAL, AppRole.ADMINISTRATOR])
    def test_other_reporter_roles(self, report, role):
        assert report.execute(_report_input(role=role)).error is None

    @pytest.mark.parametrize("role", [AppRole.CLIENT, AppRole.PARTNER, AppRole.MANAGER])
    def test_non_reporters_are_forbidden(self, report, role):
        result = report.execute(_report_input(role=role))

        assert result.error.code == IncidentErrorCode.FORBIDDEN

    @pytest.mark.parametrize(
        "field", ["title", "description", "location_description", "incident_type"]
    )
    def test_required_fields(self, report, field):
        result = report.execute(_report_input(**{field: "   "}))

        assert result.error.code == IncidentErrorCode.VALIDATION_ERROR
        assert field in result.error.message

    @pytest.mark.parametrize(
        "overrides", [{"incident_type": "tsunami"}, {"severity": "extrema"}]
    )
    def test_unknown_choices(self, report, overrides):
        result = report.execute(_report_input(**overrides))

        assert result.error.code == IncidentErrorCode.VALIDATION_ERROR

    def test_history_failure_keeps_incident(self, repos):
        incidents = Mock(wraps=repos.incidents)
        incidents.add_log_entry.side_effect = DatabaseError("boom")

        result = ReportIncidentUseCase(incidents=incidents).execute(_report_input())

        assert result.error is None
        assert result.history == []
        assert repos.incidents.get_incident(result.incident.id) is not None


class TestListAndGet:
    def test_status_filter(self, repos, incident, moderate):
        moderate.execute(_moderation(incident, "cerrado"))
        use_case = ListIncidentsUseCase(incidents=repos.incidents)

        assert [i.id for i in use_case.execute("cerrado").incidents] == [incident.id]
        assert use_case.execute("activo").incidents == []
        assert [i.id for i in use_case.execute().incidents] == [incident.id]

    def test_unknown_status_filter(self, repos):
        result = ListIncidentsUseCase(incidents=repos.incidents).execute("pendiente")

        assert result.error.code == IncidentErrorCode.VALIDATION_ERROR

    def test_get_missing_incident(self, repos):
        result = GetIncidentUseCase(incidents=repos.incidents).execute(uuid4())

        assert result.error.code == IncidentErrorCode.NOT_FOUND


class TestModerate:
    def test_resolve_stamps_and_logs_change(self, moderate, incident, repos):
        result = moderate.execute(_moderation(incident, "resuelto", notes="Vía despejada"))

        updated = result.incident
        assert updated.status == IncidentStatus.RESOLVED
        assert updated.resolved_at is not None
        assert updated.moderated_at == updated.resolved_at
        created, change = result.history
        assert created.action == "created"
        assert change.action == "status_change"
        assert change.changes == {"old_status": "activo", "new_status": "resuelto"}
        assert change.notes == "Vía despejada"
        assert result.message == "Incidente marcado como resuelto"
        assert repos.audit.list_events(action_prefix="road_incidents.moderate")

    def test_close_uses_default_note_and_no_resolution(self, moderate, incident):
        result = moderate.execute(_moderation(incident, "cerrado", role=AppRole.PRESIDENT))

        assert result.incident.resolved_at is None
        assert result.history[-1].notes == "Incidente marcado como cerrado"

    def test_same_status_is_conflict(self, moderate, incident):
        result = moderate.execute(_moderation(incident, "activo"))

        assert result.error.code == IncidentErrorCode.CONFLICT

    def test_driver_cannot_moderate(self, moderate, incident):
        result = moderate.execute(_moderation(incident, "cerrado", role=AppRole.DRIVER))

        assert result.error.code == IncidentErrorCode.FORBIDDEN

    def test_missing_incident(self, moderate, incident):
        result = moderate.execute(
            ModerateIncidentInput(
                actor_id=uuid4(),
                actor_role=AppRole.ADMINISTRATOR,
                incident_id=uuid4(),
                status="cerrado",
            )
        )

        assert result.error.code == IncidentErrorCode.NOT_FOUND

    def test_stale_moderation_is_rejected(self, repos, incident):
        incidents = Mock(wraps=repos.incidents)
        incidents.update_moderation.return_value = False

        result = ModerateIncidentUseCase(incidents=incidents).execute(
            _moderation(incident, "resuelto")
        )

        assert result.error.code == IncidentErrorCode.CONFLICT
        assert repos.incidents.get_incident(incident.id).status == IncidentStatus.ACTIVE
        assert [e.action for e in repos.incidents.list_log_entries(incident.id)] == [
            "created"
        ]
