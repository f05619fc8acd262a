"""
Name: Role Request Policy Tests

Responsibilities:
  - Validate which roles can be requested
  - Validate partial resolution merge and resulting status
  - Validate notification message wording
"""

from uuid import uuid4

import pytest

from app.domain.entities import RoleRequest, RoleRequestStatus
from app.domain.role_request_policy import (
    MSG_ROLE_IN_BOTH_LISTS,
    MSG_ROLE_NOT_IN_REQUEST,
    MSG_ROLE_NOT_REQUESTABLE,
    MSG_ROLES_AND_JUSTIFICATION_REQUIRED,
    admin_notification_message,
    merge_resolution,
    requestable_roles,
    requester_notification_message,
    validate_resolution,
    validate_submission,
)
from app.domain.roles import AppRole

pytestmark = pytest.mark.unit


def _request(*roles: AppRole, **kwargs) -> RoleRequest:
    return RoleRequest(
        id=uuid4(),
        requester_id=uuid4(),
        requested_roles=list(roles),
        justification="Trabajo en la cooperativa",
        **kwargs,
    )


class TestSubmission:
    def test_requestable_roles_exclude_current_and_client(self):
        roles = requestable_roles([AppRole.CLIENT, AppRole.DRIVER])

        assert AppRole.DRIVER not in roles
        assert AppRole.CLIENT not in roles
        assert AppRole.PRESIDENT not in roles
        assert AppRole.PARTNER in roles

    def test_valid_submission(self):
        assert validate_submission([AppRole.PARTNER], [AppRole.CLIENT], "Soy socio") is None

    @pytest.mark.parametrize("justification", ["", "   ", None])
    def test_justification_required(self, justification):
        assert (
            validate_submission([AppRole.PARTNER], [], justification)
            == MSG_ROLES_AND_JUSTIFICATION_REQUIRED
        )

    def test_roles_required(self):
        assert validate_submission([], [], "x") == MSG_ROLES_AND_JUSTIFICATION_REQUIRED

    def test_already_held_role_is_not_requestable(self):
        assert validate_submission(
            [AppRole.DRIVER], [AppRole.DRIVER], "x"
        ) == MSG_ROLE_NOT_REQUESTABLE.format(label="Conductor")


class TestResolution:
    def test_partial_then_processed(self):
        request = _request(AppRole.DRIVER, AppRole.PARTNER)

        first = merge_resolution(request, [AppRole.DRIVER], [])
        assert first.status == RoleRequestStatus.PARTIAL
        assert first.approved_roles == [AppRole.DRIVER]
        assert first.newly_approved == [AppRole.DRIVER]

        request.approved_roles = first.approved_roles
        request.status = first.status

        second = merge_resolution(request, [], [AppRole.PARTNER])
        assert second.status == RoleRequestStatus.PROCESSED
        assert second.approved_roles == [AppRole.DRIVER]
        assert second.rejected_roles == [AppRole.PARTNER]
        assert second.newly_rejected == [AppRole.PARTNER]

    def test_already_resolved_roles_are_not_resolved_again(self):
        request = _request(
            AppRole.DRIVER,
            AppRole.PARTNER,
            approved_roles=[AppRole.DRIVER],
            status=RoleRequestStatus.PARTIAL,
        )

        outcome = merge_resolution(request, [AppRole.DRIVER], [])

        assert outcome.newly_approved == []
        assert outcome.approved_roles == [AppRole.DRIVER]
        assert outcome.status == RoleRequestStatus.PARTIAL

    def test_role_outside_request_is_rejected(self):
        request = _request(AppRole.DRIVER)

        assert validate_resolution(
            request, [AppRole.MANAGER], []
        ) == MSG_ROLE_NOT_IN_REQUEST.format(label="Gerente")

    def test_role_in_both_lists_is_rejected(self):
        request = _request(AppRole.DRIVER, AppRole.PARTNER)

        assert validate_resolution(
            request, [AppRole.DRIVER], [AppRole.DRIVER]
        ) == MSG_ROLE_IN_BOTH_LISTS.format(label="Conductor")

    def test_pending_request_remains_open(self):
        request = _request(AppRole.DRIVER)

        assert request.is_open
        assert request.pending_roles() == [AppRole.DRIVER]


class TestMessages:
    def test_admin_message_lists_labels_and_justification(self):
        text = admin_notification_message(
            "Ana Pérez", [AppRole.DRIVER, AppRole.PARTNER], "Tengo licencia"
        )

        assert text.startswith("Ana Pérez ha solicitado los roles: Socio, Conductor.")
        assert "Justificación: Tengo licencia" in text

    def test_requester_message_includes_notes(self):
        text = requester_notification_message(
            [AppRole.DRIVER], [AppRole.PARTNER], "  Bienvenido  "
        )

        assert "Roles aprobados: Conductor." in text
        assert "Roles rechazados: Socio." in text
        assert text.endswith("Notas: Bienvenido")
