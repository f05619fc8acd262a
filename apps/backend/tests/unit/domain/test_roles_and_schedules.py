"""
Name: Role Catalogue and Schedule Window Tests

Responsibilities:
  - Validate role parsing, labels and display ordering
  - Validate time parsing, weekday mapping and new-window validation
"""

from datetime import datetime, time
from uuid import uuid4

import pytest

from app.domain.roles import (
    ROLE_LABELS,
    AppRole,
    UnknownRoleError,
    format_role_labels,
    parse_role,
    role_label,
    sort_roles,
)
from app.domain.schedules import (
    MSG_INVALID_DAY,
    MSG_INVALID_RANGE,
    MSG_MISSING_FIELDS,
    MSG_ROLE_NOT_SCHEDULABLE,
    NOT_DEFINED,
    day_of_week,
    earliest_window,
    format_next_available,
    parse_time_of_day,
    validate_new_schedule,
)

pytestmark = pytest.mark.unit


class TestRoles:
    def test_every_role_has_a_label(self):
        assert set(ROLE_LABELS) == set(AppRole)

    def test_parse_role_normalizes_case_and_spaces(self):
        assert parse_role(" Driver ") == AppRole.DRIVER
        assert parse_role(AppRole.CLIENT) is AppRole.CLIENT

    def test_parse_role_rejects_unknown_value(self):
        with pytest.raises(UnknownRoleError):
            parse_role("superuser")

    def test_labels_are_spanish(self):
        assert role_label(AppRole.DRIVER) == "Conductor"
        assert role_label(AppRole.OFFICIAL) == "Dirigente"

    def test_sort_roles_dedupes_and_orders(self):
        assert sort_roles([AppRole.CLIENT, AppRole.PARTNER, AppRole.CLIENT]) == [
            AppRole.PARTNER,
            AppRole.CLIENT,
        ]

    def test_format_role_labels(self):
        assert format_role_labels([AppRole.PARTNER, AppRole.DRIVER]) == "Socio, Conductor"


class TestTimeHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [("08:00", time(8, 0)), ("17:30:15", time(17, 30, 15)), (" 09:05 ", time(9, 5))],
    )
    def test_parse_time_of_day(self, raw, expected):
        assert parse_time_of_day(raw) == expected

    @pytest.mark.parametrize("raw", ["", "8", "ab:cd", "25:00", "08:00:00:00"])
    def test_parse_time_of_day_rejects_garbage(self, raw):
        with pytest.raises(ValueError):
            parse_time_of_day(raw)

    def test_day_of_week_uses_sunday_zero(self):
        assert day_of_week(datetime(2025, 1, 5, 10, 0)) == 0  # domingo
        assert day_of_week(datetime(2025, 1, 7, 10, 0)) == 2  # martes
        assert day_of_week(datetime(2025, 1, 11, 10, 0)) == 6  # sábado


class TestWindows:
    def test_covers_is_start_inclusive_end_exclusive(self, window_factory):
        window = window_factory(uuid4(), AppRole.EMPLOYEE, 2, "08:00", "17:00")

        assert window.covers(2, time(8, 0))
        assert not window.covers(2, time(17, 0))
        assert not window.covers(3, time(9, 0))

    def test_earliest_window_ignores_inactive(self, window_factory):
        user_id = uuid4()
        inactive = window_factory(user_id, day=0, start="06:00", end="07:00", is_active=False)
        active = window_factory(user_id, day=3, start="10:00", end="12:00")

        assert earliest_window([inactive, active]) == active
        assert earliest_window([inactive]) is None

    def test_format_next_available(self, window_factory):
        window = window_factory(uuid4(), day=5, start="14:30", end="18:00")

        assert format_next_available(window) == "Viernes 14:30"
        assert format_next_available(None) == NOT_DEFINED


class TestValidateNewSchedule:
    def test_valid_window(self):
        assert (
            validate_new_schedule(
                role=AppRole.DRIVER, day=1, start=time(8), end=time(12)
            )
            is None
        )

    def test_missing_fields(self):
        assert (
            validate_new_schedule(role=None, day=1, start=time(8), end=time(9))
            == MSG_MISSING_FIELDS
        )

    def test_role_not_schedulable(self):
        assert (
            validate_new_schedule(role=AppRole.CLIENT, day=1, start=time(8), end=time(9))
            == MSG_ROLE_NOT_SCHEDULABLE
        )

    def test_invalid_day(self):
        assert (
            validate_new_schedule(role=AppRole.EMPLOYEE, day=7, start=time(8), end=time(9))
            == MSG_INVALID_DAY
        )

    def test_start_must_precede_end(self):
        assert (
            validate_new_schedule(
                role=AppRole.EMPLOYEE, day=2, start=time(9), end=time(9)
            )
            == MSG_INVALID_RANGE
        )
