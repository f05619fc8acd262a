"""
Name: Schedule Use Case Tests

Responsibilities:
  - Create: manager-only, field validation, target must hold the role
  - Toggle / delete: manager-only, not found, audit trail
  - List: managers see everyone, other roles only their own windows
"""

from datetime import time
from uuid import uuid4

import pytest

from app.application.usecases.schedules import (
    CreateScheduleInput,
    CreateScheduleUseCase,
    DeleteScheduleInput,
    DeleteScheduleUseCase,
    ListSchedulesInput,
    ListSchedulesUseCase,
    ScheduleErrorCode,
    ToggleScheduleInput,
    ToggleScheduleUseCase,
)
from app.domain.roles import AppRole

pytestmark = pytest.mark.unit


@pytest.fixture
def create(repos) -> CreateScheduleUseCase:
    return CreateScheduleUseCase(
        schedules=repos.schedules, grants=repos.grants, audit_repo=repos.audit
    )


@pytest.fixture
def manager(user_factory):
    return user_factory.create(AppRole.MANAGER)


@pytest.fixture
def employee(user_factory):
    return user_factory.create(AppRole.EMPLOYEE)


def _input(actor, target, **overrides) -> CreateScheduleInput:
    values = dict(
        actor_id=actor.user_id,
        actor_role=AppRole.MANAGER,
        employee_id=target.user_id,
        role="employee",
        day_of_week=2,
        start_time="08:00",
        end_time="17:00",
    )
    values.update(overrides)
    return CreateScheduleInput(**values)


class TestCreate:
    def test_creates_active_window(self, create, manager, employee, repos):
        result = create.execute(_input(manager, employee))

        assert result.error is None
        window = result.schedule
        assert window.is_active
        assert window.start_time == time(8, 0)
        assert window.created_by == manager.user_id
        assert repos.schedules.list_for_user(employee.user_id) == [window]

        [event] = repos.audit.list_events(action_prefix="schedules.")
        assert event.action == "schedules.create"
        assert event.metadata["role"] == "employee"
        assert event.metadata["start_time"] == "08:00:00"

    def test_requires_manager_role(self, create, employee):
        result = create.execute(_input(employee, employee, actor_role=AppRole.EMPLOYEE))

        assert result.error.code == ScheduleErrorCode.FORBIDDEN

    @pytest.mark.parametrize(
        "overrides",
        [
            {"role": None},
            {"day_of_week": None},
            {"start_time": ""},
            {"day_of_week": 9},
            {"start_time": "18:00"},
            {"start_time": "8am"},
            {"role": "astronaut"},
            {"role": "client"},
        ],
    )
    def test_validation_errors(self, create, manager, employee, overrides):
        result = create.execute(_input(manager, employee, **overrides))

        assert result.error.code == ScheduleErrorCode.VALIDATION_ERROR

    def test_target_must_hold_role(self, create, manager, employee):
        result = create.execute(_input(manager, employee, role="driver"))

        assert result.error.code == ScheduleErrorCode.VALIDATION_ERROR
        assert "Conductor" in result.error.message


class TestToggleAndDelete:
    @pytest.fixture
    def window(self, create, manager, employee):
        return create.execute(_input(manager, employee)).schedule

    def test_toggle_deactivates(self, repos, manager, window):
        use_case = ToggleScheduleUseCase(schedules=repos.schedules, audit_repo=repos.audit)

        result = use_case.execute(
            ToggleScheduleInput(
                actor_id=manager.user_id,
                actor_role=AppRole.MANAGER,
                schedule_id=window.id,
                is_active=False,
            )
        )

        assert result.schedule.is_active is False
        assert repos.schedules.get_schedule(window.id).is_active is False
        assert repos.audit.list_events(action_prefix="schedules.toggle")

    def test_toggle_unknown_window(self, repos, manager):
        use_case = ToggleScheduleUseCase(schedules=repos.schedules)

        result = use_case.execute(
            ToggleScheduleInput(
                actor_id=manager.user_id,
                actor_role=AppRole.MANAGER,
                schedule_id=uuid4(),
                is_active=True,
            )
        )

        assert result.error.code == ScheduleErrorCode.NOT_FOUND

    def test_toggle_requires_manager(self, repos, employee, window):
        use_case = ToggleScheduleUseCase(schedules=repos.schedules)

        result = use_case.execute(
            ToggleScheduleInput(
                actor_id=employee.user_id,
                actor_role=AppRole.EMPLOYEE,
                schedule_id=window.id,
                is_active=False,
            )
        )

        assert result.error.code == ScheduleErrorCode.FORBIDDEN

    def test_delete_removes_window_and_audits_old_values(self, repos, manager, window):
        use_case = DeleteScheduleUseCase(schedules=repos.schedules, audit_repo=repos.audit)

        result = use_case.execute(
            DeleteScheduleInput(
                actor_id=manager.user_id,
                actor_role=AppRole.PRESIDENT,
                schedule_id=window.id,
            )
        )

        assert result.deleted is True
        assert repos.schedules.get_schedule(window.id) is None
        [event] = repos.audit.list_events(action_prefix="schedules.delete")
        assert event.metadata["old_values"]["day_of_week"] == 2

    def test_delete_unknown_window(self, repos, manager):
        use_case = DeleteScheduleUseCase(schedules=repos.schedules)

        result = use_case.execute(
            DeleteScheduleInput(
                actor_id=manager.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                schedule_id=uuid4(),
            )
        )

        assert result.error.code == ScheduleErrorCode.NOT_FOUND


class TestList:
    @pytest.fixture
    def seeded(self, repos, window_factory, user_factory):
        ana = user_factory.create(AppRole.EMPLOYEE)
        luis = user_factory.create(AppRole.EMPLOYEE)
        repos.schedules.create_schedule(window_factory(ana.user_id, day=4))
        repos.schedules.create_schedule(window_factory(ana.user_id, day=1))
        repos.schedules.create_schedule(window_factory(luis.user_id, day=3))
        return ana, luis

    def test_manager_sees_everyone(self, repos, seeded, manager):
        result = ListSchedulesUseCase(schedules=repos.schedules).execute(
            ListSchedulesInput(actor_id=manager.user_id, actor_role=AppRole.MANAGER)
        )

        assert [w.day_of_week for w in result.schedules] == [1, 3, 4]

    def test_manager_can_filter_by_employee(self, repos, seeded, manager):
        _, luis = seeded

        result = ListSchedulesUseCase(schedules=repos.schedules).execute(
            ListSchedulesInput(
                actor_id=manager.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                employee_id=luis.user_id,
            )
        )

        assert [w.employee_id for w in result.schedules] == [luis.user_id]

    def test_employee_sees_only_own(self, repos, seeded):
        ana, _ = seeded

        result = ListSchedulesUseCase(schedules=repos.schedules).execute(
            ListSchedulesInput(actor_id=ana.user_id, actor_role=AppRole.EMPLOYEE)
        )

        assert {w.employee_id for w in result.schedules} == {ana.user_id}
        assert [w.day_of_week for w in result.schedules] == [1, 4]

    def test_employee_cannot_list_others(self, repos, seeded):
        ana, luis = seeded

        result = ListSchedulesUseCase(schedules=repos.schedules).execute(
            ListSchedulesInput(
                actor_id=ana.user_id, actor_role=None, employee_id=luis.user_id
            )
        )

        assert result.error.code == ScheduleErrorCode.FORBIDDEN
