"""
Name: Account Use Case Tests

Responsibilities:
  - Sign-up: required fields, duplicate id number, client role, profile row
  - Admin create user: administrator-only, explicit role
  - Initial role grant failures surface instead of returning a roleless account
  - Role management: replace and revoke grants, administrator-only, audited
  - Profile: roles plus the still-granted active role
"""

from unittest.mock import Mock
from uuid import uuid4

import pytest

from app.application.usecases.accounts import (
    AccountData,
    AccountErrorCode,
    AdminCreateUserInput,
    AdminCreateUserUseCase,
    GetProfileUseCase,
    ReplaceUserRolesInput,
    ReplaceUserRolesUseCase,
    RevokeUserRoleInput,
    RevokeUserRoleUseCase,
    SignUpUseCase,
)
from app.application.usecases.session import SessionCredentials
from app.crosscutting.exceptions import DatabaseError
from app.domain.roles import AppRole
from app.domain.services import SELECTED_ROLE_KEY

pytestmark = pytest.mark.unit


def _account(**overrides) -> AccountData:
    values = dict(
        email="maria@mariscalsucre.ec",
        password="secreto123",
        first_name="María",
        surname_1="Andrade",
        id_number="0912345678",
        phone="0991234567",
        address="Av. Chile y Calle 10",
        middle_name="José",
    )
    values.update(overrides)
    return AccountData(**values)


@pytest.fixture
def sign_up(auth_gateway, repos) -> SignUpUseCase:
    return SignUpUseCase(
        auth=auth_gateway,
        profiles=repos.profiles,
        grants=repos.grants,
        audit_repo=repos.audit,
    )


@pytest.fixture
def admin_create(auth_gateway, repos) -> AdminCreateUserUseCase:
    return AdminCreateUserUseCase(
        auth=auth_gateway,
        profiles=repos.profiles,
        grants=repos.grants,
        audit_repo=repos.audit,
    )


class TestSignUp:
    def test_sign_up_creates_client(self, sign_up, repos):
        result = sign_up.execute(_account())

        assert result.error is None
        assert result.role == AppRole.CLIENT
        assert repos.grants.list_roles(result.user_id) == [AppRole.CLIENT]
        profile = repos.profiles.get_profile(result.user_id)
        assert profile.first_name == "María"
        assert profile.middle_name == "José"
        assert repos.audit.list_events(action_prefix="users.signup")

    def test_missing_fields_are_listed(self, sign_up):
        result = sign_up.execute(_account(phone="", address="  "))

        assert result.error.code == AccountErrorCode.VALIDATION_ERROR
        assert "phone" in result.error.message
        assert "address" in result.error.message

    def test_duplicate_id_number(self, sign_up):
        sign_up.execute(_account())

        result = sign_up.execute(_account(email="otra@mariscalsucre.ec"))

        assert result.error.code == AccountErrorCode.CONFLICT

    def test_auth_rejection_is_validation_error(self, sign_up):
        sign_up.execute(_account())

        result = sign_up.execute(_account(id_number="0987654321"))

        assert result.error.code == AccountErrorCode.VALIDATION_ERROR

    def test_role_grant_failure_propagates(self, auth_gateway, repos):
        grants = Mock()
        grants.add_role.side_effect = DatabaseError("db down")
        use_case = SignUpUseCase(
            auth=auth_gateway, profiles=repos.profiles, grants=grants, audit_repo=repos.audit
        )

        with pytest.raises(DatabaseError):
            use_case.execute(_account())

        assert repos.audit.list_events(action_prefix="users.signup") == []


class TestAdminCreateUser:
    def test_admin_creates_user_with_role(self, admin_create, user_factory, repos):
        admin = user_factory.create(AppRole.ADMINISTRATOR)

        result = admin_create.execute(
            AdminCreateUserInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                account=_account(),
                role="driver",
            )
        )

        assert result.error is None
        assert repos.grants.list_roles(result.user_id) == [AppRole.DRIVER]
        [event] = repos.audit.list_events(action_prefix="users.create")
        assert event.actor == f"user:{admin.user_id}"
        assert event.target_id == result.user_id

    def test_non_admin_active_role_is_forbidden(self, admin_create, user_factory):
        admin = user_factory.create(AppRole.ADMINISTRATOR, AppRole.CLIENT)

        result = admin_create.execute(
            AdminCreateUserInput(
                actor_id=admin.user_id,
                actor_role=AppRole.CLIENT,
                account=_account(),
                role="driver",
            )
        )

        assert result.error.code == AccountErrorCode.FORBIDDEN

    def test_role_is_required(self, admin_create, user_factory):
        admin = user_factory.create(AppRole.ADMINISTRATOR)

        result = admin_create.execute(
            AdminCreateUserInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                account=_account(),
            )
        )

        assert result.error.code == AccountErrorCode.VALIDATION_ERROR
        assert "role" in result.error.message

    def test_unknown_role(self, admin_create, user_factory):
        admin = user_factory.create(AppRole.ADMINISTRATOR)

        result = admin_create.execute(
            AdminCreateUserInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                account=_account(),
                role="captain",
            )
        )

        assert result.error.code == AccountErrorCode.VALIDATION_ERROR

    def test_role_grant_failure_propagates(self, auth_gateway, repos, user_factory):
        admin = user_factory.create(AppRole.ADMINISTRATOR)
        grants = Mock()
        grants.add_role.side_effect = DatabaseError("db down")
        use_case = AdminCreateUserUseCase(
            auth=auth_gateway, profiles=repos.profiles, grants=grants
        )

        with pytest.raises(DatabaseError):
            use_case.execute(
                AdminCreateUserInput(
                    actor_id=admin.user_id,
                    actor_role=AppRole.ADMINISTRATOR,
                    account=_account(),
                    role="driver",
                )
            )


class TestGetProfile:
    def test_profile_with_active_role(self, repos, selection_store, user_factory):
        user = user_factory.create(AppRole.CLIENT, AppRole.PARTNER)
        selection_store.set_item("s1", SELECTED_ROLE_KEY, "partner")
        use_case = GetProfileUseCase(
            profiles=repos.profiles, grants=repos.grants, store=selection_store
        )

        result = use_case.execute(
            SessionCredentials(
                user_id=user.user_id, email=user.email, access_token="t", session_id="s1"
            )
        )

        assert result.roles == [AppRole.PARTNER, AppRole.CLIENT]
        assert result.active_role == AppRole.PARTNER
        assert result.profile.first_name == "Ana"

    def test_revoked_selection_is_not_reported(self, repos, selection_store, user_factory):
        user = user_factory.create(AppRole.CLIENT)
        selection_store.set_item("s1", SELECTED_ROLE_KEY, "administrator")
        use_case = GetProfileUseCase(
            profiles=repos.profiles, grants=repos.grants, store=selection_store
        )

        result = use_case.execute(
            SessionCredentials(
                user_id=user.user_id, email=user.email, access_token="t", session_id="s1"
            )
        )

        assert result.active_role is None


class TestManageUserRoles:
    @pytest.fixture
    def admin(self, user_factory):
        return user_factory.create(AppRole.ADMINISTRATOR)

    @pytest.fixture
    def replace_roles(self, repos) -> ReplaceUserRolesUseCase:
        return ReplaceUserRolesUseCase(
            profiles=repos.profiles, grants=repos.grants, audit_repo=repos.audit
        )

    @pytest.fixture
    def revoke_role(self, repos) -> RevokeUserRoleUseCase:
        return RevokeUserRoleUseCase(
            profiles=repos.profiles, grants=repos.grants, audit_repo=repos.audit
        )

    def test_replace_swaps_every_grant(self, admin, replace_roles, user_factory, repos):
        target = user_factory.create(AppRole.CLIENT, AppRole.PARTNER)

        result = replace_roles.execute(
            ReplaceUserRolesInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                user_id=target.user_id,
                roles=["driver", "Driver"],
            )
        )

        assert result.error is None
        assert result.roles == [AppRole.DRIVER]
        assert repos.grants.list_roles(target.user_id) == [AppRole.DRIVER]
        [event] = repos.audit.list_events(action_prefix="user_roles.replace")
        assert event.target_id == target.user_id
        assert event.metadata["previous"] == ["client", "partner"]
        assert event.metadata["roles"] == ["driver"]

    def test_replace_requires_a_role(self, admin, replace_roles, user_factory, repos):
        target = user_factory.create(AppRole.CLIENT)

        result = replace_roles.execute(
            ReplaceUserRolesInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                user_id=target.user_id,
                roles=["  "],
            )
        )

        assert result.error.code == AccountErrorCode.VALIDATION_ERROR
        assert repos.grants.list_roles(target.user_id) == [AppRole.CLIENT]

    def test_replace_unknown_role(self, admin, replace_roles, user_factory, repos):
        target = user_factory.create(AppRole.CLIENT)

        result = replace_roles.execute(
            ReplaceUserRolesInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                user_id=target.user_id,
                roles=["driver", "captain"],
            )
        )

        assert result.error.code == AccountErrorCode.VALIDATION_ERROR
        assert repos.grants.list_roles(target.user_id) == [AppRole.CLIENT]

    def test_unknown_user_is_not_found(self, admin, replace_roles):
        result = replace_roles.execute(
            ReplaceUserRolesInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                user_id=uuid4(),
                roles=["driver"],
            )
        )

        assert result.error.code == AccountErrorCode.NOT_FOUND

    def test_non_admin_active_role_is_forbidden(self, revoke_role, user_factory, repos):
        actor = user_factory.create(AppRole.ADMINISTRATOR, AppRole.MANAGER)
        target = user_factory.create(AppRole.CLIENT)

        result = revoke_role.execute(
            RevokeUserRoleInput(
                actor_id=actor.user_id,
                actor_role=AppRole.MANAGER,
                user_id=target.user_id,
                role="client",
            )
        )

        assert result.error.code == AccountErrorCode.FORBIDDEN
        assert repos.grants.list_roles(target.user_id) == [AppRole.CLIENT]

    def test_revoke_last_role_leaves_no_grants(self, admin, revoke_role, user_factory, repos):
        target = user_factory.create(AppRole.CLIENT)

        result = revoke_role.execute(
            RevokeUserRoleInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                user_id=target.user_id,
                role="client",
            )
        )

        assert result.error is None
        assert result.roles == []
        assert repos.grants.list_roles(target.user_id) == []
        [event] = repos.audit.list_events(action_prefix="user_roles.delete")
        assert event.metadata == {"table_name": "user_roles", "role": "client"}

    def test_revoke_role_not_held(self, admin, revoke_role, user_factory):
        target = user_factory.create(AppRole.CLIENT)

        result = revoke_role.execute(
            RevokeUserRoleInput(
                actor_id=admin.user_id,
                actor_role=AppRole.ADMINISTRATOR,
                user_id=target.user_id,
                role="driver",
            )
        )

        assert result.error.code == AccountErrorCode.NOT_FOUND
        assert "Conductor" in result.error.message
