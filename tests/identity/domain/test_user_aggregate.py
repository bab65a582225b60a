"""Tests for the User aggregate root."""

import pytest
from protean.exceptions import ValidationError

from merchflow.identity.events import UserRegistered, UserRoleChanged
from merchflow.identity.user import PRIVILEGED_ROLES, User, UserRole


class TestUserRegistration:
    def test_register(self):
        user = User.register("flow-store", UserRole.STORE_USER.value, email="store@example.com")
        assert user.username == "flow-store"
        assert user.role == "STORE_USER"
        assert user.created_at is not None
        assert user.last_login_at is None

    def test_register_raises_event(self):
        user = User.register("flow-store", "STORE_USER")
        event = user._events[0]
        assert isinstance(event, UserRegistered)
        assert event.user_id == str(user.id)
        assert event.role == "STORE_USER"

    def test_blank_email_is_dropped(self):
        user = User.register("flow-store", "STORE_USER", email="   ")
        assert user.email is None
        assert user.has_email is False

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            User.register("flow-store", "SUPERUSER")
        assert "role" in exc.value.messages

    def test_privileged_roles(self):
        assert PRIVILEGED_ROLES == {UserRole.ADMIN, UserRole.APPROVER}


class TestUserChanges:
    @pytest.fixture()
    def user(self):
        user = User.register("flow-agent", "FULFILLMENT_AGENT")
        user._events.clear()
        return user

    def test_change_role(self, user):
        user.change_role("APPROVER")
        assert user.role == "APPROVER"
        event = user._events[-1]
        assert isinstance(event, UserRoleChanged)
        assert event.previous_role == "FULFILLMENT_AGENT"
        assert event.new_role == "APPROVER"

    def test_change_to_same_role_is_rejected(self, user):
        with pytest.raises(ValidationError):
            user.change_role("FULFILLMENT_AGENT")

    def test_record_login(self, user):
        user.record_login()
        assert user.last_login_at is not None
