"""User aggregate: the acting principals of the ordering workflow.

Users are referenced, never owned, by orders. The order engine only reads
them: to resolve the acting principal, the order owner, the approver named
on a decision, and the approvers copied on new orders.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from merchflow.domain import merchflow
from merchflow.identity.events import UserRegistered, UserRoleChanged


class UserRole(Enum):
    STORE_USER = "STORE_USER"
    APPROVER = "APPROVER"
    FULFILLMENT_AGENT = "FULFILLMENT_AGENT"
    ADMIN = "ADMIN"


# Roles that may see every order
PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.APPROVER})


@merchflow.aggregate
class User:
    username = String(required=True, max_length=50)
    role = String(choices=UserRole, required=True)
    email = String(max_length=254)
    full_name = String(max_length=150)
    created_at = DateTime()
    last_login_at = DateTime()

    @classmethod
    def register(cls, username, role, email=None, full_name=None):
        now = datetime.now(UTC)
        user = cls(
            username=username,
            role=role,
            email=(email or "").strip() or None,
            full_name=full_name,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                username=username,
                role=role,
                registered_at=now,
            )
        )
        return user

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())

    def change_role(self, role: str) -> None:
        if role == self.role:
            raise ValidationError({"role": [f"User already has role {role}"]})

        previous = self.role
        self.role = role
        self.raise_(
            UserRoleChanged(
                user_id=str(self.id),
                previous_role=previous,
                new_role=role,
                changed_at=datetime.now(UTC),
            )
        )

    def record_login(self) -> None:
        self.last_login_at = datetime.now(UTC)
