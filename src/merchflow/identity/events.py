"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from merchflow.domain import merchflow


@merchflow.event(part_of="User")
class UserRegistered:
    """An administrator registered a new user."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@merchflow.event(part_of="User")
class UserRoleChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    new_role = String(required=True)
    changed_at = DateTime(required=True)
