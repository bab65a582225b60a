"""Shared lookups for the order command handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from merchflow.exceptions import NotFound, UnknownUser
from merchflow.identity.user import User
from merchflow.order.order import Order


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFound("Order", order_id) from None


def resolve_user(username: str) -> User:
    """The acting user for ``username``, or UnknownUser."""
    user = current_domain.repository_for(User).find_by_username(username)
    if user is None:
        raise UnknownUser(username)
    return user
