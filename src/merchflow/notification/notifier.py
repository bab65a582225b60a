"""Order notifier: turns committed order transitions into notifications.

Recipients: a newly placed order goes to its owner and, when configured,
every approver; every later transition goes to the owner only. Users
without an email address are skipped.
"""

from protean.utils.globals import current_domain

from merchflow.config import Settings
from merchflow.identity.user import User, UserRole
from merchflow.notification.dispatch import NotificationDispatcher
from merchflow.notification.notification import NotificationType
from merchflow.notification.templates import get_template
from merchflow.order.hydration import OrderDetail


def _emails(users) -> list[str]:
    seen: list[str] = []
    for user in users:
        email = (user.email or "").strip() if user is not None else ""
        if email and email not in seen:
            seen.append(email)
    return seen


class OrderNotifier:
    def __init__(self, settings: Settings, dispatcher: NotificationDispatcher | None = None):
        self.settings = settings
        self.dispatcher = dispatcher or NotificationDispatcher(settings)

    def _owner(self, order: OrderDetail):
        return current_domain.repository_for(User).get(order.user_id)

    def _send(self, notification_type: NotificationType, order: OrderDetail, recipients: list[str]):
        rendered = get_template(notification_type.value).render({"order": order})
        return self.dispatcher.dispatch(notification_type.value, recipients, rendered["subject"], rendered["body"])

    def order_placed(self, order: OrderDetail):
        users = [self._owner(order)]
        if self.settings.copy_approvers_on_creation:
            users.extend(current_domain.repository_for(User).with_role(UserRole.APPROVER.value))
        return self._send(NotificationType.ORDER_PENDING, order, _emails(users))

    def order_approved(self, order: OrderDetail):
        return self._send(NotificationType.ORDER_APPROVED, order, _emails([self._owner(order)]))

    def order_rejected(self, order: OrderDetail):
        return self._send(NotificationType.ORDER_REJECTED, order, _emails([self._owner(order)]))

    def order_accepted(self, order: OrderDetail):
        return self._send(NotificationType.ORDER_ACCEPTED, order, _emails([self._owner(order)]))

    def order_dispatched(self, order: OrderDetail):
        return self._send(NotificationType.ORDER_DISPATCHED, order, _emails([self._owner(order)]))

    def order_fulfilled(self, order: OrderDetail):
        return self._send(NotificationType.ORDER_FULFILLED, order, _emails([self._owner(order)]))
