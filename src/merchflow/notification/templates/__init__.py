"""Template registry: maps NotificationType to template classes.

Each template renders a subject and a plain-text body from a context
holding the hydrated order.
"""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.order_accepted import OrderAcceptedTemplate
from merchflow.notification.templates.order_approved import OrderApprovedTemplate
from merchflow.notification.templates.order_dispatched import OrderDispatchedTemplate
from merchflow.notification.templates.order_fulfilled import OrderFulfilledTemplate
from merchflow.notification.templates.order_pending import OrderPendingTemplate
from merchflow.notification.templates.order_rejected import OrderRejectedTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_PENDING.value: OrderPendingTemplate,
    NotificationType.ORDER_APPROVED.value: OrderApprovedTemplate,
    NotificationType.ORDER_REJECTED.value: OrderRejectedTemplate,
    NotificationType.ORDER_ACCEPTED.value: OrderAcceptedTemplate,
    NotificationType.ORDER_DISPATCHED.value: OrderDispatchedTemplate,
    NotificationType.ORDER_FULFILLED.value: OrderFulfilledTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
