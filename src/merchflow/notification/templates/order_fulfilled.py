"""Order fulfilled template."""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.summary import order_summary


class OrderFulfilledTemplate:
    notification_type = NotificationType.ORDER_FULFILLED.value

    @staticmethod
    def render(context: dict) -> dict:
        order = context["order"]
        return {
            "subject": f"Order {order.id} fulfilled",
            "body": order_summary("Your order has been delivered.", order),
        }
