"""Order approved template."""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.summary import order_summary


class OrderApprovedTemplate:
    notification_type = NotificationType.ORDER_APPROVED.value

    @staticmethod
    def render(context: dict) -> dict:
        order = context["order"]
        return {
            "subject": f"Order {order.id} approved",
            "body": order_summary("Good news! Your order has been approved.", order),
        }
