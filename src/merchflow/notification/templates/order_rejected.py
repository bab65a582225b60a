"""Order rejected template. Approver comments are part of the summary."""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.summary import order_summary


class OrderRejectedTemplate:
    notification_type = NotificationType.ORDER_REJECTED.value

    @staticmethod
    def render(context: dict) -> dict:
        order = context["order"]
        return {
            "subject": f"Order {order.id} rejected",
            "body": order_summary("Unfortunately the order was rejected.", order),
        }
