"""Order pending template: sent to the owner and approvers when an order is placed."""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.summary import order_summary


class OrderPendingTemplate:
    notification_type = NotificationType.ORDER_PENDING.value

    @staticmethod
    def render(context: dict) -> dict:
        order = context["order"]
        return {
            "subject": f"Order {order.id} is pending approval",
            "body": order_summary("A new order has been placed and awaits approval.", order),
        }
