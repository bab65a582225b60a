"""Order dispatched template: sent on every dispatch record, re-dispatches included."""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.summary import order_summary


class OrderDispatchedTemplate:
    notification_type = NotificationType.ORDER_DISPATCHED.value

    @staticmethod
    def render(context: dict) -> dict:
        order = context["order"]
        return {
            "subject": f"Order {order.id} dispatched",
            "body": order_summary("Your order is on the move. Courier details are included below.", order),
        }
