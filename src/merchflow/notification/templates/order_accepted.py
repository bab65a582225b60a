"""Order accepted template: sent once a fulfillment agent takes the order on."""

from merchflow.notification.notification import NotificationType
from merchflow.notification.templates.summary import order_summary


class OrderAcceptedTemplate:
    notification_type = NotificationType.ORDER_ACCEPTED.value

    @staticmethod
    def render(context: dict) -> dict:
        order = context["order"]
        return {
            "subject": f"Order {order.id} accepted for fulfillment",
            "body": order_summary("Your order has been accepted for fulfillment and will be dispatched soon.", order),
        }
