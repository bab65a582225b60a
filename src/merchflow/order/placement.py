"""Order placement: command and handler.

Prices are captured from the catalogue at placement time; later catalogue
changes never alter a placed order.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from merchflow.audit.entry import AuditAction, record_change
from merchflow.catalogue.product import Product
from merchflow.domain import merchflow
from merchflow.exceptions import ReferencedEntityMissing
from merchflow.order.helpers import resolve_user
from merchflow.order.order import Order
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)


@merchflow.command(part_of="Order")
class PlaceOrder:
    username = String(required=True, max_length=50)
    shipping_address = Text(required=True)
    customer_gst = String(max_length=20)
    items = Text(required=True)  # JSON list of {"product_id", "quantity"}


@merchflow.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        owner = resolve_user(command.username)
        requested = json.loads(command.items) if isinstance(command.items, str) else command.items

        product_repo = current_domain.repository_for(Product)
        lines = []
        for item in requested:
            try:
                product = product_repo.get(item["product_id"])
            except ObjectNotFoundError:
                raise ReferencedEntityMissing("Product", item["product_id"]) from None
            lines.append(
                {
                    "product_id": str(product.id),
                    "quantity": int(item["quantity"]),
                    "unit_price": product.price,
                }
            )

        order = Order.place(
            user_id=owner.id,
            shipping_address=command.shipping_address,
            lines=lines,
            customer_gst=command.customer_gst,
        )
        current_domain.repository_for(Order).add(order)
        record_change(
            "Order",
            order.id,
            AuditAction.CREATE,
            new={**order.snapshot(), "items": lines, "total_amount": str(order.total_amount)},
            user_id=owner.id,
        )

        logger.info(
            "Order placed",
            order_id=str(order.id),
            username=command.username,
            item_count=len(order.items),
        )
        return str(order.id)
