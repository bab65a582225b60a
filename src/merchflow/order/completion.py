"""Order completion: marks an in-transit order as delivered."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from merchflow.audit.entry import AuditAction, record_change
from merchflow.domain import merchflow
from merchflow.order.helpers import load_order, resolve_user
from merchflow.order.order import Order
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)


@merchflow.command(part_of="Order")
class MarkOrderFulfilled:
    order_id = Identifier(required=True)
    completed_by = String(max_length=50)


@merchflow.command_handler(part_of=Order)
class CompletionHandler:
    @handle(MarkOrderFulfilled)
    def mark_fulfilled(self, command):
        order = load_order(command.order_id)
        actor = resolve_user(command.completed_by) if command.completed_by else None
        before = order.snapshot()

        order.mark_fulfilled()
        current_domain.repository_for(Order).add(order)
        record_change(
            "Order",
            order.id,
            AuditAction.UPDATE,
            before,
            order.snapshot(),
            actor.id if actor else None,
        )

        logger.info("Order fulfilled", order_id=str(order.id))
