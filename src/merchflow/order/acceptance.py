"""Order acceptance: a fulfillment agent takes on an approved order."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from merchflow.audit.entry import AuditAction, record_change
from merchflow.domain import merchflow
from merchflow.order.helpers import load_order, resolve_user
from merchflow.order.order import Order
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)


@merchflow.command(part_of="Order")
class AcceptOrder:
    order_id = Identifier(required=True)
    agent_username = String(required=True, max_length=50)
    delivery_address = Text(required=True)


@merchflow.command_handler(part_of=Order)
class AcceptOrderHandler:
    @handle(AcceptOrder)
    def accept_order(self, command):
        order = load_order(command.order_id)
        agent = resolve_user(command.agent_username)
        before = order.snapshot()

        order.accept(agent_id=agent.id, delivery_address=command.delivery_address)
        current_domain.repository_for(Order).add(order)
        record_change("Order", order.id, AuditAction.UPDATE, before, order.snapshot(), agent.id)

        logger.info("Order accepted", order_id=str(order.id), agent=command.agent_username)
