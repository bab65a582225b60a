"""Dispatch recording: command and handler.

Records the courier hand-over. Calling it again while the order is in transit
replaces the courier details without moving the status.
"""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from merchflow.audit.entry import AuditAction, record_change
from merchflow.domain import merchflow
from merchflow.order.helpers import load_order, resolve_user
from merchflow.order.order import Order
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)


@merchflow.command(part_of="Order")
class RecordDispatch:
    order_id = Identifier(required=True)
    courier_name = String(required=True, max_length=100)
    tracking_number = String(required=True, max_length=100)
    dispatch_date = DateTime(required=True)
    recorded_by = String(max_length=50)


@merchflow.command_handler(part_of=Order)
class DispatchHandler:
    @handle(RecordDispatch)
    def record_dispatch(self, command):
        order = load_order(command.order_id)
        actor = resolve_user(command.recorded_by) if command.recorded_by else None
        before = order.snapshot()

        order.record_dispatch(
            courier_name=command.courier_name,
            tracking_number=command.tracking_number,
            dispatch_date=command.dispatch_date,
        )
        current_domain.repository_for(Order).add(order)
        record_change(
            "Order",
            order.id,
            AuditAction.UPDATE,
            before,
            order.snapshot(),
            actor.id if actor else None,
        )

        logger.info(
            "Dispatch recorded",
            order_id=str(order.id),
            courier=command.courier_name,
            tracking_number=command.tracking_number,
        )
