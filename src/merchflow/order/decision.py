"""Approval decisions: approve and reject commands and handler."""

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
class ApproveOrder:
    order_id = Identifier(required=True)
    approver_username = String(required=True, max_length=50)
    comments = Text()


@merchflow.command(part_of="Order")
class RejectOrder:
    order_id = Identifier(required=True)
    approver_username = String(required=True, max_length=50)
    comments = Text()


@merchflow.command_handler(part_of=Order)
class ApprovalDecisionHandler:
    @handle(ApproveOrder)
    def approve_order(self, command):
        order = load_order(command.order_id)
        approver = resolve_user(command.approver_username)
        before = order.snapshot()

        order.approve(approver_id=approver.id, comments=command.comments)
        current_domain.repository_for(Order).add(order)
        record_change("Order", order.id, AuditAction.UPDATE, before, order.snapshot(), approver.id)

        logger.info("Order approved", order_id=str(order.id), approver=command.approver_username)

    @handle(RejectOrder)
    def reject_order(self, command):
        order = load_order(command.order_id)
        approver = resolve_user(command.approver_username)
        before = order.snapshot()

        order.reject(approver_id=approver.id, comments=command.comments)
        current_domain.repository_for(Order).add(order)
        record_change("Order", order.id, AuditAction.UPDATE, before, order.snapshot(), approver.id)

        logger.info("Order rejected", order_id=str(order.id), approver=command.approver_username)
