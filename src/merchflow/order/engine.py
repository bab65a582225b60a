"""Order lifecycle engine: the entry point for every order operation.

Each transition validates its input, runs one command (a single unit of
work covering the order, its approval or courier record, and the audit
entry), hydrates the committed order and finally notifies. Notification
runs after the commit and can never fail the operation.
"""

import json
from collections.abc import Iterable, Mapping
from datetime import datetime

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from merchflow.config import Settings, get_settings
from merchflow.exceptions import (
    Conflict,
    EmptyOrder,
    InvalidStateTransition,
    ValidationFailed,
    require_text,
)
from merchflow.identity.user import PRIVILEGED_ROLES, UserRole
from merchflow.notification.notifier import OrderNotifier
from merchflow.order.acceptance import AcceptOrder
from merchflow.order.completion import MarkOrderFulfilled
from merchflow.order.decision import ApproveOrder, RejectOrder
from merchflow.order.dispatch import RecordDispatch
from merchflow.order.helpers import load_order, resolve_user
from merchflow.order.hydration import OrderDetail, hydrate
from merchflow.order.order import Order, OrderStatus, allowed_sources
from merchflow.order.placement import PlaceOrder
from merchflow.utils.logging import get_logger, operation_context

logger = get_logger(__name__)

# The only statuses a fulfillment agent may list
FULFILLMENT_VISIBLE_STATUSES = (
    OrderStatus.APPROVED,
    OrderStatus.ACCEPTED,
    OrderStatus.IN_TRANSIT,
    OrderStatus.FULFILLED,
)


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationFailed("status", f"unknown order status {value!r}") from None


def _normalize_items(items) -> list[dict]:
    if not items:
        raise EmptyOrder()

    lines = []
    for position, item in enumerate(items):
        if not isinstance(item, Mapping):
            item = vars(item)
        product_id = item.get("product_id")
        if product_id is None or not str(product_id).strip():
            raise ValidationFailed(f"items[{position}].product_id", "is required")
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationFailed(f"items[{position}].quantity", "must be a whole number of at least 1")
        lines.append({"product_id": str(product_id).strip(), "quantity": quantity})
    return lines


class OrderLifecycleEngine:
    """Create, decide on, fulfil and read orders.

    The engine trusts the usernames it is given; deciding who may call
    which operation belongs to the layer above it.
    """

    def __init__(self, settings: Settings | None = None, notifier: OrderNotifier | None = None):
        self.settings = settings or get_settings()
        self.notifier = notifier or OrderNotifier(self.settings)

    # -------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------
    def _run(self, operation: str, command):
        """Process ``command`` in its own unit of work.

        A concurrent writer that committed first surfaces as a version
        conflict; the loser is reported against the status it lost to.
        """
        with operation_context(operation, order_id=getattr(command, "order_id", None)):
            try:
                return current_domain.process(command, asynchronous=False)
            except ExpectedVersionError:
                order = load_order(command.order_id)
                sources = allowed_sources(operation)
                if OrderStatus(order.status) not in sources:
                    logger.info("Lost a concurrent transition", current_status=order.status)
                    raise InvalidStateTransition(operation, order.status, sources) from None
                raise Conflict(f"Order {command.order_id} was modified concurrently, retry the request") from None

    def _notify(self, send, order: OrderDetail) -> None:
        with operation_context("notify", order_id=order.id, status=order.status):
            try:
                send(order)
            except Exception as e:
                logger.warning("Order notification failed", error=str(e))
                logger.debug("Order notification failure detail", exc_info=True)

    def _detail(self, order_id) -> OrderDetail:
        return hydrate(load_order(order_id))

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def create_order(
        self,
        username: str,
        shipping_address: str,
        items: Iterable,
        customer_gst: str | None = None,
    ) -> OrderDetail:
        lines = _normalize_items(list(items or []))
        username = require_text("username", username)
        shipping_address = require_text("shipping_address", shipping_address)
        if customer_gst is not None:
            customer_gst = customer_gst.strip() or None

        order_id = self._run(
            "create",
            PlaceOrder(
                username=username,
                shipping_address=shipping_address,
                customer_gst=customer_gst,
                items=json.dumps(lines),
            ),
        )
        order = self._detail(order_id)
        self._notify(self.notifier.order_placed, order)
        return order

    def approve(self, order_id, approver_username: str, comments: str | None = None) -> OrderDetail:
        approver_username = require_text("approver_username", approver_username)
        self._run(
            "approve",
            ApproveOrder(order_id=order_id, approver_username=approver_username, comments=comments),
        )
        order = self._detail(order_id)
        self._notify(self.notifier.order_approved, order)
        return order

    def reject(self, order_id, approver_username: str, comments: str | None = None) -> OrderDetail:
        approver_username = require_text("approver_username", approver_username)
        if self.settings.require_rejection_comment:
            comments = require_text("comments", comments)
        self._run(
            "reject",
            RejectOrder(order_id=order_id, approver_username=approver_username, comments=comments),
        )
        order = self._detail(order_id)
        self._notify(self.notifier.order_rejected, order)
        return order

    def accept(self, order_id, agent_username: str, delivery_address: str) -> OrderDetail:
        agent_username = require_text("agent_username", agent_username)
        delivery_address = require_text("delivery_address", delivery_address)
        self._run(
            "accept",
            AcceptOrder(order_id=order_id, agent_username=agent_username, delivery_address=delivery_address),
        )
        order = self._detail(order_id)
        self._notify(self.notifier.order_accepted, order)
        return order

    def record_dispatch(
        self,
        order_id,
        courier_name: str,
        tracking_number: str,
        dispatch_date: datetime,
        recorded_by: str | None = None,
    ) -> OrderDetail:
        courier_name = require_text("courier_name", courier_name)
        tracking_number = require_text("tracking_number", tracking_number)
        if not isinstance(dispatch_date, datetime):
            raise ValidationFailed("dispatch_date", "must be a timestamp")

        self._run(
            "record dispatch",
            RecordDispatch(
                order_id=order_id,
                courier_name=courier_name,
                tracking_number=tracking_number,
                dispatch_date=dispatch_date,
                recorded_by=recorded_by,
            ),
        )
        order = self._detail(order_id)
        self._notify(self.notifier.order_dispatched, order)
        return order

    def mark_fulfilled(self, order_id, completed_by: str | None = None) -> OrderDetail:
        self._run("mark fulfilled", MarkOrderFulfilled(order_id=order_id, completed_by=completed_by))
        order = self._detail(order_id)
        self._notify(self.notifier.order_fulfilled, order)
        return order

    # -------------------------------------------------------------------
    # Queries: pure reads, no notifications
    # -------------------------------------------------------------------
    @property
    def _orders(self):
        return current_domain.repository_for(Order)

    def get_order(self, order_id) -> OrderDetail:
        return self._detail(order_id)

    def list_orders_for_user(self, username: str) -> list[OrderDetail]:
        user = resolve_user(username)
        return [hydrate(o) for o in self._orders.for_user(user.id)]

    def list_all_orders(self) -> list[OrderDetail]:
        return [hydrate(o) for o in self._orders.everything()]

    def list_orders_by_status(self, status, viewer_role: str | None = None) -> list[OrderDetail]:
        """Orders in ``status``. Fulfillment agents only ever see their visible subset."""
        status = parse_status(status)
        if viewer_role == UserRole.FULFILLMENT_AGENT.value and status not in FULFILLMENT_VISIBLE_STATUSES:
            return []
        return [hydrate(o) for o in self._orders.with_status(status.value)]

    def list_pending_orders(self) -> list[OrderDetail]:
        return self.list_orders_by_status(OrderStatus.PENDING_APPROVAL)

    def list_orders_visible_to(self, username: str, status=None) -> list[OrderDetail]:
        """The order list a user sees on their dashboard.

        Admins and approvers see everything, fulfillment agents see orders
        that are approved or further along, store users see their own.
        """
        user = resolve_user(username)
        role = UserRole(user.role)
        status = parse_status(status) if status is not None else None

        if role in PRIVILEGED_ROLES:
            if status is None:
                return self.list_all_orders()
            return self.list_orders_by_status(status)

        if role == UserRole.FULFILLMENT_AGENT:
            if status is not None:
                return self.list_orders_by_status(status, viewer_role=role.value)
            statuses = [s.value for s in FULFILLMENT_VISIBLE_STATUSES]
            return [hydrate(o) for o in self._orders.with_statuses(statuses)]

        orders = self._orders.for_user(user.id)
        if status is not None:
            orders = [o for o in orders if o.status == status.value]
        return [hydrate(o) for o in orders]
