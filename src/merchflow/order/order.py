"""Order aggregate (CQRS): the core of the ordering workflow.

An Order owns its line items, the approval decision taken on it and the
courier details recorded when it is dispatched. All three change only
through the transition methods below, so one repository save persists the
status together with the approval or dispatch record it belongs to.

State Machine:
    PENDING_APPROVAL → APPROVED → ACCEPTED → IN_TRANSIT → FULFILLED
    APPROVED → IN_TRANSIT (dispatch without explicit acceptance)
    IN_TRANSIT → IN_TRANSIT (courier details re-recorded)
    PENDING_APPROVAL → REJECTED (terminal)
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from merchflow.domain import merchflow
from merchflow.exceptions import EmptyOrder, InvalidStateTransition
from merchflow.order.events import (
    OrderAccepted,
    OrderApproved,
    OrderDispatched,
    OrderFulfilled,
    OrderPlaced,
    OrderRejected,
)

CENT = Decimal("0.01")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ACCEPTED = "ACCEPTED"
    IN_TRANSIT = "IN_TRANSIT"
    FULFILLED = "FULFILLED"


class ApprovalStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# Operation -> (statuses it may start from, status it leaves the order in)
_TRANSITIONS = {
    "approve": ({OrderStatus.PENDING_APPROVAL}, OrderStatus.APPROVED),
    "reject": ({OrderStatus.PENDING_APPROVAL}, OrderStatus.REJECTED),
    "accept": ({OrderStatus.APPROVED}, OrderStatus.ACCEPTED),
    "record dispatch": (
        {OrderStatus.APPROVED, OrderStatus.ACCEPTED, OrderStatus.IN_TRANSIT},
        OrderStatus.IN_TRANSIT,
    ),
    "mark fulfilled": ({OrderStatus.IN_TRANSIT}, OrderStatus.FULFILLED),
}

TERMINAL_STATUSES = frozenset({OrderStatus.REJECTED, OrderStatus.FULFILLED})


def allowed_sources(operation: str) -> frozenset[OrderStatus]:
    """Statuses from which ``operation`` may be applied."""
    return frozenset(_TRANSITIONS[operation][0])


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT)


def item_manifest(items) -> str:
    """Canonical record of an order's lines: product, quantity and captured price."""
    lines = sorted(
        [str(item.product_id), item.quantity, str(to_money(item.unit_price))] for item in items or []
    )
    return json.dumps(lines)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@merchflow.value_object(part_of="Order")
class Approval:
    """The approve/reject decision taken on an order.

    Recorded on the first decision. A decision is final: the order leaves
    PENDING_APPROVAL with it, so a second one is refused by the state machine.
    """

    status = String(choices=ApprovalStatus, required=True)
    comments = Text()
    approval_date = DateTime(required=True)
    approver_id = Identifier(required=True)


@merchflow.value_object(part_of="Order")
class CourierInfo:
    """Courier hand-over details. Re-recording a dispatch replaces them."""

    courier_name = String(required=True, max_length=100)
    tracking_number = String(required=True, max_length=100)
    dispatch_date = DateTime(required=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@merchflow.entity(part_of="Order")
class OrderItem:
    """One product line. The unit price is the catalogue price at order time."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> Decimal:
        return (to_money(self.unit_price) * self.quantity).quantize(CENT)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@merchflow.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING_APPROVAL.value)
    shipping_address = Text(required=True)
    delivery_address = Text()
    customer_gst = String(max_length=20)
    items = HasMany(OrderItem)
    approval = ValueObject(Approval)
    courier_info = ValueObject(CourierInfo)
    accepted_by = Identifier()
    placed_items = Text()  # item_manifest() of the lines as placed
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items or []]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["Each product may appear only once per order"]})

    @invariant.post
    def items_are_fixed_once_placed(self):
        if self.placed_items is None:
            return
        if item_manifest(self.items) != self.placed_items:
            raise ValidationError({"items": ["Items cannot be changed after the order is placed"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, shipping_address, lines, customer_gst=None):
        """Create a new order awaiting approval.

        Args:
            user_id: The store user placing the order.
            shipping_address: Where the order is to be shipped.
            lines: List of dicts with product_id, quantity, unit_price.
                Lines for the same product are merged, quantities summed.
            customer_gst: Optional customer tax id.
        """
        if not lines:
            raise EmptyOrder()

        merged: dict[str, dict] = {}
        for line in lines:
            product_id = str(line["product_id"])
            if product_id in merged:
                merged[product_id]["quantity"] += line["quantity"]
            else:
                merged[product_id] = {
                    "product_id": product_id,
                    "quantity": line["quantity"],
                    "unit_price": line["unit_price"],
                }

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            shipping_address=shipping_address,
            customer_gst=customer_gst,
            status=OrderStatus.PENDING_APPROVAL.value,
            created_at=now,
            updated_at=now,
        )
        for line in merged.values():
            order.add_items(OrderItem(**line))
        order.placed_items = item_manifest(order.items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(list(merged.values())),
                total_amount=float(order.total_amount),
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def total_amount(self) -> Decimal:
        """Sum of line totals at the captured unit prices."""
        return sum((item.line_total for item in self.items or []), Decimal("0.00"))

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATUSES

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can(self, operation: str) -> OrderStatus:
        """Return the status ``operation`` leads to, or refuse it."""
        sources, target = _TRANSITIONS[operation]
        current = OrderStatus(self.status)
        if current not in sources:
            raise InvalidStateTransition(operation, current, sources)
        return target

    # -------------------------------------------------------------------
    # Approval
    # -------------------------------------------------------------------
    def approve(self, approver_id, comments=None) -> None:
        target = self._assert_can("approve")
        now = datetime.now(UTC)
        self.status = target.value
        self.approval = Approval(
            status=ApprovalStatus.APPROVED.value,
            comments=comments,
            approval_date=now,
            approver_id=approver_id,
        )
        self.updated_at = now
        self.raise_(
            OrderApproved(
                order_id=str(self.id),
                approver_id=str(approver_id),
                comments=comments,
                approved_at=now,
            )
        )

    def reject(self, approver_id, comments=None) -> None:
        target = self._assert_can("reject")
        now = datetime.now(UTC)
        self.status = target.value
        self.approval = Approval(
            status=ApprovalStatus.REJECTED.value,
            comments=comments,
            approval_date=now,
            approver_id=approver_id,
        )
        self.updated_at = now
        self.raise_(
            OrderRejected(
                order_id=str(self.id),
                approver_id=str(approver_id),
                comments=comments,
                rejected_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def accept(self, agent_id, delivery_address) -> None:
        target = self._assert_can("accept")
        now = datetime.now(UTC)
        self.status = target.value
        self.delivery_address = delivery_address
        self.accepted_by = agent_id
        self.updated_at = now
        self.raise_(
            OrderAccepted(
                order_id=str(self.id),
                agent_id=str(agent_id),
                delivery_address=delivery_address,
                accepted_at=now,
            )
        )

    def record_dispatch(self, courier_name, tracking_number, dispatch_date) -> None:
        """Record (or re-record) the courier hand-over.

        An order already in transit keeps its status; only the courier
        details are replaced.
        """
        target = self._assert_can("record dispatch")
        now = datetime.now(UTC)
        redispatch = OrderStatus(self.status) == OrderStatus.IN_TRANSIT
        self.status = target.value
        self.courier_info = CourierInfo(
            courier_name=courier_name,
            tracking_number=tracking_number,
            dispatch_date=dispatch_date,
        )
        self.updated_at = now
        self.raise_(
            OrderDispatched(
                order_id=str(self.id),
                courier_name=courier_name,
                tracking_number=tracking_number,
                dispatch_date=dispatch_date,
                redispatch=redispatch,
                recorded_at=now,
            )
        )

    def mark_fulfilled(self) -> None:
        target = self._assert_can("mark fulfilled")
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(OrderFulfilled(order_id=str(self.id), fulfilled_at=now))

    # -------------------------------------------------------------------
    # Audit snapshot
    # -------------------------------------------------------------------
    def snapshot(self) -> dict:
        """The mutable part of the order, as recorded in the audit trail."""
        data = {
            "status": self.status,
            "delivery_address": self.delivery_address,
            "accepted_by": str(self.accepted_by) if self.accepted_by else None,
            "approval": None,
            "courier_info": None,
        }
        if self.approval:
            data["approval"] = {
                "status": self.approval.status,
                "comments": self.approval.comments,
                "approver_id": str(self.approval.approver_id),
            }
        if self.courier_info:
            data["courier_info"] = {
                "courier_name": self.courier_info.courier_name,
                "tracking_number": self.courier_info.tracking_number,
                "dispatch_date": self.courier_info.dispatch_date.isoformat(),
            }
        return data
