"""Order domain events: immutable facts about order state changes.

All events are past tense, versioned, and carry enough data for the audit
trail and notification composition downstream.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from merchflow.domain import merchflow


@merchflow.event(part_of="Order")
class OrderPlaced:
    """A store user placed an order; it now awaits approval."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of item dicts
    total_amount = Float(required=True)
    created_at = DateTime(required=True)


@merchflow.event(part_of="Order")
class OrderApproved:
    __version__ = 1

    order_id = Identifier(required=True)
    approver_id = Identifier(required=True)
    comments = Text()
    approved_at = DateTime(required=True)


@merchflow.event(part_of="Order")
class OrderRejected:
    """An approver refused the order. Rejection is terminal."""

    __version__ = 1

    order_id = Identifier(required=True)
    approver_id = Identifier(required=True)
    comments = Text()
    rejected_at = DateTime(required=True)


@merchflow.event(part_of="Order")
class OrderAccepted:
    """A fulfillment agent took on the order and fixed the delivery address."""

    __version__ = 1

    order_id = Identifier(required=True)
    agent_id = Identifier(required=True)
    delivery_address = Text(required=True)
    accepted_at = DateTime(required=True)


@merchflow.event(part_of="Order")
class OrderDispatched:
    """Courier details were recorded (or re-recorded) for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    courier_name = String(required=True)
    tracking_number = String(required=True)
    dispatch_date = DateTime(required=True)
    redispatch = Boolean(default=False)
    recorded_at = DateTime(required=True)


@merchflow.event(part_of="Order")
class OrderFulfilled:
    __version__ = 1

    order_id = Identifier(required=True)
    fulfilled_at = DateTime(required=True)
