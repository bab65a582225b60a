"""Tests for the plain-text order summary and the templates built on it."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from merchflow.notification.templates import TEMPLATE_REGISTRY, get_template
from merchflow.notification.templates.summary import format_timestamp, order_summary
from merchflow.order.hydration import ApprovalDetail, CourierDetail, OrderDetail, OrderItemDetail

IST = timezone(timedelta(hours=5, minutes=30))


def _detail(**overrides):
    defaults = {
        "id": "ord-001",
        "status": "PENDING_APPROVAL",
        "user_id": "user-001",
        "username": "flow-store",
        "shipping_address": "742 Evergreen Terrace",
        "delivery_address": None,
        "customer_gst": None,
        "created_at": datetime(2026, 10, 15, tzinfo=UTC),
        "updated_at": None,
        "items": (
            OrderItemDetail(
                product_id="p-2",
                product_name="Puma Active Tee",
                sku="CAT-TEE-002",
                image_url=None,
                quantity=1,
                unit_price=Decimal("1299.00"),
                line_total=Decimal("1299.00"),
            ),
            OrderItemDetail(
                product_id="p-1",
                product_name="Puma Heritage Hoodie",
                sku="CAT-HOODIE-001",
                image_url=None,
                quantity=2,
                unit_price=Decimal("2499.00"),
                line_total=Decimal("4998.00"),
            ),
        ),
        "total_amount": Decimal("6297.00"),
    }
    defaults.update(overrides)
    return OrderDetail(**defaults)


def _approved(comments="ok"):
    return ApprovalDetail(
        status="APPROVED",
        comments=comments,
        approval_date=datetime(2026, 10, 15, tzinfo=UTC),
        approver_id="user-002",
        approver_username="flow-approver",
    )


class TestOrderSummary:
    def test_pending_summary(self):
        body = order_summary("A new order has been placed and awaits approval.", _detail())
        assert body == (
            "A new order has been placed and awaits approval.\n"
            "\n"
            "Order ID: ord-001\n"
            "Status: PENDING_APPROVAL\n"
            "Placed By: flow-store\n"
            "Shipping Address: 742 Evergreen Terrace\n"
            "\n"
            "Items:\n"
            "- Puma Active Tee x1 @ 1299.00 = 1299.00\n"
            "- Puma Heritage Hoodie x2 @ 2499.00 = 4998.00\n"
            "\n"
            "Total: 6297.00"
        )

    def test_approver_and_comments(self):
        body = order_summary("Approved.", _detail(status="APPROVED", approval=_approved("Looks good")))
        assert "\nApprover: flow-approver\n" in body
        assert body.endswith("Total: 6297.00\nApprover Comments: Looks good")

    def test_blank_comments_are_left_out(self):
        body = order_summary("Approved.", _detail(status="APPROVED", approval=_approved("   ")))
        assert "Approver Comments" not in body

    def test_courier_block(self):
        courier = CourierDetail(
            courier_name="Delhivery",
            tracking_number="DL123",
            dispatch_date=datetime(2026, 10, 16, 9, 5, tzinfo=IST),
        )
        body = order_summary("On the move.", _detail(status="IN_TRANSIT", courier_info=courier))
        assert "Courier: Delhivery\nTracking #: DL123\nDispatch Date: 16 Oct 2026 09:05 +05:30" in body

    def test_missing_shipping_address(self):
        body = order_summary("Hi.", _detail(shipping_address=""))
        assert "Shipping Address: Not provided" in body

    def test_delivery_address_once_accepted(self):
        body = order_summary("Accepted.", _detail(status="ACCEPTED", delivery_address="Dock 4"))
        assert "Delivery Address: Dock 4" in body


class TestFormatTimestamp:
    def test_utc(self):
        assert format_timestamp(datetime(2026, 1, 2, 3, 4, tzinfo=UTC)) == "02 Jan 2026 03:04 +00:00"

    def test_negative_offset(self):
        value = datetime(2026, 1, 2, 3, 4, tzinfo=timezone(timedelta(hours=-4)))
        assert format_timestamp(value) == "02 Jan 2026 03:04 -04:00"

    def test_naive(self):
        assert format_timestamp(datetime(2026, 1, 2, 3, 4)) == "02 Jan 2026 03:04"


class TestTemplates:
    def test_every_type_has_a_template(self):
        assert len(TEMPLATE_REGISTRY) == 6

    def test_subjects(self):
        order = _detail()
        subjects = {name: cls.render({"order": order})["subject"] for name, cls in TEMPLATE_REGISTRY.items()}
        assert subjects == {
            "OrderPending": "Order ord-001 is pending approval",
            "OrderApproved": "Order ord-001 approved",
            "OrderRejected": "Order ord-001 rejected",
            "OrderAccepted": "Order ord-001 accepted for fulfillment",
            "OrderDispatched": "Order ord-001 dispatched",
            "OrderFulfilled": "Order ord-001 fulfilled",
        }

    def test_rejected_intro(self):
        body = get_template("OrderRejected").render({"order": _detail(status="REJECTED")})["body"]
        assert body.startswith("Unfortunately the order was rejected.\n\nOrder ID: ord-001")

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            get_template("Welcome")
