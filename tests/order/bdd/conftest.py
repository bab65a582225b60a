"""Shared BDD fixtures and step definitions for the order lifecycle."""

from datetime import UTC, datetime

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then, when

from merchflow.audit.entry import AuditEntry
from merchflow.exceptions import InvalidStateTransition, MerchFlowError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


def _attempt(error, operation, *args, **kwargs):
    try:
        operation(*args, **kwargs)
    except MerchFlowError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the standard users and catalogue", target_fixture="catalogue")
def standard_users_and_catalogue(store_user, approver, agent, hoodie, tee):
    return {"hoodie": hoodie, "tee": tee}


@given(
    parsers.cfparse('a pending order for {quantity:d} hoodies placed by "{username}"'),
    target_fixture="order",
)
def pending_order(engine, catalogue, quantity, username):
    return engine.create_order(
        username,
        "742 Evergreen Terrace, Springfield",
        [{"product_id": catalogue["hoodie"], "quantity": quantity}],
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{username}" approves the order with comment "{comment}"'))
def approve(engine, order, error, username, comment):
    _attempt(error, engine.approve, order.id, username, comment)


@when(parsers.cfparse('"{username}" rejects the order with comment "{comment}"'))
def reject(engine, order, error, username, comment):
    _attempt(error, engine.reject, order.id, username, comment)


@when(parsers.cfparse('"{username}" accepts the order for delivery to "{address}"'))
def accept(engine, order, error, username, address):
    _attempt(error, engine.accept, order.id, username, address)


@when(parsers.cfparse('the order is dispatched with "{courier}" tracking "{tracking}"'))
def dispatch(engine, order, error, courier, tracking):
    _attempt(error, engine.record_dispatch, order.id, courier, tracking, datetime.now(UTC))


@when(parsers.cfparse('"{username}" marks the order fulfilled'))
def fulfil(engine, order, error, username):
    _attempt(error, engine.mark_fulfilled, order.id, completed_by=username)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status(engine, order, status):
    assert engine.get_order(order.id).status == status


@then(parsers.cfparse('the order total is "{total}"'))
def order_total(engine, order, total):
    assert str(engine.get_order(order.id).total_amount) == total


@then(parsers.cfparse('"{email}" was notified that the order is pending'))
def pending_notification(outbox, order, email):
    subjects = [m["subject"] for m in outbox.sent_emails if email in m["to"]]
    assert f"Order {order.id} is pending approval" in subjects


@then(parsers.cfparse("the audit trail for the order has {count:d} entries"))
def audit_entries(order, count):
    assert len(current_domain.repository_for(AuditEntry).for_entity("Order", order.id)) == count


@then("the operation fails with an invalid state transition")
def invalid_transition(error):
    assert isinstance(error["exc"], InvalidStateTransition)


@then(parsers.cfparse('the courier tracking number is "{tracking}"'))
def tracking_number(engine, order, tracking):
    assert engine.get_order(order.id).courier_info.tracking_number == tracking
