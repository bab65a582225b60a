"""Application tests for the audit entries written alongside transitions."""

from datetime import UTC, datetime

import pytest
from protean import current_domain

from merchflow.audit.entry import AuditAction, AuditEntry
from merchflow.exceptions import InvalidStateTransition
from merchflow.identity.user import User


def _trail(order_id):
    return current_domain.repository_for(AuditEntry).for_entity("Order", order_id)


def _user_id(username):
    return str(current_domain.repository_for(User).find_by_username(username).id)


def test_creation_is_audited(engine, store_user, approver, hoodie):
    order = engine.create_order(store_user, "742 Evergreen Terrace", [{"product_id": hoodie, "quantity": 2}])

    trail = _trail(order.id)
    assert len(trail) == 1
    entry = trail[0]
    assert entry.action == AuditAction.CREATE.value
    assert entry.old_state is None
    assert entry.new_state["status"] == "PENDING_APPROVAL"
    assert entry.new_state["total_amount"] == "4998.00"
    assert entry.user_id == _user_id(store_user)


def test_each_transition_is_audited(engine, store_user, approver, agent, hoodie):
    order = engine.create_order(store_user, "742 Evergreen Terrace", [{"product_id": hoodie, "quantity": 1}])
    engine.approve(order.id, approver, "ok")
    engine.accept(order.id, agent, "Dock 4")
    engine.record_dispatch(order.id, "Delhivery", "DL123", datetime.now(UTC), recorded_by=agent)

    trail = _trail(order.id)
    assert [e.action for e in trail] == ["CREATE", "UPDATE", "UPDATE", "UPDATE"]

    approval = trail[1]
    assert approval.old_state["status"] == "PENDING_APPROVAL"
    assert approval.new_state["status"] == "APPROVED"
    assert approval.new_state["approval"]["comments"] == "ok"
    assert approval.user_id == _user_id(approver)

    dispatch = trail[3]
    assert dispatch.new_state["courier_info"]["tracking_number"] == "DL123"
    assert dispatch.user_id == _user_id(agent)


def test_refused_transition_writes_nothing(engine, store_user, approver, hoodie):
    order = engine.create_order(store_user, "742 Evergreen Terrace", [{"product_id": hoodie, "quantity": 1}])
    with pytest.raises(InvalidStateTransition):
        engine.record_dispatch(order.id, "Delhivery", "DL123", datetime.now(UTC))

    assert len(_trail(order.id)) == 1
