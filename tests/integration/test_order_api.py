"""Integration tests for the order endpoints."""

import pytest
from protean.utils.globals import current_domain

from merchflow.audit.entry import AuditEntry
from merchflow.order.order import Order

STORE = {"X-User": "flow-store"}
APPROVER = {"X-User": "flow-approver"}
AGENT = {"X-User": "flow-agent"}


@pytest.fixture()
def actors(store_user, approver, agent):
    return store_user, approver, agent


@pytest.fixture()
def order_id(client, actors, hoodie, tee):
    response = client.post(
        "/orders",
        headers=STORE,
        json={
            "shipping_address": "742 Evergreen Terrace, Springfield",
            "customer_gst": "GSTINFLOW01",
            "items": [{"product_id": hoodie, "quantity": 2}, {"product_id": tee, "quantity": 1}],
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestCreateOrderEndpoint:
    def test_create_order(self, client, order_id):
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "PENDING_APPROVAL"

    def test_response_is_hydrated(self, client, order_id):
        data = client.get(f"/orders/{order_id}", headers=STORE).json()
        assert data["username"] == "flow-store"
        assert data["total_amount"] == "6297.00"
        assert [item["sku"] for item in data["items"]] == ["CAT-TEE-002", "CAT-HOODIE-001"]
        assert data["approval"] is None
        assert data["courier_info"] is None

    def test_empty_order_is_rejected(self, client, actors):
        response = client.post("/orders", headers=STORE, json={"shipping_address": "Somewhere", "items": []})
        assert response.status_code == 400
        assert response.json()["error"] == "empty_order"

    def test_unknown_product_is_unprocessable(self, client, actors):
        response = client.post(
            "/orders",
            headers=STORE,
            json={"shipping_address": "Somewhere", "items": [{"product_id": "missing", "quantity": 1}]},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "referenced_entity_missing"

    def test_agent_may_not_create(self, client, actors, hoodie):
        response = client.post(
            "/orders",
            headers=AGENT,
            json={"shipping_address": "Somewhere", "items": [{"product_id": hoodie, "quantity": 1}]},
        )
        assert response.status_code == 403


class TestActingUser:
    def test_missing_header(self, client, actors):
        assert client.get("/orders").status_code == 401

    def test_unknown_user(self, client, actors):
        assert client.get("/orders", headers={"X-User": "ghost"}).status_code == 401


class TestOrderWorkflowEndpoints:
    def test_full_lifecycle(self, client, order_id):
        approved = client.post(f"/orders/{order_id}/approve", headers=APPROVER, json={"comments": "Looks good"})
        assert approved.status_code == 200
        assert approved.json()["approval"]["approver_username"] == "flow-approver"

        accepted = client.post(
            f"/orders/{order_id}/accept", headers=AGENT, json={"delivery_address": "Dock 4, Springfield"}
        )
        assert accepted.status_code == 200
        assert accepted.json()["delivery_address"] == "Dock 4, Springfield"

        dispatched = client.post(
            f"/orders/{order_id}/courier",
            headers=AGENT,
            json={
                "courier_name": "Delhivery",
                "tracking_number": "DL1234567890",
                "dispatch_date": "2026-10-16T10:30:00+05:30",
            },
        )
        assert dispatched.status_code == 201
        assert dispatched.json()["status"] == "IN_TRANSIT"
        assert dispatched.json()["courier_info"]["tracking_number"] == "DL1234567890"

        fulfilled = client.post(f"/orders/{order_id}/fulfil", headers=AGENT)
        assert fulfilled.status_code == 200
        assert fulfilled.json()["status"] == "FULFILLED"

        assert len(current_domain.repository_for(AuditEntry).for_entity("Order", order_id)) == 5

    def test_reject(self, client, order_id):
        response = client.post(f"/orders/{order_id}/reject", headers=APPROVER, json={"comments": "Over budget"})
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"
        assert response.json()["approval"]["comments"] == "Over budget"

    def test_invalid_transition_is_a_conflict(self, client, order_id):
        client.post(f"/orders/{order_id}/reject", headers=APPROVER, json={})
        response = client.post(f"/orders/{order_id}/approve", headers=APPROVER, json={})
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state_transition"

    def test_store_user_may_not_approve(self, client, order_id):
        response = client.post(f"/orders/{order_id}/approve", headers=STORE, json={})
        assert response.status_code == 403

    def test_unknown_order(self, client, actors):
        response = client.post("/orders/missing/approve", headers=APPROVER, json={})
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestOrderListingEndpoints:
    def test_pending_queue(self, client, order_id):
        response = client.get("/orders/pending", headers=APPROVER)
        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [order_id]

    def test_pending_queue_is_for_approvers(self, client, order_id):
        assert client.get("/orders/pending", headers=STORE).status_code == 403

    def test_store_user_sees_own_orders(self, client, order_id):
        assert [o["id"] for o in client.get("/orders", headers=STORE).json()] == [order_id]

    def test_agent_sees_nothing_pending(self, client, order_id):
        response = client.get("/orders", headers=AGENT, params={"status": "PENDING_APPROVAL"})
        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_status(self, client, order_id):
        response = client.get("/orders", headers=APPROVER, params={"status": "LOST"})
        assert response.status_code == 400
