"""Application tests for the hydrated order view."""

import pytest
from protean import current_domain

from merchflow.catalogue.product import Product
from merchflow.exceptions import ReferencedEntityMissing
from merchflow.identity.user import User
from merchflow.order.hydration import OrderDetail, hydrate
from merchflow.order.order import Order


@pytest.fixture()
def placed(engine, store_user, approver, hoodie, tee):
    return engine.create_order(
        store_user,
        "742 Evergreen Terrace",
        [{"product_id": hoodie, "quantity": 2}, {"product_id": tee, "quantity": 1}],
    )


def _delete(aggregate_cls, identifier):
    repo = current_domain.repository_for(aggregate_cls)
    repo._dao.delete(repo.get(identifier))


class TestHydratedView:
    def test_view_is_frozen(self, placed):
        assert isinstance(placed, OrderDetail)
        with pytest.raises(AttributeError):
            placed.status = "APPROVED"

    def test_every_item_is_resolved(self, placed):
        for item in placed.items:
            assert item.product_name
            assert item.sku

    def test_no_approval_or_courier_yet(self, placed):
        assert placed.approval is None
        assert placed.courier_info is None


class TestDanglingReferences:
    def test_missing_product_fails_hydration(self, engine, placed, tee):
        _delete(Product, tee)
        with pytest.raises(ReferencedEntityMissing) as exc:
            engine.get_order(placed.id)
        assert exc.value.entity == "Product"
        assert exc.value.entity_id == tee

    def test_missing_product_fails_listing(self, engine, placed, tee):
        _delete(Product, tee)
        with pytest.raises(ReferencedEntityMissing):
            engine.list_all_orders()

    def test_missing_approver_fails_hydration(self, engine, placed, approver):
        engine.approve(placed.id, approver, "ok")
        user = current_domain.repository_for(User).find_by_username(approver)
        _delete(User, user.id)

        with pytest.raises(ReferencedEntityMissing) as exc:
            hydrate(current_domain.repository_for(Order).get(placed.id))
        assert exc.value.entity == "User"
