"""Demo data: a store user, an approver, a small catalogue and three orders.

Safe to run repeatedly: existing users and products are reused, and sample
orders are only placed into an empty order store.
"""

import json
from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain

from merchflow.catalogue.management import CreateProduct
from merchflow.catalogue.product import Product
from merchflow.identity.administration import RegisterUser
from merchflow.identity.user import User, UserRole
from merchflow.order.engine import OrderLifecycleEngine
from merchflow.order.order import Order
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)

USERS = [
    ("flow-store", UserRole.STORE_USER, "flow-store@example.com", "Flow Store"),
    ("flow-approver", UserRole.APPROVER, "flow-approver@example.com", "Flow Approver"),
    ("flow-agent", UserRole.FULFILLMENT_AGENT, "flow-agent@example.com", "Flow Agent"),
    ("flow-admin", UserRole.ADMIN, "flow-admin@example.com", "Flow Admin"),
]

HOODIE_SKU = "CAT-HOODIE-001"
TEE_SKU = "CAT-TEE-002"

PRODUCTS = [
    {
        "sku": HOODIE_SKU,
        "name": "Puma Heritage Hoodie",
        "description": "Premium fleece hoodie with retro chest branding.",
        "price": 2499.00,
        "stock_quantity": 25,
        "specifications": {"material": "Cotton", "color": "Black", "fit": "Regular"},
    },
    {
        "sku": TEE_SKU,
        "name": "Puma Active Tee",
        "description": "Lightweight performance tee ready for runs and workouts.",
        "price": 1299.00,
        "stock_quantity": 40,
        "specifications": {"material": "Poly Blend", "color": "Electric Blue", "fit": "Athletic"},
    },
    {
        "sku": "CAT-JACKET-003",
        "name": "Puma Storm Jacket",
        "description": "Weatherproof shell for outdoor runs.",
        "price": 4999.00,
        "stock_quantity": 18,
        "specifications": {"material": "Nylon", "color": "Storm Grey", "fit": "Slim"},
    },
    {
        "sku": "CAT-CAP-007",
        "name": "Puma Sport Cap",
        "description": "Moisture-wicking curved visor cap.",
        "price": 999.00,
        "stock_quantity": 80,
        "specifications": {"material": "Polyester", "color": "Charcoal", "adjustable": "Yes"},
    },
    {
        "sku": "CAT-HAT-012",
        "name": "Puma Beanie",
        "description": "Rib-knit beanie with fleece lining.",
        "price": 1299.00,
        "stock_quantity": 44,
        "active": False,
        "specifications": {"material": "Acrylic", "color": "Midnight", "season": "Winter"},
    },
]


def _ensure_user(username, role, email, full_name) -> str:
    existing = current_domain.repository_for(User).find_by_username(username)
    if existing is not None:
        return str(existing.id)
    return current_domain.process(
        RegisterUser(username=username, role=role.value, email=email, full_name=full_name),
        asynchronous=False,
    )


def _ensure_product(fields: dict) -> str:
    existing = current_domain.repository_for(Product).find_by_sku(fields["sku"])
    if existing is not None:
        return str(existing.id)
    return current_domain.process(
        CreateProduct(**{**fields, "specifications": json.dumps(fields["specifications"])}),
        asynchronous=False,
    )


def seed(engine: OrderLifecycleEngine | None = None) -> dict:
    """Load the demo data into the current domain. Returns what was ensured."""
    engine = engine or OrderLifecycleEngine()

    users = {username: _ensure_user(username, role, email, name) for username, role, email, name in USERS}
    products = {fields["sku"]: _ensure_product(fields) for fields in PRODUCTS}

    orders = []
    if not current_domain.repository_for(Order).everything():
        logger.info("Seeding sample orders")
        hoodie, tee = products[HOODIE_SKU], products[TEE_SKU]

        pending = engine.create_order(
            "flow-store",
            "742 Evergreen Terrace, Springfield",
            [{"product_id": hoodie, "quantity": 2}],
            customer_gst="GSTINFLOW01",
        )
        orders.append(pending.id)

        dispatched = engine.create_order(
            "flow-store",
            "221B Baker Street, London",
            [{"product_id": hoodie, "quantity": 1}, {"product_id": tee, "quantity": 6}],
            customer_gst="GSTINFLOW02",
        )
        engine.approve(dispatched.id, "flow-approver", "Looks good for fulfillment.")
        engine.record_dispatch(dispatched.id, "Delhivery", "DL1234567890", datetime.now(UTC) - timedelta(days=1))
        orders.append(dispatched.id)

        rejected = engine.create_order(
            "flow-store",
            "31 Spooner Street, Quahog",
            [{"product_id": tee, "quantity": 4}],
            customer_gst="GSTINFLOW03",
        )
        engine.reject(rejected.id, "flow-approver", "Need revised artwork before printing.")
        orders.append(rejected.id)

    logger.info("Seed complete", users=len(users), products=len(products), orders=len(orders))
    return {"users": users, "products": products, "orders": orders}
