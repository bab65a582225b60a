import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture

os.environ.setdefault("PROTEAN_ENV", "test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def merchflow_bed():
    from merchflow.domain import merchflow

    bed = DomainFixture(merchflow)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(merchflow_bed):
    from merchflow.notification.channel import reset_channels

    reset_channels()
    with merchflow_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()
    reset_channels()


# ---------------------------------------------------------------------------
# Shared data fixtures
# ---------------------------------------------------------------------------
def register(username, role, email=None, full_name=None):
    from merchflow.identity.administration import RegisterUser
    from protean import current_domain

    return current_domain.process(
        RegisterUser(username=username, role=role, email=email, full_name=full_name),
        asynchronous=False,
    )


def add_product(sku, name, price, **extra):
    from merchflow.catalogue.management import CreateProduct
    from protean import current_domain

    return current_domain.process(CreateProduct(sku=sku, name=name, price=price, **extra), asynchronous=False)


@pytest.fixture()
def store_user():
    register("flow-store", "STORE_USER", email="flow-store@example.com", full_name="Flow Store")
    return "flow-store"


@pytest.fixture()
def approver():
    register("flow-approver", "APPROVER", email="flow-approver@example.com")
    return "flow-approver"


@pytest.fixture()
def agent():
    register("flow-agent", "FULFILLMENT_AGENT", email="flow-agent@example.com")
    return "flow-agent"


@pytest.fixture()
def admin():
    register("flow-admin", "ADMIN", email="flow-admin@example.com")
    return "flow-admin"


@pytest.fixture()
def hoodie():
    return add_product("CAT-HOODIE-001", "Puma Heritage Hoodie", 2499.00, stock_quantity=25)


@pytest.fixture()
def tee():
    return add_product("CAT-TEE-002", "Puma Active Tee", 1299.00, stock_quantity=40)


@pytest.fixture()
def settings():
    from merchflow.config import Settings

    return Settings()


@pytest.fixture()
def engine(settings):
    from merchflow.order.engine import OrderLifecycleEngine

    return OrderLifecycleEngine(settings=settings)


@pytest.fixture()
def outbox():
    """The in-memory email adapter every notification is sent through."""
    from merchflow.notification.channel import get_channel

    return get_channel()
