import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from merchflow.api import (
    admin_router,
    notification_router,
    order_router,
    product_router,
    register_error_handlers,
    session_router,
)


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(product_router)
    app.include_router(admin_router)
    app.include_router(session_router)
    app.include_router(notification_router)
    register_error_handlers(app)
    return TestClient(app)
