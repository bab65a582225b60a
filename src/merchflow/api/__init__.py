"""MerchFlow API package."""

from merchflow.api.errors import register_error_handlers
from merchflow.api.routes import (
    admin_router,
    get_engine,
    notification_router,
    order_router,
    product_router,
    session_router,
)

__all__ = [
    "admin_router",
    "get_engine",
    "notification_router",
    "order_router",
    "product_router",
    "register_error_handlers",
    "session_router",
]
