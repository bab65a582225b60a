"""FastAPI routes for MerchFlow.

The acting user is named by the ``X-User`` header. Who may call what is
decided here, per route; the order engine trusts the user it is given.
"""

import json
from dataclasses import asdict
from functools import lru_cache

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from merchflow.api.schemas import (
    AcceptOrderRequest,
    ApprovalActionRequest,
    CourierInfoRequest,
    CreateOrderRequest,
    NotificationResponse,
    OrderResponse,
    ProductRequest,
    ProductResponse,
    RegisterUserRequest,
    UpdateProductRequest,
    UpdateUserRoleRequest,
    UserMetricsResponse,
    UserResponse,
)
from merchflow.catalogue.management import CreateProduct, DeactivateProduct, UpdateProduct
from merchflow.catalogue.product import Product
from merchflow.exceptions import NotFound
from merchflow.identity.administration import ChangeUserRole, RecordLogin, RegisterUser
from merchflow.identity.metrics import DEFAULT_ACTIVE_WINDOW_DAYS, collect_user_metrics
from merchflow.identity.user import User, UserRole
from merchflow.notification.dispatch import latest_notifications
from merchflow.order.engine import OrderLifecycleEngine

ADMIN = UserRole.ADMIN
APPROVER = UserRole.APPROVER
AGENT = UserRole.FULFILLMENT_AGENT
STORE = UserRole.STORE_USER


@lru_cache
def get_engine() -> OrderLifecycleEngine:
    return OrderLifecycleEngine()


# ---------------------------------------------------------------------------
# Acting user
# ---------------------------------------------------------------------------
async def current_user(x_user: str | None = Header(None)) -> User:
    if not x_user or not x_user.strip():
        raise HTTPException(status_code=401, detail="X-User header is required")
    user = current_domain.repository_for(User).find_by_username(x_user.strip())
    if user is None:
        raise HTTPException(status_code=401, detail=f"Unknown user {x_user}")
    return user


def require_roles(*roles: UserRole):
    allowed = {role.value for role in roles}

    async def _check(user: User = Depends(current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail=f"Role {user.role} may not perform this action")
        return user

    return _check


def _order_response(order) -> OrderResponse:
    return OrderResponse.model_validate(order)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    status: str | None = None,
    user: User = Depends(current_user),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> list[OrderResponse]:
    """Orders visible to the acting user, newest first."""
    return [_order_response(o) for o in engine.list_orders_visible_to(user.username, status)]


@order_router.get("/pending", response_model=list[OrderResponse])
async def list_pending_orders(
    user: User = Depends(require_roles(APPROVER, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> list[OrderResponse]:
    return [_order_response(o) for o in engine.list_pending_orders()]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    user: User = Depends(current_user),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    return _order_response(engine.get_order(order_id))


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    user: User = Depends(require_roles(STORE, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    order = engine.create_order(
        username=user.username,
        shipping_address=body.shipping_address,
        customer_gst=body.customer_gst,
        items=[item.model_dump() for item in body.items],
    )
    return _order_response(order)


@order_router.post("/{order_id}/approve", response_model=OrderResponse)
async def approve_order(
    order_id: str,
    body: ApprovalActionRequest,
    user: User = Depends(require_roles(APPROVER, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    return _order_response(engine.approve(order_id, user.username, body.comments))


@order_router.post("/{order_id}/reject", response_model=OrderResponse)
async def reject_order(
    order_id: str,
    body: ApprovalActionRequest,
    user: User = Depends(require_roles(APPROVER, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    return _order_response(engine.reject(order_id, user.username, body.comments))


@order_router.post("/{order_id}/accept", response_model=OrderResponse)
async def accept_order(
    order_id: str,
    body: AcceptOrderRequest,
    user: User = Depends(require_roles(AGENT, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    return _order_response(engine.accept(order_id, user.username, body.delivery_address))


@order_router.post("/{order_id}/courier", status_code=201, response_model=OrderResponse)
async def record_dispatch(
    order_id: str,
    body: CourierInfoRequest,
    user: User = Depends(require_roles(APPROVER, AGENT, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    order = engine.record_dispatch(
        order_id,
        courier_name=body.courier_name,
        tracking_number=body.tracking_number,
        dispatch_date=body.dispatch_date,
        recorded_by=user.username,
    )
    return _order_response(order)


@order_router.post("/{order_id}/fulfil", response_model=OrderResponse)
async def mark_fulfilled(
    order_id: str,
    user: User = Depends(require_roles(AGENT, ADMIN)),
    engine: OrderLifecycleEngine = Depends(get_engine),
) -> OrderResponse:
    return _order_response(engine.mark_fulfilled(order_id, completed_by=user.username))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        sku=product.sku,
        name=product.name,
        description=product.description,
        image_url=product.image_url,
        price=product.price,
        stock_quantity=product.stock_quantity,
        active=product.active,
        specifications=product.specification_map,
    )


def _load_product(product_id: str) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product", product_id) from None


@product_router.get("", response_model=list[ProductResponse])
async def list_products(active_only: bool = False) -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).listing(active_only)]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(_load_product(product_id))


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(
    body: ProductRequest,
    user: User = Depends(require_roles(STORE, ADMIN)),
) -> ProductResponse:
    command = CreateProduct(
        sku=body.sku,
        name=body.name,
        price=body.price,
        description=body.description,
        image_url=body.image_url,
        stock_quantity=body.stock_quantity,
        specifications=json.dumps(body.specifications or {}),
        active=body.active,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return _product_response(_load_product(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    user: User = Depends(require_roles(STORE, ADMIN)),
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        price=body.price,
        description=body.description,
        image_url=body.image_url,
        stock_quantity=body.stock_quantity,
        specifications=json.dumps(body.specifications) if body.specifications is not None else None,
        active=body.active,
    )
    current_domain.process(command, asynchronous=False)
    return _product_response(_load_product(product_id))


@product_router.delete("/{product_id}", response_model=ProductResponse)
async def deactivate_product(
    product_id: str,
    user: User = Depends(require_roles(STORE, ADMIN)),
) -> ProductResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return _product_response(_load_product(product_id))


# ---------------------------------------------------------------------------
# User Routers
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin/users", tags=["admin"])
session_router = APIRouter(prefix="/me", tags=["session"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        username=user.username,
        role=user.role,
        email=user.email,
        full_name=user.full_name,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


@admin_router.get("", response_model=list[UserResponse])
async def list_users(user: User = Depends(require_roles(ADMIN))) -> list[UserResponse]:
    return [_user_response(u) for u in current_domain.repository_for(User).everyone()]


@admin_router.post("", status_code=201, response_model=UserResponse)
async def register_user(body: RegisterUserRequest, user: User = Depends(require_roles(ADMIN))) -> UserResponse:
    command = RegisterUser(
        username=body.username,
        role=body.role,
        email=body.email,
        full_name=body.full_name,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _user_response(current_domain.repository_for(User).get(user_id))


@admin_router.get("/metrics", response_model=UserMetricsResponse)
async def user_metrics(
    days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
    user: User = Depends(require_roles(ADMIN)),
) -> UserMetricsResponse:
    metrics = collect_user_metrics(days)
    return UserMetricsResponse(**asdict(metrics))


@admin_router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    body: UpdateUserRoleRequest,
    user: User = Depends(require_roles(ADMIN)),
) -> UserResponse:
    current_domain.process(ChangeUserRole(user_id=user_id, role=body.role), asynchronous=False)
    return _user_response(current_domain.repository_for(User).get(user_id))


@session_router.get("", response_model=UserResponse)
async def who_am_i(user: User = Depends(current_user)) -> UserResponse:
    """The acting user. Each call is recorded as a sign-in for activity metrics."""
    current_domain.process(RecordLogin(username=user.username), asynchronous=False)
    return _user_response(current_domain.repository_for(User).get(user.id))


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    limit: int = Query(20),
    user: User = Depends(require_roles(STORE, APPROVER, ADMIN)),
) -> list[NotificationResponse]:
    """Most recent notifications first; ``limit`` is clamped to 1..100."""
    return [
        NotificationResponse(
            id=str(n.id),
            notification_type=n.notification_type,
            subject=n.subject,
            recipients=n.recipients,
            body=n.body,
            status=n.status,
            failure_reason=n.failure_reason,
            created_at=n.created_at,
        )
        for n in latest_notifications(limit)
    ]
