"""Read model: fully resolved views of an order.

Every order leaving the engine passes through ``hydrate``: product, owner and
approver references are resolved against the catalogue and identity stores
before a view is built. A reference that no longer resolves is an error,
never a partially empty view.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from merchflow.catalogue.product import Product
from merchflow.exceptions import ReferencedEntityMissing
from merchflow.identity.user import User
from merchflow.order.order import Order, to_money


@dataclass(frozen=True)
class OrderItemDetail:
    product_id: str
    product_name: str
    sku: str
    image_url: str | None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class ApprovalDetail:
    status: str
    comments: str | None
    approval_date: datetime
    approver_id: str
    approver_username: str


@dataclass(frozen=True)
class CourierDetail:
    courier_name: str
    tracking_number: str
    dispatch_date: datetime


@dataclass(frozen=True)
class OrderDetail:
    id: str
    status: str
    user_id: str
    username: str
    shipping_address: str
    delivery_address: str | None
    customer_gst: str | None
    created_at: datetime
    updated_at: datetime | None
    items: tuple[OrderItemDetail, ...]
    total_amount: Decimal
    approval: ApprovalDetail | None = None
    courier_info: CourierDetail | None = None


def _resolve(aggregate_cls, identifier, entity: str):
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise ReferencedEntityMissing(entity, identifier) from None


def hydrate(order: Order) -> OrderDetail:
    """Resolve every reference on ``order`` and build its read view.

    Totals use the unit prices captured when the order was placed, never
    the live catalogue price.
    """
    owner = _resolve(User, order.user_id, "User")

    items = []
    for item in order.items:
        product = _resolve(Product, item.product_id, "Product")
        items.append(
            OrderItemDetail(
                product_id=str(product.id),
                product_name=product.name,
                sku=product.sku,
                image_url=product.image_url,
                quantity=item.quantity,
                unit_price=to_money(item.unit_price),
                line_total=item.line_total,
            )
        )
    items.sort(key=lambda i: (i.product_name, i.product_id))

    approval = None
    if order.approval:
        approver = _resolve(User, order.approval.approver_id, "User")
        approval = ApprovalDetail(
            status=order.approval.status,
            comments=order.approval.comments,
            approval_date=order.approval.approval_date,
            approver_id=str(approver.id),
            approver_username=approver.username,
        )

    courier_info = None
    if order.courier_info:
        courier_info = CourierDetail(
            courier_name=order.courier_info.courier_name,
            tracking_number=order.courier_info.tracking_number,
            dispatch_date=order.courier_info.dispatch_date,
        )

    return OrderDetail(
        id=str(order.id),
        status=order.status,
        user_id=str(owner.id),
        username=owner.username,
        shipping_address=order.shipping_address,
        delivery_address=order.delivery_address,
        customer_gst=order.customer_gst,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=tuple(items),
        total_amount=sum((i.line_total for i in items), Decimal("0.00")),
        approval=approval,
        courier_info=courier_info,
    )
