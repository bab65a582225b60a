"""Pydantic request/response schemas for the MerchFlow API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# --- Request Schemas ---


class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": "742 Evergreen Terrace, Springfield",
                    "customer_gst": "GSTINFLOW01",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                }
            ]
        }
    }

    shipping_address: str = Field(..., min_length=1)
    customer_gst: str | None = Field(None, max_length=20)
    items: list[OrderItemRequest]


class ApprovalActionRequest(BaseModel):
    comments: str | None = None


class AcceptOrderRequest(BaseModel):
    delivery_address: str = Field(..., min_length=1)


class CourierInfoRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "courier_name": "Delhivery",
                    "tracking_number": "DL1234567890",
                    "dispatch_date": "2026-10-16T10:30:00+05:30",
                }
            ]
        }
    }

    courier_name: str = Field(..., min_length=1, max_length=100)
    tracking_number: str = Field(..., min_length=1, max_length=100)
    dispatch_date: datetime


class ProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sku": "CAT-HOODIE-001",
                    "name": "Puma Heritage Hoodie",
                    "price": 2499.00,
                    "stock_quantity": 25,
                    "specifications": {"material": "Cotton", "color": "Black"},
                }
            ]
        }
    }

    sku: str = Field(..., max_length=50)
    name: str = Field(..., max_length=100)
    price: float = Field(..., ge=0)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    stock_quantity: int = Field(0, ge=0)
    specifications: dict | None = None
    active: bool = True


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    stock_quantity: int | None = Field(None, ge=0)
    specifications: dict | None = None
    active: bool | None = None


class RegisterUserRequest(BaseModel):
    username: str = Field(..., max_length=50)
    role: str
    email: str | None = Field(None, max_length=254)
    full_name: str | None = Field(None, max_length=150)


class UpdateUserRoleRequest(BaseModel):
    role: str


# --- Response Schemas ---


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str
    product_name: str
    sku: str
    image_url: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class ApprovalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str
    comments: str | None = None
    approval_date: datetime
    approver_username: str


class CourierInfoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    courier_name: str
    tracking_number: str
    dispatch_date: datetime


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    status: str
    username: str
    shipping_address: str
    delivery_address: str | None = None
    customer_gst: str | None = None
    items: list[OrderItemResponse]
    total_amount: Decimal
    created_at: datetime
    approval: ApprovalResponse | None = None
    courier_info: CourierInfoResponse | None = None


class ProductResponse(BaseModel):
    id: str
    sku: str
    name: str
    description: str | None = None
    image_url: str | None = None
    price: float
    stock_quantity: int
    active: bool
    specifications: dict


class UserResponse(BaseModel):
    id: str
    username: str
    role: str
    email: str | None = None
    full_name: str | None = None
    created_at: datetime | None = None
    last_login_at: datetime | None = None


class UserMetricsResponse(BaseModel):
    total_users: int
    active_users: int
    store_users: int
    approvers: int
    fulfillment_agents: int
    admins: int
    lookback_days: int


class NotificationResponse(BaseModel):
    id: str
    notification_type: str
    subject: str
    recipients: str
    body: str
    status: str
    failure_reason: str | None = None
    created_at: datetime
