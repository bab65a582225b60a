"""Product aggregate: the merchandise catalogue.

Orders reference products by id. The order engine reads a product twice: at
order creation to capture its current price, and when an order is read back
to show the product's name and image. Prices captured on an order never
follow later catalogue price changes.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from merchflow.catalogue.events import ProductCreated, ProductDeactivated, ProductUpdated
from merchflow.domain import merchflow

# Fields an administrator may change after creation
UPDATABLE_FIELDS = ("name", "description", "image_url", "price", "stock_quantity", "active", "specifications")


@merchflow.aggregate
class Product:
    sku = String(required=True, max_length=50)
    name = String(required=True, max_length=100)
    description = Text()
    image_url = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    active = Boolean(default=True)
    specifications = Text()  # JSON object of free-form attributes
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def specifications_must_be_a_json_object(self):
        if not self.specifications:
            return

        try:
            specs = json.loads(self.specifications)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"specifications": ["Specifications must be valid JSON"]}) from None

        if not isinstance(specs, dict):
            raise ValidationError({"specifications": ["Specifications must be a JSON object"]})

    @classmethod
    def create(
        cls,
        sku,
        name,
        price,
        description=None,
        image_url=None,
        stock_quantity=0,
        specifications=None,
        active=True,
    ):
        now = datetime.now(UTC)
        product = cls(
            sku=sku,
            name=name,
            price=price,
            description=description,
            image_url=image_url,
            stock_quantity=stock_quantity,
            specifications=json.dumps(specifications) if specifications else None,
            active=active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                sku=sku,
                name=name,
                price=price,
                created_at=now,
            )
        )
        return product

    @property
    def specification_map(self) -> dict:
        return json.loads(self.specifications) if self.specifications else {}

    def update_details(self, **changes) -> None:
        """Apply a partial update; ``None`` leaves a field untouched."""
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        applied = {}
        for field, value in changes.items():
            if value is None:
                continue
            if field == "specifications":
                value = json.dumps(value)
            setattr(self, field, value)
            applied[field] = value

        if not applied:
            return

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                changed_fields=json.dumps(sorted(applied)),
                price=self.price,
                updated_at=now,
            )
        )

    def deactivate(self) -> None:
        if not self.active:
            raise ValidationError({"active": ["Product is already inactive"]})

        now = datetime.now(UTC)
        self.active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))
