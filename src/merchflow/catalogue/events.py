"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from merchflow.domain import merchflow


@merchflow.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    name = String(required=True)
    price = Float(required=True)
    created_at = DateTime(required=True)


@merchflow.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON: list of field names
    price = Float(required=True)
    updated_at = DateTime(required=True)


@merchflow.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
