"""Catalogue management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from merchflow.catalogue.product import Product
from merchflow.domain import merchflow
from merchflow.exceptions import DuplicateSku, NotFound
from merchflow.utils.logging import get_logger

logger = get_logger(__name__)


@merchflow.command(part_of="Product")
class CreateProduct:
    sku = String(required=True, max_length=50)
    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    description = Text()
    image_url = String(max_length=500)
    stock_quantity = Integer(default=0)
    specifications = Text()  # JSON object
    active = Boolean(default=True)


@merchflow.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=100)
    price = Float(min_value=0.0)
    description = Text()
    image_url = String(max_length=500)
    stock_quantity = Integer()
    specifications = Text()  # JSON object
    active = Boolean()


@merchflow.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


def _load_specs(raw):
    return json.loads(raw) if isinstance(raw, str) else raw


@merchflow.command_handler(part_of=Product)
class ManageCatalogueHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_sku(command.sku) is not None:
            raise DuplicateSku(command.sku)

        product = Product.create(
            sku=command.sku,
            name=command.name,
            price=command.price,
            description=command.description,
            image_url=command.image_url,
            stock_quantity=command.stock_quantity or 0,
            specifications=_load_specs(command.specifications),
            active=True if command.active is None else command.active,
        )
        repo.add(product)
        logger.info("Product created", product_id=str(product.id), sku=command.sku)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = _get_product(repo, command.product_id)
        product.update_details(
            name=command.name,
            price=command.price,
            description=command.description,
            image_url=command.image_url,
            stock_quantity=command.stock_quantity,
            specifications=_load_specs(command.specifications),
            active=command.active,
        )
        repo.add(product)
        logger.info("Product updated", product_id=str(command.product_id))

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = _get_product(repo, command.product_id)
        product.deactivate()
        repo.add(product)
        logger.info("Product deactivated", product_id=str(command.product_id))


def _get_product(repo, product_id):
    try:
        return repo.get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product", product_id) from None
