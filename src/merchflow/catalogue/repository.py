"""Product lookups beyond fetch-by-id."""

from merchflow.catalogue.product import Product
from merchflow.domain import merchflow
from merchflow.utils.query import fetch_all


@merchflow.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str) -> Product | None:
        products = self._dao.query.filter(sku=sku).all().items
        return products[0] if products else None

    def listing(self, active_only: bool = False) -> list[Product]:
        query = self._dao.query.filter(active=True) if active_only else self._dao.query
        return sorted(fetch_all(query), key=lambda p: p.name)
