"""Order queries. Every listing is newest first."""

from merchflow.domain import merchflow
from merchflow.order.order import Order
from merchflow.utils.query import fetch_all


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


@merchflow.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id) -> list[Order]:
        return _newest_first(fetch_all(self._dao.query.filter(user_id=str(user_id))))

    def with_status(self, status: str) -> list[Order]:
        return _newest_first(fetch_all(self._dao.query.filter(status=status)))

    def with_statuses(self, statuses) -> list[Order]:
        return _newest_first(fetch_all(self._dao.query.filter(status__in=list(statuses))))

    def everything(self) -> list[Order]:
        return _newest_first(fetch_all(self._dao.query))
