"""User lookups beyond fetch-by-id."""

from merchflow.domain import merchflow
from merchflow.identity.user import User
from merchflow.utils.query import fetch_all


@merchflow.repository(part_of=User)
class UserRepository:
    def find_by_username(self, username: str) -> User | None:
        users = self._dao.query.filter(username=username).all().items
        return users[0] if users else None

    def with_role(self, role: str) -> list[User]:
        users = fetch_all(self._dao.query.filter(role=role))
        return sorted(users, key=lambda u: u.username)

    def everyone(self) -> list[User]:
        return sorted(fetch_all(self._dao.query), key=lambda u: u.username)
