"""Audit trail: append-only record of who changed what, and when.

Entries are written by the command handlers inside the same unit of work as
the change they describe, so an entry exists exactly when its change was
committed. Entries are never updated or removed.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from merchflow.domain import merchflow
from merchflow.utils.query import fetch_all


class AuditAction(Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"


@merchflow.aggregate
class AuditEntry:
    entity_name = String(required=True, max_length=50)
    entity_id = Identifier(required=True)
    action = String(choices=AuditAction, required=True)
    old_value = Text()  # JSON snapshot before the change
    new_value = Text()  # JSON snapshot after the change
    user_id = Identifier()
    timestamp = DateTime(required=True)

    @property
    def old_state(self) -> dict | None:
        return json.loads(self.old_value) if self.old_value else None

    @property
    def new_state(self) -> dict | None:
        return json.loads(self.new_value) if self.new_value else None


@merchflow.repository(part_of=AuditEntry)
class AuditEntryRepository:
    def for_entity(self, entity_name: str, entity_id) -> list[AuditEntry]:
        entries = fetch_all(self._dao.query.filter(entity_name=entity_name, entity_id=str(entity_id)))
        return sorted(entries, key=lambda e: e.timestamp)


def record_change(entity_name, entity_id, action, old=None, new=None, user_id=None) -> AuditEntry:
    """Append an audit entry to the current unit of work."""
    entry = AuditEntry(
        entity_name=entity_name,
        entity_id=str(entity_id),
        action=action.value,
        old_value=json.dumps(old, default=str) if old is not None else None,
        new_value=json.dumps(new, default=str) if new is not None else None,
        user_id=str(user_id) if user_id else None,
        timestamp=datetime.now(UTC),
    )
    current_domain.repository_for(AuditEntry).add(entry)
    return entry
