"""Notification aggregate (CQRS): the log of every order notification.

Each notification is one message about one order transition, addressed to
all of its resolved recipients at once. It is logged before delivery is
attempted, so the log also holds messages that were never sent.

State Machine:
    PENDING → SENT
    PENDING → FAILED
    PENDING → SUPPRESSED (delivery switched off)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from merchflow.domain import merchflow
from merchflow.utils.query import fetch_all
from merchflow.notification.events import (
    NotificationFailed,
    NotificationLogged,
    NotificationSent,
    NotificationSuppressed,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    ORDER_PENDING = "OrderPending"
    ORDER_APPROVED = "OrderApproved"
    ORDER_REJECTED = "OrderRejected"
    ORDER_ACCEPTED = "OrderAccepted"
    ORDER_DISPATCHED = "OrderDispatched"
    ORDER_FULFILLED = "OrderFulfilled"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"
    SUPPRESSED = "Suppressed"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {
        NotificationStatus.SENT,
        NotificationStatus.FAILED,
        NotificationStatus.SUPPRESSED,
    },
    NotificationStatus.SENT: set(),  # Terminal
    NotificationStatus.FAILED: set(),  # Terminal, never retried
    NotificationStatus.SUPPRESSED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@merchflow.aggregate
class Notification:
    # Content
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, default=NotificationChannel.EMAIL.value)
    subject: String(required=True, max_length=200)
    recipients: Text(required=True)  # Comma-separated email addresses
    body: Text(required=True)

    # Delivery tracking
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    message_id: String(max_length=100)
    failure_reason: String(max_length=500)
    sent_at: DateTime()

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def log(cls, notification_type, subject, recipients, body):
        """Log a new notification in PENDING status."""
        if not recipients:
            raise ValidationError({"recipients": ["At least one recipient is required"]})

        now = datetime.now(UTC)
        notification = cls(
            notification_type=notification_type,
            subject=subject,
            recipients=", ".join(recipients),
            body=body,
            status=NotificationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        notification.raise_(
            NotificationLogged(
                notification_id=str(notification.id),
                notification_type=notification_type,
                subject=subject,
                recipients=notification.recipients,
                created_at=now,
            )
        )
        return notification

    @property
    def recipient_list(self) -> list[str]:
        return [r.strip() for r in (self.recipients or "").split(",") if r.strip()]

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def mark_sent(self, message_id=None):
        self._assert_can_transition(NotificationStatus.SENT)

        now = datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.message_id = message_id
        self.sent_at = now
        self.updated_at = now

        self.raise_(NotificationSent(notification_id=str(self.id), message_id=message_id, sent_at=now))

    def mark_failed(self, reason):
        self._assert_can_transition(NotificationStatus.FAILED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = (reason or "Unknown dispatch error")[:500]
        self.updated_at = now

        self.raise_(NotificationFailed(notification_id=str(self.id), reason=self.failure_reason, failed_at=now))

    def suppress(self):
        self._assert_can_transition(NotificationStatus.SUPPRESSED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.SUPPRESSED.value
        self.updated_at = now

        self.raise_(NotificationSuppressed(notification_id=str(self.id), suppressed_at=now))


@merchflow.repository(part_of=Notification)
class NotificationRepository:
    def latest(self, limit: int) -> list[Notification]:
        notifications = sorted(fetch_all(self._dao.query), key=lambda n: n.created_at, reverse=True)
        return notifications[:limit]
