"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String

from merchflow.domain import merchflow


@merchflow.event(part_of="Notification")
class NotificationLogged:
    """A notification was composed and logged ahead of delivery."""

    __version__ = 1

    notification_id: Identifier(required=True)
    notification_type: String(required=True)
    subject: String(required=True)
    recipients: String(required=True)
    created_at: DateTime(required=True)


@merchflow.event(part_of="Notification")
class NotificationSent:
    __version__ = 1

    notification_id: Identifier(required=True)
    message_id: String()
    sent_at: DateTime(required=True)


@merchflow.event(part_of="Notification")
class NotificationFailed:
    """The email channel refused or failed to send the notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    reason: String(required=True)
    failed_at: DateTime(required=True)


@merchflow.event(part_of="Notification")
class NotificationSuppressed:
    """Delivery is switched off; the notification was logged only."""

    __version__ = 1

    notification_id: Identifier(required=True)
    suppressed_at: DateTime(required=True)
