"""Notification dispatch: log, then deliver through the email channel.

Every composed message is logged as a Notification before delivery is
attempted. Delivery is best effort: a failure is recorded on the
notification and logged, never raised to the caller.
"""

import structlog
from protean.utils.globals import current_domain

from merchflow.config import Settings
from merchflow.notification.channel import get_channel
from merchflow.notification.notification import Notification

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    def __init__(self, settings: Settings, channel=None):
        self.settings = settings
        self._channel = channel

    @property
    def channel(self):
        return self._channel if self._channel is not None else get_channel()

    def dispatch(self, notification_type: str, recipients: list[str], subject: str, body: str):
        """Log and send one message. Returns the logged Notification, or None when skipped."""
        if not recipients:
            logger.debug("Skipping notification, no recipients resolved", subject=subject)
            return None

        repo = current_domain.repository_for(Notification)
        notification = Notification.log(
            notification_type=notification_type,
            subject=subject,
            recipients=recipients,
            body=body,
        )
        repo.add(notification)

        if not self.settings.notifications_enabled:
            notification.suppress()
            repo.add(notification)
            logger.debug("Notifications disabled, captured log entry only", subject=subject)
            return notification

        try:
            result = self.channel.send(
                sender=self.settings.notifications_from_address,
                to=recipients,
                subject=subject,
                body=body,
            )
            if result.get("status") == "sent":
                notification.mark_sent(message_id=result.get("message_id"))
            else:
                notification.mark_failed(result.get("error", "Unknown dispatch error"))
                logger.warning("Unable to send notification email", subject=subject, error=notification.failure_reason)
                logger.debug("Email failure", subject=subject, recipients=recipients, result=result)
        except Exception as e:
            notification.mark_failed(str(e))
            logger.warning("Unable to send notification email", subject=subject, error=str(e))
            logger.debug("Email failure", subject=subject, exc_info=True)

        repo.add(notification)
        return notification


def latest_notifications(limit: int | None = 20) -> list[Notification]:
    """Most recent notifications first. ``limit`` is clamped to 1..100."""
    limit = 20 if limit is None else max(1, min(int(limit), 100))
    return current_domain.repository_for(Notification).latest(limit)
