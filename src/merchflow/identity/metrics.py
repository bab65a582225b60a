"""Head counts for the user administration dashboard."""

from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain

from merchflow.identity.user import User, UserRole

DEFAULT_ACTIVE_WINDOW_DAYS = 30


@dataclass(frozen=True)
class UserMetrics:
    total_users: int
    active_users: int
    store_users: int
    approvers: int
    fulfillment_agents: int
    admins: int
    lookback_days: int


def _as_utc(value: datetime) -> datetime:
    # Relational providers may hand back naive timestamps
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def collect_user_metrics(lookback_days: int = DEFAULT_ACTIVE_WINDOW_DAYS) -> UserMetrics:
    """Users per role, plus how many logged in within the lookback window.

    A non-positive window falls back to the default.
    """
    days = lookback_days if lookback_days > 0 else DEFAULT_ACTIVE_WINDOW_DAYS
    cutoff = datetime.now(UTC) - timedelta(days=days)

    users = current_domain.repository_for(User).everyone()
    per_role = Counter(u.role for u in users)
    active = sum(1 for u in users if u.last_login_at is not None and _as_utc(u.last_login_at) >= cutoff)

    return UserMetrics(
        total_users=len(users),
        active_users=active,
        store_users=per_role[UserRole.STORE_USER.value],
        approvers=per_role[UserRole.APPROVER.value],
        fulfillment_agents=per_role[UserRole.FULFILLMENT_AGENT.value],
        admins=per_role[UserRole.ADMIN.value],
        lookback_days=days,
    )
