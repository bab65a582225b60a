"""Runtime settings for the order workflow, read from the environment.

Persistence, brokers and the event store are configured through Protean's
``domain.toml``; these are the workflow policies Protean knows nothing about.
"""

import os
from functools import lru_cache

from pydantic import BaseModel


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # Outbound notifications
    notifications_enabled: bool = True
    notifications_from_address: str = "notifications@merchflow.local"
    copy_approvers_on_creation: bool = True

    # Order policy
    require_rejection_comment: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            notifications_enabled=_flag("NOTIFICATIONS_ENABLED", True),
            notifications_from_address=os.environ.get("NOTIFICATIONS_FROM_ADDRESS", "notifications@merchflow.local"),
            copy_approvers_on_creation=_flag("NOTIFICATIONS_COPY_APPROVERS_ON_CREATION", True),
            require_rejection_comment=_flag("REQUIRE_REJECTION_COMMENT", False),
        )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()
