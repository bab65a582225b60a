"""MerchFlow bounded context: merchandise ordering with approval and fulfillment.

Store users place orders, approvers decide on them, fulfillment agents accept
and dispatch them, administrators manage users and products. Users, products,
orders, notifications and audit entries live in one domain so that an order
transition can read its collaborators inside the same unit of work.
"""

from protean.domain import Domain

from merchflow.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
merchflow = Domain(name="merchflow")
