import logging
from typing import Dict

from app.models.subscription import SubscriptionStatus

logger = logging.getLogger(__name__)

STRIPE_STATUS_MAP: Dict[str, SubscriptionStatus] = {
    "active": SubscriptionStatus.ACTIVE,
    "past_due": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELED,
    "incomplete": SubscriptionStatus.INCOMPLETE,
    "incomplete_expired": SubscriptionStatus.UNPAID,
    "unpaid": SubscriptionStatus.UNPAID,
    "trialing": SubscriptionStatus.ACTIVE,
}


def map_status(stripe_status: str) -> SubscriptionStatus:
    """Convert a Stripe subscription status string to our SubscriptionStatus"""
    if stripe_status is None:
        raise ValueError("Stripe subscription status must not be None")

    status = STRIPE_STATUS_MAP.get(stripe_status)
    if status is None:
        # TODO: decide whether unknown statuses should stay ACTIVE (see DESIGN.md open questions)
        logger.warning(f"Unknown Stripe status: {stripe_status}, defaulting to ACTIVE")
        return SubscriptionStatus.ACTIVE
    return status
