# Stripe webhook synchronization package

from .dispatcher import StripeWebhookDispatcher, stripe_webhook_dispatcher
from .event_types import StripeEventType

__all__ = [
    'StripeWebhookDispatcher',
    'stripe_webhook_dispatcher',
    'StripeEventType'
]
