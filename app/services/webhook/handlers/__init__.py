# Stripe event handlers, one per StripeEventType

from typing import List

from .base import StripeEventHandler
from .checkout import CheckoutSessionCompletedHandler, CheckoutSessionExpiredHandler
from .invoice import InvoicePaidHandler, InvoicePaymentFailedHandler, InvoicePaymentSucceededHandler
from .subscription import SubscriptionCreatedHandler, SubscriptionUpdatedHandler, SubscriptionDeletedHandler


def build_default_handlers() -> List[StripeEventHandler]:
    """The production handler set, one instance per event type"""
    return [
        CheckoutSessionCompletedHandler(),
        CheckoutSessionExpiredHandler(),
        InvoicePaidHandler(),
        InvoicePaymentFailedHandler(),
        InvoicePaymentSucceededHandler(),
        SubscriptionCreatedHandler(),
        SubscriptionUpdatedHandler(),
        SubscriptionDeletedHandler(),
    ]


__all__ = [
    'StripeEventHandler',
    'CheckoutSessionCompletedHandler',
    'CheckoutSessionExpiredHandler',
    'InvoicePaidHandler',
    'InvoicePaymentFailedHandler',
    'InvoicePaymentSucceededHandler',
    'SubscriptionCreatedHandler',
    'SubscriptionUpdatedHandler',
    'SubscriptionDeletedHandler',
    'build_default_handlers'
]
