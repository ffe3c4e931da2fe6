from enum import Enum
from typing import Optional


class StripeEventType(str, Enum):
    """
    Stripe event types the billing sync reacts to.
    Values are the exact `type` strings Stripe sends.
    """
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    CHECKOUT_SESSION_EXPIRED = "checkout.session.expired"
    INVOICE_PAID = "invoice.paid"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
    SUBSCRIPTION_CREATED = "customer.subscription.created"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"

    @classmethod
    def from_string(cls, event_type: Optional[str]) -> Optional["StripeEventType"]:
        """Resolve a raw Stripe type string, None when it is not one we handle"""
        try:
            return cls(event_type)
        except ValueError:
            return None
