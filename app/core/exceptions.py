from fastapi import HTTPException, status
from typing import Optional


class NotFoundError(HTTPException):
    """Custom exception for not found errors"""
    def __init__(self, resource: str = "Resource"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")


# Webhook synchronization errors. These are not HTTP errors: the webhook
# router decides how each one is answered to Stripe.

class WebhookProcessingError(Exception):
    """
    Expected failure while processing a Stripe event: missing subscription,
    undecodable payload, payload of the wrong type. Stripe should not retry.
    """
    def __init__(self, message: str, event_id: Optional[str] = None):
        super().__init__(message)
        self.event_id = event_id

class SubscriptionNotFoundError(WebhookProcessingError):
    """No local subscription is linked to the Stripe customer"""
    def __init__(self, customer_id: Optional[str], event_id: Optional[str] = None):
        super().__init__(f"No subscription found for Stripe customer: {customer_id}", event_id)
        self.customer_id = customer_id

class WebhookHandlerNotFoundError(Exception):
    """A recognized event type has no registered handler (deployment defect)"""

class CatalogIntegrityError(Exception):
    """The plan catalog is missing a row the billing flow relies on"""
