import logging
import stripe
from app.core.config import settings

logger = logging.getLogger(__name__)


class StripeWebhookVerificationError(Exception):
    """Payload could not be authenticated or parsed as a Stripe event"""


class StripeService:
    def __init__(self):
        if settings.stripe_secret_key:
            stripe.api_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret or None
        self.tolerance = settings.stripe_webhook_tolerance

    @property
    def webhook_configured(self) -> bool:
        return bool(self.webhook_secret)

    def construct_event(self, payload: bytes, signature: str) -> stripe.Event:
        """
        Verify the Stripe-Signature header and parse the payload into a typed event.

        Raises:
            StripeWebhookVerificationError: if the signature is invalid or the payload malformed
        """
        try:
            return stripe.Webhook.construct_event(
                payload, signature, self.webhook_secret, tolerance=self.tolerance
            )
        except stripe.error.SignatureVerificationError as e:
            logger.warning(f"Invalid Stripe webhook signature: {e}")
            raise StripeWebhookVerificationError("Invalid signature") from e
        except ValueError as e:
            logger.warning(f"Invalid Stripe webhook payload: {e}")
            raise StripeWebhookVerificationError("Invalid payload") from e

# Create a singleton instance
stripe_service = StripeService()
