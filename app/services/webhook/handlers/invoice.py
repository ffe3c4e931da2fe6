import logging
from typing import Any

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.subscription import SubscriptionStatus
from app.services.webhook.discount import DiscountExtractor, discount_extractor
from app.services.webhook.event_types import StripeEventType
from app.services.webhook.handlers.base import StripeEventHandler

logger = logging.getLogger(__name__)


class InvoicePaidHandler(StripeEventHandler):
    """
    Records the amount and currency of the last paid invoice.

    An invoice for a customer we do not know yet is logged and ignored: it can
    arrive before the local subscription is linked.
    """

    event_type = StripeEventType.INVOICE_PAID

    def __init__(self, discounts: DiscountExtractor = discount_extractor, **kwargs):
        super().__init__(**kwargs)
        self.discounts = discounts

    async def handle(self, db: AsyncSession, event: Any) -> None:
        invoice = self.object_mapper.deserialize(event, stripe.Invoice)
        customer_id = invoice.get("customer")

        logger.info(f"Invoice paid for customer: {customer_id}")

        subscription = await self.find_subscription(db, customer_id)
        if subscription is None:
            logger.warning(f"No subscription found for customer: {customer_id} when processing invoice.paid")
            return

        currency = invoice.get("currency")
        subscription.last_invoice_amount = invoice.get("amount_paid")
        subscription.currency = currency.upper() if currency else None
        await self.subscriptions.save(db, subscription)

        # Read-only view of the coupon, Stripe keeps the authoritative copy
        snapshot = self.discounts.extract(invoice.get("discount"))
        if snapshot is not None:
            logger.info(
                f"Invoice for customer {customer_id} paid with coupon {snapshot.coupon_id} "
                f"({snapshot.discount_type.value} {snapshot.value}, "
                f"{'expired' if self.discounts.is_expired(snapshot) else 'active'})"
            )


class InvoicePaymentFailedHandler(StripeEventHandler):
    """Marks the subscription PAST_DUE; a failed payment must always belong to a known customer"""

    event_type = StripeEventType.INVOICE_PAYMENT_FAILED

    async def handle(self, db: AsyncSession, event: Any) -> None:
        invoice = self.object_mapper.deserialize(event, stripe.Invoice)
        customer_id = invoice.get("customer")
        logger.warning(f"Payment failed for customer: {customer_id}")

        subscription = await self.require_subscription(db, customer_id, event_id=self.event_id(event))
        subscription.status = SubscriptionStatus.PAST_DUE
        await self.subscriptions.save(db, subscription)

        logger.info(f"Subscription status updated to PAST_DUE for user {subscription.user_id}")


class InvoicePaymentSucceededHandler(StripeEventHandler):
    """Moves a PAST_DUE subscription back to ACTIVE once a payment goes through"""

    event_type = StripeEventType.INVOICE_PAYMENT_SUCCEEDED

    async def handle(self, db: AsyncSession, event: Any) -> None:
        invoice = self.object_mapper.deserialize(event, stripe.Invoice)
        customer_id = invoice.get("customer")

        logger.info(f"Payment succeeded for customer: {customer_id}, subscription: {invoice.get('subscription')}")

        subscription = await self.require_subscription(db, customer_id, event_id=self.event_id(event))

        if subscription.status != SubscriptionStatus.PAST_DUE:
            logger.debug("Subscription is not PAST_DUE, no status update needed")
            return

        subscription.status = SubscriptionStatus.ACTIVE
        await self.subscriptions.save(db, subscription)
        logger.info(f"Subscription status updated to ACTIVE after successful payment for user {subscription.user_id}")
