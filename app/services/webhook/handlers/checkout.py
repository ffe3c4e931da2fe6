import logging
from typing import Any

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.subscription import SubscriptionStatus
from app.services.webhook.event_types import StripeEventType
from app.services.webhook.handlers.base import StripeEventHandler

logger = logging.getLogger(__name__)


class CheckoutSessionCompletedHandler(StripeEventHandler):
    """
    Links the Stripe subscription created by a checkout to the local record.

    Only the first link is written: a retried delivery, or one arriving after
    a newer link, leaves the record untouched. Promotion-code discounts are
    not copied here, Stripe keeps them.
    """

    event_type = StripeEventType.CHECKOUT_SESSION_COMPLETED

    async def handle(self, db: AsyncSession, event: Any) -> None:
        session = self.object_mapper.deserialize(event, stripe.checkout.Session)
        customer_id = session.get("customer")
        stripe_subscription_id = session.get("subscription")

        logger.info(f"Checkout session completed for customer: {customer_id}, subscription: {stripe_subscription_id}")

        subscription = await self.require_subscription(db, customer_id, event_id=self.event_id(event))

        if subscription.stripe_subscription_id is not None:
            logger.debug("Subscription already has a Stripe subscription ID, skipping update")
            return

        subscription.stripe_subscription_id = stripe_subscription_id
        subscription.status = SubscriptionStatus.ACTIVE
        await self.subscriptions.save(db, subscription)
        logger.info(f"Linked subscription to Stripe subscription ID: {stripe_subscription_id}")


class CheckoutSessionExpiredHandler(StripeEventHandler):
    """Abandoned checkout: logged only, nothing to reconcile"""

    event_type = StripeEventType.CHECKOUT_SESSION_EXPIRED

    async def handle(self, db: AsyncSession, event: Any) -> None:
        session = self.object_mapper.deserialize(event, stripe.checkout.Session)
        logger.warning(f"Checkout session expired for customer: {session.get('customer')}, session_id: {session.get('id')}")
