import logging
from typing import Any

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.plan import plan_crud
from app.models.subscription import SubscriptionStatus
from app.services.webhook.discount import DiscountExtractor, discount_extractor
from app.services.webhook.event_types import StripeEventType
from app.services.webhook.handlers.base import StripeEventHandler
from app.services.webhook.orchestrator import SubscriptionOrchestrator, subscription_orchestrator

logger = logging.getLogger(__name__)


class _SubscriptionSyncHandler(StripeEventHandler):
    """Shared by created/updated: the Stripe subscription is applied as-is by the orchestrator"""

    def __init__(self, orchestrator: SubscriptionOrchestrator = subscription_orchestrator, **kwargs):
        super().__init__(**kwargs)
        self.orchestrator = orchestrator

    async def handle(self, db: AsyncSession, event: Any) -> None:
        stripe_subscription = self.object_mapper.deserialize(event, stripe.Subscription)
        customer_id = stripe_subscription.get("customer")
        logger.info(f"{self.event_type.value} for customer: {customer_id}")

        subscription = await self.require_subscription(db, customer_id, event_id=self.event_id(event))
        await self.orchestrator.synchronize(db, subscription, stripe_subscription)


class SubscriptionCreatedHandler(_SubscriptionSyncHandler):
    event_type = StripeEventType.SUBSCRIPTION_CREATED


class SubscriptionUpdatedHandler(_SubscriptionSyncHandler):
    event_type = StripeEventType.SUBSCRIPTION_UPDATED


class SubscriptionDeletedHandler(StripeEventHandler):
    """
    Returns the user to the FREE plan once Stripe ends the subscription.

    Unconditional: whatever the previous plan or status, the record ends up
    on FREE, ACTIVE, unlinked from Stripe and without discount.
    """

    event_type = StripeEventType.SUBSCRIPTION_DELETED

    def __init__(self, plans=plan_crud, discounts: DiscountExtractor = discount_extractor, **kwargs):
        super().__init__(**kwargs)
        self.plans = plans
        self.discounts = discounts

    async def handle(self, db: AsyncSession, event: Any) -> None:
        stripe_subscription = self.object_mapper.deserialize(event, stripe.Subscription)
        customer_id = stripe_subscription.get("customer")
        logger.info(f"Subscription deleted for customer: {customer_id}, returning to FREE plan")

        subscription = await self.require_subscription(db, customer_id, event_id=self.event_id(event))
        free_plan = await self.plans.get_free_plan(db)

        subscription.plan = free_plan
        subscription.plan_id = free_plan.id
        subscription.stripe_subscription_id = None
        subscription.stripe_customer_id = None
        subscription.status = SubscriptionStatus.ACTIVE
        subscription.cancel_at_period_end = False
        subscription.current_period_end = None
        self.discounts.clear(subscription)

        await self.subscriptions.save(db, subscription)
        logger.info(f"User {subscription.user_id} returned to FREE plan after subscription deletion")
