import logging
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.plan import plan_crud
from app.crud.subscription import subscription_crud
from app.models.subscription import Subscription
from app.services.webhook.status_mapper import map_status
from app.utils.utils import epoch_to_datetime

logger = logging.getLogger(__name__)


class SubscriptionOrchestrator:
    """
    Applies a Stripe Subscription object to the local subscription record.

    Covers status, cancellation flag, period end and plan. Discounts are left
    alone: Stripe stays the system of record for them.
    """

    def __init__(self, plans=plan_crud, subscriptions=subscription_crud):
        self.plans = plans
        self.subscriptions = subscriptions

    async def synchronize(
        self,
        db: AsyncSession,
        subscription: Subscription,
        stripe_subscription: Mapping[str, Any]
    ) -> Subscription:
        """Update `subscription` from `stripe_subscription` and persist it once"""
        self._update_basic_fields(subscription, stripe_subscription)
        await self._update_plan(db, subscription, stripe_subscription)

        await self.subscriptions.save(db, subscription)
        logger.debug(f"Subscription {stripe_subscription.get('id')} synchronized from Stripe")
        return subscription

    def _update_basic_fields(self, subscription: Subscription, stripe_subscription: Mapping[str, Any]) -> None:
        subscription.stripe_subscription_id = stripe_subscription.get("id")
        subscription.status = map_status(stripe_subscription.get("status"))
        subscription.cancel_at_period_end = bool(stripe_subscription.get("cancel_at_period_end") or False)

        period_end = self._period_end(stripe_subscription)
        if period_end is not None:
            subscription.current_period_end = epoch_to_datetime(period_end)

        logger.debug(
            f"Updated basic fields for subscription {subscription.stripe_subscription_id}: "
            f"status={subscription.status.value}, cancel_at_period_end={subscription.cancel_at_period_end}"
        )

    async def _update_plan(
        self,
        db: AsyncSession,
        subscription: Subscription,
        stripe_subscription: Mapping[str, Any]
    ) -> None:
        price_id = self._first_price_id(stripe_subscription)
        if price_id is None:
            logger.warning(f"Stripe subscription {stripe_subscription.get('id')} has no items, keeping current plan")
            return

        new_plan = await self.plans.get_by_stripe_price_id(db, price_id)
        if new_plan is None:
            logger.warning(f"No plan found for Stripe price ID: {price_id}, keeping current plan")
            return

        current_plan = subscription.plan
        if current_plan is not None and current_plan.id == new_plan.id:
            return

        logger.info(
            f"Updating plan from {current_plan.name.value if current_plan else None} to {new_plan.name.value} "
            f"for subscription {stripe_subscription.get('id')}"
        )
        subscription.plan = new_plan
        subscription.plan_id = new_plan.id

    @staticmethod
    def _items(stripe_subscription: Mapping[str, Any]) -> list:
        items = stripe_subscription.get("items")
        if not items:
            return []
        return items.get("data") or []

    def _first_price_id(self, stripe_subscription: Mapping[str, Any]) -> Optional[str]:
        items = self._items(stripe_subscription)
        if not items:
            return None
        price = items[0].get("price") or {}
        return price.get("id")

    def _period_end(self, stripe_subscription: Mapping[str, Any]) -> Optional[int]:
        # Newer API versions moved the billing period onto the subscription items
        period_end = stripe_subscription.get("current_period_end")
        if period_end is None:
            items = self._items(stripe_subscription)
            if items:
                period_end = items[0].get("current_period_end")
        return period_end


subscription_orchestrator = SubscriptionOrchestrator()
