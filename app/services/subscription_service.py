import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.crud.plan import plan_crud
from app.crud.subscription import subscription_crud
from app.models.subscription import Subscription, SubscriptionStatus
from app.schemas.billing import SubscriptionCreate, SubscriptionStatusResponse

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Subscription lifecycle outside of Stripe webhooks"""

    async def create_default_subscription(
        self,
        db: AsyncSession,
        user_id: str,
        stripe_customer_id: Optional[str] = None
    ) -> Subscription:
        """
        Create the FREE subscription of a newly registered user.
        Returns the existing subscription when the user already has one.
        """
        existing = await subscription_crud.get_by_user_id(db, user_id)
        if existing:
            return existing

        free_plan = await plan_crud.get_free_plan(db)
        subscription = await subscription_crud.create(
            db,
            obj_in=SubscriptionCreate(
                user_id=user_id,
                plan_id=free_plan.id,
                status=SubscriptionStatus.ACTIVE,
                cancel_at_period_end=False,
                stripe_customer_id=stripe_customer_id
            )
        )
        logger.info(f"Created FREE subscription for user {user_id}")
        return subscription

    async def get_status(self, db: AsyncSession, user_id: str) -> SubscriptionStatusResponse:
        """Plan and billing state of a user's subscription"""
        subscription = await subscription_crud.get_by_user_id(db, user_id)
        if subscription is None:
            raise NotFoundError("Subscription")

        plan = subscription.plan
        return SubscriptionStatusResponse(
            plan_name=plan.name,
            monthly_token_limit=plan.monthly_token_limit,
            daily_message_limit=plan.daily_message_limit,
            price_cents=plan.price_cents,
            currency=plan.currency,
            status=subscription.status,
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            has_stripe_subscription=subscription.stripe_subscription_id is not None
        )


subscription_service = SubscriptionService()
