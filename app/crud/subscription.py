from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from app.crud.base import CRUDBase
from app.models.subscription import Subscription
from app.schemas.billing import SubscriptionCreate, SubscriptionUpdate


class CRUDSubscription(CRUDBase[Subscription, SubscriptionCreate, SubscriptionUpdate]):
    async def get_by_user_id(self, db: AsyncSession, user_id: str) -> Optional[Subscription]:
        """Get the subscription owned by a user"""
        result = await db.execute(
            select(self.model).where(
                and_(
                    self.model.user_id == user_id,
                    self.model.is_deleted == False
                )
            )
        )
        return result.scalar_one_or_none()

    async def get_by_stripe_customer_id(
        self,
        db: AsyncSession,
        stripe_customer_id: Optional[str]
    ) -> Optional[Subscription]:
        """Get the first subscription linked to a Stripe customer"""
        if not stripe_customer_id:
            return None
        result = await db.execute(
            select(self.model)
            .where(
                and_(
                    self.model.stripe_customer_id == stripe_customer_id,
                    self.model.is_deleted == False
                )
            )
            .order_by(self.model.created_at.asc())
            .limit(1)
        )
        return result.scalars().first()


subscription_crud = CRUDSubscription(Subscription)
