from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from app.crud.base import CRUDBase
from app.core.exceptions import CatalogIntegrityError
from app.models.plan import Plan, PlanType
from app.schemas.billing import PlanCreate, PlanUpdate


class CRUDPlan(CRUDBase[Plan, PlanCreate, PlanUpdate]):
    async def get_by_name(self, db: AsyncSession, name: PlanType) -> Optional[Plan]:
        """Get plan by tier"""
        result = await db.execute(
            select(self.model).where(
                and_(
                    self.model.name == name,
                    self.model.is_deleted == False
                )
            )
        )
        return result.scalar_one_or_none()

    async def get_by_stripe_price_id(self, db: AsyncSession, stripe_price_id: str) -> Optional[Plan]:
        """Get plan by Stripe price ID"""
        result = await db.execute(
            select(self.model).where(
                and_(
                    self.model.stripe_price_id == stripe_price_id,
                    self.model.is_deleted == False
                )
            )
        )
        return result.scalar_one_or_none()

    async def get_free_plan(self, db: AsyncSession) -> Plan:
        """Get the FREE plan, which every catalog must contain"""
        plan = await self.get_by_name(db, PlanType.FREE)
        if plan is None:
            raise CatalogIntegrityError("Plan FREE not found in database")
        return plan


plan_crud = CRUDPlan(Plan)
