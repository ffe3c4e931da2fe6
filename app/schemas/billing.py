from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.models.plan import PlanType
from app.models.subscription import SubscriptionStatus


# Plan Schemas
class PlanBase(BaseModel):
    name: PlanType = Field(..., description="Plan tier (FREE, PLUS, MAX)")
    monthly_token_limit: int = Field(..., description="Tokens allowed per month")
    daily_message_limit: int = Field(..., description="Messages allowed per day")
    price_cents: int = Field(..., description="Price in minor currency units")
    currency: str = Field("EUR", description="ISO currency code")
    stripe_price_id: Optional[str] = Field(None, description="Stripe price ID")

class PlanCreate(PlanBase):
    pass

class PlanUpdate(BaseModel):
    monthly_token_limit: Optional[int] = None
    daily_message_limit: Optional[int] = None
    price_cents: Optional[int] = None
    currency: Optional[str] = None
    stripe_price_id: Optional[str] = None

class PlanResponse(PlanBase):
    id: UUID

    class Config:
        from_attributes = True

class PlanListResponse(BaseModel):
    success: bool
    plans: List[PlanResponse]


# Subscription Schemas
class SubscriptionCreate(BaseModel):
    user_id: str
    plan_id: UUID
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    cancel_at_period_end: bool = False
    stripe_customer_id: Optional[str] = None

class SubscriptionUpdate(BaseModel):
    plan_id: Optional[UUID] = None
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    status: Optional[SubscriptionStatus] = None
    cancel_at_period_end: Optional[bool] = None
    current_period_end: Optional[datetime] = None

class SubscriptionStatusResponse(BaseModel):
    """Subscription state as exposed to the account page (no discount data)"""
    plan_name: PlanType
    monthly_token_limit: int
    daily_message_limit: int
    price_cents: int
    currency: str
    status: SubscriptionStatus
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    has_stripe_subscription: bool = False


# Webhook Schemas
class WebhookAckResponse(BaseModel):
    received: bool = True
    skipped: Optional[str] = None
