from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from .base import Base, TimestampMixin


class SubscriptionStatus(str, enum.Enum):
    """Billing status synchronized from Stripe"""
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"
    PAST_DUE = "PAST_DUE"
    INCOMPLETE = "INCOMPLETE"
    UNPAID = "UNPAID"


class DiscountType(str, enum.Enum):
    """Kind of coupon applied to a subscription"""
    PERCENTAGE = "PERCENTAGE"
    AMOUNT = "AMOUNT"


class Subscription(Base, TimestampMixin):
    """One billing record per user, reconciled against Stripe by the webhook handlers"""
    __tablename__ = "subscriptions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(String(255), nullable=False, unique=True, index=True)
    plan_id = Column(UUID(as_uuid=True), ForeignKey("plans.id"), nullable=False)
    plan = relationship("Plan", lazy="joined")

    # Stripe-related fields
    stripe_customer_id = Column(String(255), nullable=True, index=True)  # Join key for webhooks
    stripe_subscription_id = Column(String(255), nullable=True)
    status = Column(SQLEnum(SubscriptionStatus), default=SubscriptionStatus.ACTIVE, nullable=False)
    cancel_at_period_end = Column(Boolean, default=False, nullable=False)
    current_period_end = Column(DateTime, nullable=True)

    # Discount snapshot, all four set or all four null
    stripe_coupon_id = Column(String(255), nullable=True)
    discount_type = Column(SQLEnum(DiscountType), nullable=True)
    discount_value = Column(Float, nullable=True)
    discount_end_date = Column(DateTime, nullable=True)

    # Last paid invoice
    last_invoice_amount = Column(Integer, nullable=True)  # Minor currency units
    currency = Column(String(3), nullable=True)
