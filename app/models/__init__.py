# Database models package

from .base import Base
from .plan import Plan, PlanType
from .subscription import Subscription, SubscriptionStatus, DiscountType

__all__ = [
    'Base',
    'Plan',
    'PlanType',
    'Subscription',
    'SubscriptionStatus',
    'DiscountType'
]
