from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import SubscriptionNotFoundError
from app.crud.subscription import subscription_crud
from app.models.subscription import Subscription
from app.services.webhook.event_types import StripeEventType
from app.services.webhook.object_mapper import get_field, stripe_object_mapper


class StripeEventHandler(ABC):
    """
    Processes one Stripe event type.

    Implementations must be idempotent: Stripe delivers at least once and
    may redeliver or reorder events.
    """

    event_type: StripeEventType

    def __init__(self, subscriptions=subscription_crud, object_mapper=stripe_object_mapper):
        self.subscriptions = subscriptions
        self.object_mapper = object_mapper

    @abstractmethod
    async def handle(self, db: AsyncSession, event: Any) -> None:
        ...

    @staticmethod
    def event_id(event: Any) -> Optional[str]:
        return get_field(event, "id")

    async def find_subscription(self, db: AsyncSession, customer_id: Optional[str]) -> Optional[Subscription]:
        return await self.subscriptions.get_by_stripe_customer_id(db, customer_id)

    async def require_subscription(
        self,
        db: AsyncSession,
        customer_id: Optional[str],
        event_id: Optional[str] = None
    ) -> Subscription:
        """Subscription linked to the customer, or SubscriptionNotFoundError"""
        subscription = await self.find_subscription(db, customer_id)
        if subscription is None:
            raise SubscriptionNotFoundError(customer_id, event_id=event_id)
        return subscription
