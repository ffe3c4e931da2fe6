import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import WebhookHandlerNotFoundError
from app.services.webhook.event_types import StripeEventType
from app.services.webhook.handlers import StripeEventHandler, build_default_handlers
from app.services.webhook.object_mapper import get_field

logger = logging.getLogger(__name__)


class StripeWebhookDispatcher:
    """
    Routes a verified Stripe event to the handler registered for its type.

    Each delivery runs in a single transaction: committed when the handler
    returns, rolled back when it raises. Event types we do not track are
    acknowledged without doing anything; a tracked type without a handler is
    a deployment defect and raises.
    """

    def __init__(self, handlers: Optional[Iterable[StripeEventHandler]] = None):
        self.handlers: Dict[StripeEventType, StripeEventHandler] = {}
        for handler in (build_default_handlers() if handlers is None else handlers):
            if handler.event_type in self.handlers:
                raise ValueError(f"Duplicate handler registered for event type: {handler.event_type.value}")
            self.handlers[handler.event_type] = handler

    async def handle_event(self, db: AsyncSession, event: Any) -> None:
        raw_type = get_field(event, "type")
        event_id = get_field(event, "id")

        event_type = StripeEventType.from_string(raw_type)
        if event_type is None:
            logger.debug(f"Unhandled event type: {raw_type} (id: {event_id})")
            return

        handler = self.handlers.get(event_type)
        if handler is None:
            message = f"No handler registered for event type: {event_type.value} (id: {event_id})"
            logger.error(message)
            raise WebhookHandlerNotFoundError(message)

        logger.debug(f"Delegating event {event_id} to handler {type(handler).__name__}")
        try:
            await handler.handle(db, event)
            await db.commit()
        except Exception:
            await db.rollback()
            raise


stripe_webhook_dispatcher = StripeWebhookDispatcher()
