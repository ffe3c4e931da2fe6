import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import stripe

from app.core.exceptions import WebhookProcessingError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=stripe.StripeObject)

# Stripe `object` discriminator -> SDK class, for payloads the SDK left untyped
STRIPE_OBJECT_CLASSES: Dict[str, Type[stripe.StripeObject]] = {
    "checkout.session": stripe.checkout.Session,
    "invoice": stripe.Invoice,
    "subscription": stripe.Subscription,
    "discount": stripe.Discount,
}


def get_field(obj: Any, name: str) -> Any:
    """Read a key from a Stripe object, a plain dict or any attribute holder"""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


class StripeObjectMapper:
    """Turns the data object of a Stripe event into the SDK type a handler expects"""

    def deserialize(self, event: Any, expected_type: Type[T]) -> T:
        """
        Extract `event.data.object` as an instance of `expected_type`.

        The typed object built by the Stripe SDK is used when present; otherwise
        the raw payload is rebuilt from its `object` discriminator.

        Raises:
            WebhookProcessingError: on a type mismatch or when the payload cannot be decoded
        """
        event_id = get_field(event, "id")

        obj = self._typed_object(event)
        if obj is None:
            try:
                obj = self._rebuild_object(event)
            except Exception as e:
                logger.error(f"Failed to deserialize event data for event {event_id}: {e}")
                raise WebhookProcessingError(
                    f"Failed to deserialize {expected_type.__name__} from event {event_id}: {e}",
                    event_id=event_id,
                ) from e
            logger.debug(f"Used raw payload deserialization for event {event_id}")

        if not isinstance(obj, expected_type):
            actual = type(obj).__name__
            logger.error(f"Expected {expected_type.__name__} but got {actual} for event {event_id}")
            raise WebhookProcessingError(
                f"Type mismatch for event {event_id}: expected {expected_type.__name__} but got {actual}",
                event_id=event_id,
            )
        return obj

    @staticmethod
    def _typed_object(event: Any) -> Optional[stripe.StripeObject]:
        """Object already typed by the SDK, None when the SDK could not resolve its class"""
        data = get_field(event, "data")
        if data is None:
            return None
        obj = get_field(data, "object")
        if isinstance(obj, stripe.StripeObject) and type(obj) is not stripe.StripeObject:
            return obj
        return None

    @staticmethod
    def _rebuild_object(event: Any) -> stripe.StripeObject:
        """Rebuild a typed object from the raw payload"""
        raw = get_field(event, "data")["object"]
        values = dict(raw)
        object_name = values["object"]
        object_class = STRIPE_OBJECT_CLASSES.get(object_name)
        if object_class is None:
            raise ValueError(f"Unsupported Stripe object type: {object_name}")
        return object_class.construct_from(values, stripe.api_key)


stripe_object_mapper = StripeObjectMapper()
