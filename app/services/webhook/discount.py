"""
Discount snapshots read from Stripe.

Stripe stays the source of truth for coupons: snapshots are rebuilt from the
payload every time they are needed and the sync handlers never store them.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from app.models.subscription import DiscountType, Subscription
from app.utils.utils import add_months, epoch_to_datetime, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscountSnapshot:
    """Coupon data copied from a Stripe discount, handled as one unit"""
    coupon_id: str
    discount_type: DiscountType
    value: Optional[float]
    end_date: Optional[datetime]

    def apply_to(self, subscription: Subscription) -> None:
        subscription.stripe_coupon_id = self.coupon_id
        subscription.discount_type = self.discount_type
        subscription.discount_value = self.value
        subscription.discount_end_date = self.end_date


class DiscountExtractor:
    """Builds, clears and checks discount snapshots"""

    def extract(self, stripe_discount: Optional[Mapping[str, Any]]) -> Optional[DiscountSnapshot]:
        """
        Build a snapshot from a Stripe Discount object.

        Returns None when there is no discount, no coupon, or no coupon id.
        """
        if not stripe_discount:
            return None

        coupon = self._coupon(stripe_discount)
        if not coupon:
            return None

        coupon_id = coupon.get("id")
        if coupon_id is None:
            logger.warning("Discount found but no coupon ID available")
            return None

        try:
            snapshot = DiscountSnapshot(
                coupon_id=coupon_id,
                discount_type=self._discount_type(coupon),
                value=self._discount_value(coupon),
                end_date=self._end_date(stripe_discount, coupon),
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to extract discount data for coupon {coupon_id}: {e}")
            return None

        logger.debug(
            f"Extracted discount: coupon={snapshot.coupon_id}, type={snapshot.discount_type.value}, "
            f"value={snapshot.value}, end_date={snapshot.end_date}"
        )
        return snapshot

    def clear(self, subscription: Subscription) -> None:
        """Reset the four discount fields of a subscription"""
        subscription.stripe_coupon_id = None
        subscription.discount_type = None
        subscription.discount_value = None
        subscription.discount_end_date = None

    def is_expired(self, snapshot: Optional[DiscountSnapshot]) -> bool:
        """True when the snapshot has an end date strictly in the past; permanent discounts never expire"""
        if snapshot is None or snapshot.end_date is None:
            return False
        return snapshot.end_date < utc_now()

    @staticmethod
    def _coupon(stripe_discount: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
        # Newer API versions nest the coupon under `source`
        coupon = stripe_discount.get("coupon")
        if not coupon:
            source = stripe_discount.get("source") or {}
            coupon = source.get("coupon")
        if isinstance(coupon, str):
            # Unexpanded reference: only the id is known
            return {"id": coupon}
        return coupon

    @staticmethod
    def _discount_type(coupon: Mapping[str, Any]) -> DiscountType:
        if coupon.get("percent_off") is not None:
            return DiscountType.PERCENTAGE
        if coupon.get("amount_off") is not None:
            return DiscountType.AMOUNT
        # Expanded Stripe coupons always carry one of the two
        return DiscountType.PERCENTAGE

    @staticmethod
    def _discount_value(coupon: Mapping[str, Any]) -> Optional[float]:
        if coupon.get("percent_off") is not None:
            return float(coupon["percent_off"])
        if coupon.get("amount_off") is not None:
            # Stripe amounts are in minor units
            return coupon["amount_off"] / 100.0
        return None

    @staticmethod
    def _end_date(stripe_discount: Mapping[str, Any], coupon: Mapping[str, Any]) -> Optional[datetime]:
        duration_in_months = coupon.get("duration_in_months")
        start = stripe_discount.get("start")
        if duration_in_months is not None and start is not None:
            return add_months(epoch_to_datetime(start), int(duration_in_months))

        if stripe_discount.get("end") is not None:
            return epoch_to_datetime(stripe_discount["end"])

        # No end date: permanent discount
        return None


discount_extractor = DiscountExtractor()
