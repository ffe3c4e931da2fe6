from datetime import datetime
from unittest.mock import AsyncMock

import pytest
import stripe

from app.models.plan import PlanType
from app.models.subscription import SubscriptionStatus
from app.services.webhook.orchestrator import SubscriptionOrchestrator
from tests.factories import PRICE_MAX, PRICE_PLUS, make_plan, make_subscription, stripe_subscription_payload


def as_stripe_subscription(**kwargs) -> stripe.Subscription:
    return stripe.Subscription.construct_from(stripe_subscription_payload(**kwargs), "sk_test_123")


@pytest.fixture
def plan_store():
    return AsyncMock()


@pytest.fixture
def subscription_store():
    return AsyncMock()


@pytest.fixture
def orchestrator(plan_store, subscription_store):
    return SubscriptionOrchestrator(plans=plan_store, subscriptions=subscription_store)


@pytest.mark.asyncio
async def test_basic_fields_are_copied(orchestrator, plan_store, subscription_store):
    subscription = make_subscription()
    plan_store.get_by_stripe_price_id.return_value = subscription.plan

    await orchestrator.synchronize(
        AsyncMock(), subscription,
        as_stripe_subscription(status="past_due", cancel_at_period_end=True, current_period_end=1767225600)
    )

    assert subscription.stripe_subscription_id == "sub_123"
    assert subscription.status == SubscriptionStatus.PAST_DUE
    assert subscription.cancel_at_period_end is True
    assert subscription.current_period_end == datetime(2026, 1, 1)
    subscription_store.save.assert_awaited_once()


@pytest.mark.asyncio
async def test_missing_period_end_leaves_it_untouched(orchestrator, plan_store):
    subscription = make_subscription(current_period_end=datetime(2025, 6, 1))
    plan_store.get_by_stripe_price_id.return_value = None

    await orchestrator.synchronize(AsyncMock(), subscription, as_stripe_subscription(current_period_end=None))

    assert subscription.current_period_end == datetime(2025, 6, 1)


@pytest.mark.asyncio
async def test_period_end_falls_back_to_first_item(orchestrator, plan_store):
    subscription = make_subscription()
    plan_store.get_by_stripe_price_id.return_value = None
    payload = stripe_subscription_payload(current_period_end=None)
    payload["items"]["data"][0]["current_period_end"] = 1767225600

    await orchestrator.synchronize(
        AsyncMock(), subscription, stripe.Subscription.construct_from(payload, "sk_test_123")
    )

    assert subscription.current_period_end == datetime(2026, 1, 1)


@pytest.mark.asyncio
async def test_cancel_flag_defaults_to_false_when_omitted(orchestrator, plan_store):
    subscription = make_subscription(cancel_at_period_end=True)
    plan_store.get_by_stripe_price_id.return_value = None
    payload = stripe_subscription_payload()
    del payload["cancel_at_period_end"]

    await orchestrator.synchronize(
        AsyncMock(), subscription, stripe.Subscription.construct_from(payload, "sk_test_123")
    )

    assert subscription.cancel_at_period_end is False


@pytest.mark.asyncio
async def test_plan_is_replaced_when_price_matches_another_plan(orchestrator, plan_store):
    subscription = make_subscription(plan=make_plan(PlanType.PLUS, PRICE_PLUS))
    max_plan = make_plan(PlanType.MAX, PRICE_MAX)
    plan_store.get_by_stripe_price_id.return_value = max_plan

    await orchestrator.synchronize(AsyncMock(), subscription, as_stripe_subscription(price_id=PRICE_MAX))

    plan_store.get_by_stripe_price_id.assert_awaited_once()
    assert plan_store.get_by_stripe_price_id.await_args.args[1] == PRICE_MAX
    assert subscription.plan is max_plan
    assert subscription.plan_id == max_plan.id


@pytest.mark.asyncio
async def test_unknown_price_keeps_current_plan(orchestrator, plan_store, subscription_store, caplog):
    plus_plan = make_plan(PlanType.PLUS, PRICE_PLUS)
    subscription = make_subscription(plan=plus_plan)
    plan_store.get_by_stripe_price_id.return_value = None

    await orchestrator.synchronize(AsyncMock(), subscription, as_stripe_subscription(price_id="price_unknown"))

    assert subscription.plan is plus_plan
    assert subscription.plan_id == plus_plan.id
    assert "No plan found for Stripe price ID: price_unknown" in caplog.text
    subscription_store.save.assert_awaited_once()


@pytest.mark.asyncio
async def test_subscription_without_items_skips_plan_resolution(orchestrator, plan_store, subscription_store):
    plus_plan = make_plan(PlanType.PLUS, PRICE_PLUS)
    subscription = make_subscription(plan=plus_plan)

    await orchestrator.synchronize(AsyncMock(), subscription, as_stripe_subscription(price_id=None, status="active"))

    plan_store.get_by_stripe_price_id.assert_not_awaited()
    assert subscription.plan is plus_plan
    assert subscription.status == SubscriptionStatus.ACTIVE
    subscription_store.save.assert_awaited_once()


@pytest.mark.asyncio
async def test_discounts_are_left_alone(orchestrator, plan_store):
    subscription = make_subscription(stripe_coupon_id="WELCOME20", discount_value=20.0)
    plan_store.get_by_stripe_price_id.return_value = None
    payload = stripe_subscription_payload()
    payload["discount"] = {"object": "discount", "coupon": {"id": "OTHER", "percent_off": 50}}

    await orchestrator.synchronize(
        AsyncMock(), subscription, stripe.Subscription.construct_from(payload, "sk_test_123")
    )

    assert subscription.stripe_coupon_id == "WELCOME20"
    assert subscription.discount_value == 20.0


@pytest.mark.asyncio
async def test_synchronize_against_database_is_idempotent(db_session, plans, subscription_factory):
    subscription = await subscription_factory(plan=PlanType.FREE)
    orchestrator = SubscriptionOrchestrator()
    external = as_stripe_subscription(price_id=PRICE_PLUS, status="trialing")

    await orchestrator.synchronize(db_session, subscription, external)
    await db_session.commit()
    first = (subscription.plan_id, subscription.status, subscription.current_period_end, subscription.stripe_subscription_id)

    await orchestrator.synchronize(db_session, subscription, external)
    await db_session.commit()
    second = (subscription.plan_id, subscription.status, subscription.current_period_end, subscription.stripe_subscription_id)

    assert first == second
    assert subscription.plan_id == plans[PlanType.PLUS].id
    assert subscription.status == SubscriptionStatus.ACTIVE
