from datetime import datetime

import pytest
from sqlalchemy import delete

from app.core.exceptions import CatalogIntegrityError
from app.crud import plan_crud, subscription_crud
from app.models import Plan, PlanType
from tests.factories import PRICE_MAX


@pytest.mark.asyncio
async def test_plan_lookups(db_session, plans):
    assert (await plan_crud.get_by_name(db_session, PlanType.PLUS)).id == plans[PlanType.PLUS].id
    assert (await plan_crud.get_by_stripe_price_id(db_session, PRICE_MAX)).name == PlanType.MAX
    assert await plan_crud.get_by_stripe_price_id(db_session, "price_unknown") is None
    assert (await plan_crud.get_free_plan(db_session)).stripe_price_id is None


@pytest.mark.asyncio
async def test_missing_free_plan_is_a_catalog_error(db_session, plans):
    await db_session.execute(delete(Plan).where(Plan.name == PlanType.FREE))
    await db_session.commit()

    with pytest.raises(CatalogIntegrityError):
        await plan_crud.get_free_plan(db_session)


@pytest.mark.asyncio
async def test_get_multi_orders_catalog_by_price(db_session, plans):
    items, total = await plan_crud.get_multi(db_session, order_by="price_cents", order_desc=False)

    assert total == 3
    assert [plan.name for plan in items] == [PlanType.FREE, PlanType.PLUS, PlanType.MAX]


@pytest.mark.asyncio
async def test_subscription_lookup_by_customer(db_session, subscription_factory):
    await subscription_factory(user_id="user-1", stripe_customer_id="cus_shared",
                               created_at=datetime(2025, 1, 2))
    await subscription_factory(user_id="user-2", stripe_customer_id="cus_shared",
                               created_at=datetime(2025, 1, 1))

    found = await subscription_crud.get_by_stripe_customer_id(db_session, "cus_shared")

    assert found.user_id == "user-2"
    assert await subscription_crud.get_by_stripe_customer_id(db_session, "cus_none") is None
    assert await subscription_crud.get_by_stripe_customer_id(db_session, None) is None


@pytest.mark.asyncio
async def test_subscription_lookup_by_user(db_session, subscription_factory):
    await subscription_factory(user_id="user-1", stripe_customer_id=None)

    found = await subscription_crud.get_by_user_id(db_session, "user-1")

    assert found.plan.name == PlanType.FREE
    assert await subscription_crud.get_by_user_id(db_session, "user-unknown") is None
