"""Shared fixtures: in-memory database and seeded plan catalog."""

from typing import Any, Dict, Optional

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base, Plan, PlanType, Subscription, SubscriptionStatus
from tests.factories import PRICE_MAX, PRICE_PLUS


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def plans(db_session) -> Dict[PlanType, Plan]:
    """FREE / PLUS / MAX catalog, as seeded by the migration."""
    catalog = {
        PlanType.FREE: Plan(name=PlanType.FREE, monthly_token_limit=10000, daily_message_limit=10,
                            price_cents=0, currency="EUR", stripe_price_id=None),
        PlanType.PLUS: Plan(name=PlanType.PLUS, monthly_token_limit=100000, daily_message_limit=50,
                            price_cents=999, currency="EUR", stripe_price_id=PRICE_PLUS),
        PlanType.MAX: Plan(name=PlanType.MAX, monthly_token_limit=500000, daily_message_limit=200,
                           price_cents=1999, currency="EUR", stripe_price_id=PRICE_MAX),
    }
    db_session.add_all(catalog.values())
    await db_session.commit()
    return catalog


@pytest_asyncio.fixture
async def subscription_factory(db_session, plans):
    """Persist a subscription, FREE and ACTIVE unless told otherwise."""
    async def _create(
        user_id: str = "user-1",
        stripe_customer_id: Optional[str] = "cus_123",
        plan: PlanType = PlanType.FREE,
        **fields: Any
    ) -> Subscription:
        subscription = Subscription(
            user_id=user_id,
            plan=plans[plan],
            stripe_customer_id=stripe_customer_id,
            status=fields.pop("status", SubscriptionStatus.ACTIVE),
            cancel_at_period_end=fields.pop("cancel_at_period_end", False),
            **fields
        )
        db_session.add(subscription)
        await db_session.commit()
        return subscription

    return _create
