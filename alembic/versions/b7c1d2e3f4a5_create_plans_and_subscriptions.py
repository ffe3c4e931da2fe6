"""Create plans and subscriptions tables

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union
import uuid
from datetime import datetime

from alembic import op
import sqlalchemy as sa

from app.core.config import settings

# revision identifiers, used by Alembic.
revision: str = 'b7c1d2e3f4a5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    plans_table = op.create_table('plans',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.Enum('FREE', 'PLUS', 'MAX', name='plantype'), nullable=False),
        sa.Column('monthly_token_limit', sa.Integer(), nullable=False),
        sa.Column('daily_message_limit', sa.Integer(), nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('stripe_price_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_price_id')
    )
    op.create_index(op.f('ix_plans_id'), 'plans', ['id'], unique=False)
    op.create_index(op.f('ix_plans_name'), 'plans', ['name'], unique=True)

    op.create_table('subscriptions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('plan_id', sa.UUID(), nullable=False),
        sa.Column('stripe_customer_id', sa.String(length=255), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(length=255), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'CANCELED', 'PAST_DUE', 'INCOMPLETE', 'UNPAID', name='subscriptionstatus'), nullable=False),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('stripe_coupon_id', sa.String(length=255), nullable=True),
        sa.Column('discount_type', sa.Enum('PERCENTAGE', 'AMOUNT', name='discounttype'), nullable=True),
        sa.Column('discount_value', sa.Float(), nullable=True),
        sa.Column('discount_end_date', sa.DateTime(), nullable=True),
        sa.Column('last_invoice_amount', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=True)
    op.create_index(op.f('ix_subscriptions_stripe_customer_id'), 'subscriptions', ['stripe_customer_id'], unique=False)

    # Seed the plan catalog; paid plans get their Stripe price ids from the environment
    current_time = datetime.utcnow()
    op.bulk_insert(plans_table, [
        {
            'id': uuid.uuid4(), 'name': 'FREE',
            'monthly_token_limit': 10000, 'daily_message_limit': 10,
            'price_cents': 0, 'currency': 'EUR', 'stripe_price_id': None,
            'created_at': current_time, 'updated_at': current_time, 'is_deleted': False
        },
        {
            'id': uuid.uuid4(), 'name': 'PLUS',
            'monthly_token_limit': 100000, 'daily_message_limit': 50,
            'price_cents': 999, 'currency': 'EUR', 'stripe_price_id': settings.stripe_price_plus or None,
            'created_at': current_time, 'updated_at': current_time, 'is_deleted': False
        },
        {
            'id': uuid.uuid4(), 'name': 'MAX',
            'monthly_token_limit': 500000, 'daily_message_limit': 200,
            'price_cents': 1999, 'currency': 'EUR', 'stripe_price_id': settings.stripe_price_max or None,
            'created_at': current_time, 'updated_at': current_time, 'is_deleted': False
        },
    ])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_subscriptions_stripe_customer_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_user_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_id'), table_name='subscriptions')
    op.drop_table('subscriptions')

    op.drop_index(op.f('ix_plans_name'), table_name='plans')
    op.drop_index(op.f('ix_plans_id'), table_name='plans')
    op.drop_table('plans')

    # Drop enums
    op.execute('DROP TYPE IF EXISTS discounttype')
    op.execute('DROP TYPE IF EXISTS subscriptionstatus')
    op.execute('DROP TYPE IF EXISTS plantype')
