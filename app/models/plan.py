from sqlalchemy import Column, String, Integer, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
import uuid
import enum
from .base import Base, TimestampMixin


class PlanType(str, enum.Enum):
    """Plan tiers offered in the catalog"""
    FREE = "FREE"
    PLUS = "PLUS"
    MAX = "MAX"


class Plan(Base, TimestampMixin):
    """Reference table for the priced plans and their usage ceilings"""
    __tablename__ = "plans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(SQLEnum(PlanType), nullable=False, unique=True, index=True)
    monthly_token_limit = Column(Integer, nullable=False)  # Tokens allowed per month
    daily_message_limit = Column(Integer, nullable=False)  # Messages allowed per day
    price_cents = Column(Integer, nullable=False)  # Price in minor currency units
    currency = Column(String(3), nullable=False, default="EUR")
    stripe_price_id = Column(String(255), nullable=True, unique=True)  # Only FREE has none

    def __repr__(self) -> str:
        return f"<Plan {self.name.value if self.name else None} price={self.stripe_price_id}>"
