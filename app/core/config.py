from pydantic_settings import BaseSettings
from typing import Optional
import os


class Settings(BaseSettings):
    # Environment configuration
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database configuration (async SQLAlchemy URL, e.g. postgresql+asyncpg://...)
    database_url: Optional[str] = os.getenv("DATABASE_URL", "")
    database_echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    # Frontend URL (for CORS)
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:4200")

    # Stripe configuration
    stripe_secret_key: str = os.getenv("STRIPE_SECRET_KEY", "")
    stripe_webhook_secret: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    stripe_webhook_tolerance: int = int(os.getenv("STRIPE_WEBHOOK_TOLERANCE", "300"))  # seconds

    # Stripe price IDs of the paid plans (FREE has none)
    stripe_price_plus: Optional[str] = os.getenv("STRIPE_PRICE_PLUS")
    stripe_price_max: Optional[str] = os.getenv("STRIPE_PRICE_MAX")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
