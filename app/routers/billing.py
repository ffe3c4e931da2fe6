from fastapi import APIRouter, HTTPException, Depends, status, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from app.core.database import get_db
from app.core.exceptions import CatalogIntegrityError, WebhookProcessingError
from app.crud import plan_crud
from app.schemas.billing import PlanListResponse, PlanResponse, SubscriptionStatusResponse, WebhookAckResponse
from app.services.stripe_service import stripe_service, StripeWebhookVerificationError
from app.services.subscription_service import subscription_service
from app.services.webhook import stripe_webhook_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/plans", response_model=PlanListResponse)
async def get_plans(
    db: AsyncSession = Depends(get_db)
):
    """
    Get all plans of the catalog.
    Public endpoint - no authentication required.
    """
    try:
        plans, _ = await plan_crud.get_multi(db, skip=0, limit=100, order_by="price_cents", order_desc=False)
        return PlanListResponse(
            success=True,
            plans=[PlanResponse.model_validate(plan) for plan in plans]
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get plans: {str(e)}"
        )


@router.get("/subscription/{user_id}", response_model=SubscriptionStatusResponse)
async def get_user_subscription(
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Get a user's subscription details including plan limits.
    Answers 404 when the user has no subscription yet.
    """
    return await subscription_service.get_status(db, user_id)


@router.post("/subscription/{user_id}", response_model=SubscriptionStatusResponse, status_code=status.HTTP_201_CREATED)
async def create_user_subscription(
    user_id: str,
    stripe_customer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """
    Create the FREE subscription of a newly registered user.
    Calling it again for the same user returns the existing subscription.
    """
    try:
        await subscription_service.create_default_subscription(db, user_id, stripe_customer_id)
    except CatalogIntegrityError as e:
        logger.error(f"Cannot create subscription for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    return await subscription_service.get_status(db, user_id)


@router.post("/webhook/stripe", response_model=WebhookAckResponse)
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Receive Stripe webhook events.

    Business errors (unknown customer, unexpected payload) are acknowledged
    with 200 so Stripe stops retrying; any other failure answers 500 so
    Stripe delivers the event again.
    """
    if not stripe_service.webhook_configured:
        logger.error("Webhook secret not configured - rejecting request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook secret not configured"
        )

    payload = await request.body()
    signature = request.headers.get('stripe-signature')
    if not signature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Stripe signature"
        )

    try:
        event = stripe_service.construct_event(payload, signature)
    except StripeWebhookVerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"Processing Stripe event: {event.get('type')} (id: {event.get('id')})")

    try:
        await stripe_webhook_dispatcher.handle_event(db, event)
    except WebhookProcessingError as e:
        logger.warning(f"Business error processing webhook event {event.get('type')}: {e}")
        return WebhookAckResponse(received=True, skipped=str(e))
    except Exception as e:
        logger.error(f"Unexpected error processing webhook event {event.get('type')}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)}
        )

    return WebhookAckResponse(received=True)
