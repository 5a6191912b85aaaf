"""
Ouderschaps API: Subscription Routes
======================================

What:  Sign-up, status and cancellation of the paid subscription, plus the
       Mollie payment webhook.
How:   The webhook is called by Mollie with a form-encoded `id` and carries
       no user credentials. Once the id is present it always answers 200 so
       Mollie stops retrying; the outcome is only logged.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.subscription import CancelOut, CheckoutOut, SubscriptionStatusOut
from ouderschaps_api.services.subscription_service import subscription_service

router = APIRouter(prefix="/api/subscription", tags=["Subscription"], responses=ERROR_RESPONSES)


@router.post(
    "/create",
    response_model=Envelope[CheckoutOut],
    responses={201: {"description": "Subscription created, checkout started"}},
    summary="Start a subscription (201) or retry its first payment (200)",
)
async def create_subscription(
    response: Response,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    result = await subscription_service.create_subscription(db, user)
    response.status_code = 201 if result.created else 200
    return ok(result.checkout)


@router.get("/status", response_model=Envelope[SubscriptionStatusOut])
async def get_status(
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await subscription_service.status(db, user.id))


@router.post("/cancel", response_model=Envelope[CancelOut])
async def cancel_subscription(
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await subscription_service.cancel(db, user.id))


@router.post("/webhook", response_model=Envelope[MessageOut], summary="Mollie payment webhook")
async def mollie_webhook(
    id: Optional[str] = Form(default=None),
    db: AsyncSession = Depends(get_db_session),
):
    message = await subscription_service.handle_webhook(db, id)
    return ok(MessageOut(message=message))
