"""Profile of the authenticated user."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, ok
from ouderschaps_api.schemas.user import BillingProfileIn, UserProfileOut
from ouderschaps_api.services.user_service import user_service

router = APIRouter(prefix="/api/user", tags=["User"], responses=ERROR_RESPONSES)


@router.get("/profile", response_model=Envelope[UserProfileOut])
async def get_profile(user: Gebruiker = Depends(current_user)):
    return ok(await user_service.get_profile(user))


@router.put("/profile", response_model=Envelope[UserProfileOut], summary="Store the billing profile")
async def update_profile(
    body: BillingProfileIn,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await user_service.update_profile(db, user, body))
