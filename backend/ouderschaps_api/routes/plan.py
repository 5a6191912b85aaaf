"""The whole ouderschapsplan of a dossier in one read: /api/ouderschapsplan."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, ok
from ouderschaps_api.schemas.plan import CompletePlanOut, PlanVolledigheidOut
from ouderschaps_api.services.plan_service import plan_service

router = APIRouter(prefix="/api/ouderschapsplan", tags=["Ouderschapsplan"], responses=ERROR_RESPONSES)


@router.get("/{dossier_id}", response_model=Envelope[CompletePlanOut])
async def get_complete_plan(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await plan_service.complete_plan(db, dossier_id, user.id))


@router.get("/{dossier_id}/validate", response_model=Envelope[PlanVolledigheidOut])
async def validate_plan(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await plan_service.validate_plan(db, dossier_id, user.id))
