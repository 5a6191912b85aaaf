"""
Ouderschaps API: Omgang Routes
================================

What:  Contact schedule (omgangsregeling) endpoints.
How:   Single slots go through /api/omgang, several new slots at once through
       /api/dossiers/{id}/omgang/batch; the whole week of one week
       regeling is replaced through /api/dossiers/{id}/omgang/week. Both
       paths reject a slot that is already taken for the same dag, dagdeel
       and week regeling.

Endpoints:
    POST   /api/omgang
    PUT    /api/omgang/{omgangId}
    GET    /api/dossiers/{id}/omgang
    POST   /api/dossiers/{id}/omgang/batch
    GET    /api/dossiers/{id}/omgang/schedule
    POST   /api/dossiers/{id}/omgang/week
    PUT    /api/dossiers/{id}/omgang/week
    GET    /api/dossiers/{id}/omgang/week/{weekRegelingId}
    DELETE /api/dossiers/{id}/omgang/{omgangId}
"""

from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.planning import (
    OmgangBatchIn,
    OmgangCreate,
    OmgangOut,
    OmgangScheduleOut,
    OmgangUpdate,
    OmgangWeekIn,
)
from ouderschaps_api.services.omgang_service import omgang_service

router = APIRouter(prefix="/api", tags=["Omgang"], responses=ERROR_RESPONSES)


@router.post("/omgang", status_code=201, response_model=Envelope[OmgangOut], summary="Create one omgang slot")
async def create_omgang(
    body: OmgangCreate,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await omgang_service.create_omgang(db, body, user.id))


@router.put("/omgang/{omgang_id}", response_model=Envelope[OmgangOut], summary="Partially update an omgang slot")
async def update_omgang(
    body: OmgangUpdate,
    omgang_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await omgang_service.update_omgang(db, omgang_id, body, user.id))


@router.get("/dossiers/{dossier_id}/omgang", response_model=Envelope[List[OmgangOut]])
async def list_omgang(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await omgang_service.list_omgang(db, dossier_id, user.id))


@router.post(
    "/dossiers/{dossier_id}/omgang/batch",
    status_code=201,
    response_model=Envelope[List[OmgangOut]],
    summary="Create up to 100 omgang slots at once",
)
async def create_batch(
    body: OmgangBatchIn,
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await omgang_service.create_batch(db, dossier_id, body, user.id))


@router.get(
    "/dossiers/{dossier_id}/omgang/schedule",
    response_model=Envelope[OmgangScheduleOut],
    summary="Slots grouped by dag and dagdeel",
)
async def get_schedule(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await omgang_service.schedule(db, dossier_id, user.id))


@router.get("/dossiers/{dossier_id}/omgang/week/{week_regeling_id}", response_model=Envelope[List[OmgangOut]])
async def get_week(
    dossier_id: int = Path(..., gt=0),
    week_regeling_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await omgang_service.get_week(db, dossier_id, week_regeling_id, user.id))


@router.post("/dossiers/{dossier_id}/omgang/week", response_model=Envelope[List[OmgangOut]])
@router.put("/dossiers/{dossier_id}/omgang/week", response_model=Envelope[List[OmgangOut]])
async def upsert_week(
    body: OmgangWeekIn,
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Replace every slot of the week regeling in one transaction."""
    return ok(await omgang_service.upsert_week(db, dossier_id, body, user.id))


@router.delete("/dossiers/{dossier_id}/omgang/{omgang_id}", response_model=Envelope[MessageOut])
async def delete_omgang(
    dossier_id: int = Path(..., gt=0),
    omgang_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await omgang_service.delete_omgang(db, dossier_id, omgang_id, user.id)
    return ok(MessageOut(message="Omgang successfully deleted"))
