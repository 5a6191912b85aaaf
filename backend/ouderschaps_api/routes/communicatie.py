"""Communicatie afspraken of a dossier: /api/communicatie-afspraken."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.planning import (
    CommunicatieAfsprakenCreate,
    CommunicatieAfsprakenOut,
    CommunicatieAfsprakenUpdate,
)
from ouderschaps_api.services.communicatie_service import communicatie_service

router = APIRouter(prefix="/api/communicatie-afspraken", tags=["Communicatie"], responses=ERROR_RESPONSES)


@router.get("/dossier/{dossier_id}", response_model=Envelope[CommunicatieAfsprakenOut])
async def get_for_dossier(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await communicatie_service.get_for_dossier(db, dossier_id, user.id))


@router.post("", status_code=201, response_model=Envelope[CommunicatieAfsprakenOut])
async def create_afspraken(
    body: CommunicatieAfsprakenCreate,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """409 when the dossier already has a row."""
    return ok(await communicatie_service.create(db, body, user.id))


@router.put("/{afspraken_id}", response_model=Envelope[CommunicatieAfsprakenOut])
async def update_afspraken(
    body: CommunicatieAfsprakenUpdate,
    afspraken_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await communicatie_service.update(db, afspraken_id, body, user.id))


@router.delete("/{afspraken_id}", response_model=Envelope[MessageOut])
async def delete_afspraken(
    afspraken_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await communicatie_service.delete(db, afspraken_id, user.id)
    return ok(MessageOut(message="Communicatie afspraken deleted successfully"))
