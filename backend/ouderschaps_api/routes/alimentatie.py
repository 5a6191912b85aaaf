"""Alimentatie (child support) of a dossier and its replace-all sub-collections."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.alimentatie import (
    AlimentatieIn,
    BijdrageKostenIn,
    BijdrageKostenOut,
    CompleteAlimentatieOut,
    FinancieleAfspraakIn,
    FinancieleAfspraakOut,
)
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, ok
from ouderschaps_api.services.alimentatie_service import alimentatie_service

router = APIRouter(prefix="/api", tags=["Alimentatie"], responses=ERROR_RESPONSES)


@router.get(
    "/dossiers/{dossier_id}/alimentatie",
    response_model=Envelope[Optional[CompleteAlimentatieOut]],
    summary="Alimentatie with bijdragen and afspraken; data is null when none exists",
)
async def get_alimentatie(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await alimentatie_service.get_for_dossier(db, dossier_id, user.id))


@router.put("/dossiers/{dossier_id}/alimentatie", response_model=Envelope[CompleteAlimentatieOut])
async def upsert_alimentatie(
    body: AlimentatieIn,
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await alimentatie_service.upsert(db, dossier_id, body, user.id))


@router.put("/alimentatie/{alimentatie_id}/bijdragen-kosten", response_model=Envelope[List[BijdrageKostenOut]])
async def replace_bijdragen(
    body: List[BijdrageKostenIn],
    alimentatie_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await alimentatie_service.replace_bijdragen(db, alimentatie_id, body, user.id))


@router.put(
    "/alimentatie/{alimentatie_id}/financiele-afspraken", response_model=Envelope[List[FinancieleAfspraakOut]]
)
async def replace_afspraken(
    body: List[FinancieleAfspraakIn],
    alimentatie_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await alimentatie_service.replace_afspraken(db, alimentatie_id, body, user.id))
