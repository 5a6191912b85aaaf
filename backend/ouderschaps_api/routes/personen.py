"""Personen owned by the authenticated user: /api/personen."""

from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.persoon import (
    PersoonCreate,
    PersoonDependenciesOut,
    PersoonDetailOut,
    PersoonUpdate,
)
from ouderschaps_api.services.persoon_service import persoon_service

router = APIRouter(prefix="/api/personen", tags=["Personen"], responses=ERROR_RESPONSES)


@router.get("", response_model=Envelope[List[PersoonDetailOut]])
async def list_personen(
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await persoon_service.list_personen(db, user.id))


@router.post("", status_code=201, response_model=Envelope[PersoonDetailOut])
async def create_persoon(
    body: PersoonCreate,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await persoon_service.create_persoon(db, body, user.id))


@router.get("/{persoon_id}", response_model=Envelope[PersoonDetailOut])
async def get_persoon(
    persoon_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await persoon_service.get_persoon(db, persoon_id, user.id))


@router.get("/{persoon_id}/dependencies", response_model=Envelope[PersoonDependenciesOut])
async def persoon_dependencies(
    persoon_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await persoon_service.dependencies(db, persoon_id, user.id))


@router.put("/{persoon_id}", response_model=Envelope[PersoonDetailOut])
async def update_persoon(
    body: PersoonUpdate,
    persoon_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await persoon_service.update_persoon(db, persoon_id, body, user.id))


@router.delete("/{persoon_id}", response_model=Envelope[MessageOut])
async def delete_persoon(
    persoon_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Refused with 409 while anything still references the persoon; see /dependencies."""
    await persoon_service.delete_persoon(db, persoon_id, user.id)
    return ok(MessageOut(message="Persoon deleted successfully"))
