"""
Zorg (care) agreements of a dossier: /api/dossiers/{id}/zorg.

/zorg/upsert is declared before /zorg/{zorgId} so the literal segment wins.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.planning import (
    ZorgCategoryDeleteOut,
    ZorgCreate,
    ZorgOut,
    ZorgUpdate,
    ZorgUpsertIn,
)
from ouderschaps_api.services.zorg_service import zorg_service

router = APIRouter(prefix="/api/dossiers", tags=["Zorg"], responses=ERROR_RESPONSES)


@router.get("/{dossier_id}/zorg", response_model=Envelope[List[ZorgOut]])
async def list_zorg(
    dossier_id: int = Path(..., gt=0),
    categorie_id: Optional[int] = Query(default=None, alias="categorieId", gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await zorg_service.list_zorg(db, dossier_id, user.id, categorie_id))


@router.post("/{dossier_id}/zorg", status_code=201, response_model=Envelope[ZorgOut])
async def create_zorg(
    body: ZorgCreate,
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await zorg_service.create_zorg(db, dossier_id, body, user.id))


@router.post("/{dossier_id}/zorg/upsert", response_model=Envelope[List[ZorgOut]])
@router.put("/{dossier_id}/zorg/upsert", response_model=Envelope[List[ZorgOut]])
async def upsert_zorg(
    body: ZorgUpsertIn,
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Returns every zorg row of the dossier after the writes."""
    return ok(await zorg_service.upsert_many(db, dossier_id, body, user.id))


@router.delete("/{dossier_id}/zorg/category/{categorie_id}", response_model=Envelope[ZorgCategoryDeleteOut])
async def delete_zorg_category(
    dossier_id: int = Path(..., gt=0),
    categorie_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await zorg_service.delete_by_categorie(db, dossier_id, categorie_id, user.id))


@router.put("/{dossier_id}/zorg/{zorg_id}", response_model=Envelope[ZorgOut])
async def update_zorg(
    body: ZorgUpdate,
    dossier_id: int = Path(..., gt=0),
    zorg_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await zorg_service.update_zorg(db, dossier_id, zorg_id, body, user.id))


@router.delete("/{dossier_id}/zorg/{zorg_id}", response_model=Envelope[MessageOut])
async def delete_zorg(
    dossier_id: int = Path(..., gt=0),
    zorg_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await zorg_service.delete_zorg(db, dossier_id, zorg_id, user.id)
    return ok(MessageOut(message="Zorg successfully deleted"))
