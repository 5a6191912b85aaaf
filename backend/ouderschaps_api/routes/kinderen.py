"""Ouder-kind relations of a single kind: /api/kinderen/{kindId}/ouders."""

from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.dossier import AddOuderIn, KindOuderOut, UpdateRelatieTypeIn
from ouderschaps_api.services.kind_service import kind_service

router = APIRouter(prefix="/api/kinderen", tags=["Kinderen"], responses=ERROR_RESPONSES)


@router.get("/{kind_id}/ouders", response_model=Envelope[List[KindOuderOut]])
async def list_ouders(
    kind_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await kind_service.list_ouders(db, kind_id, user.id))


@router.post("/{kind_id}/ouders", status_code=201, response_model=Envelope[KindOuderOut])
async def add_ouder(
    body: AddOuderIn,
    kind_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await kind_service.add_ouder(db, kind_id, body, user.id))


@router.put("/{kind_id}/ouders/{ouder_id}", response_model=Envelope[KindOuderOut])
async def update_ouder(
    body: UpdateRelatieTypeIn,
    kind_id: int = Path(..., gt=0),
    ouder_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await kind_service.update_ouder(db, kind_id, ouder_id, body.relatie_type_id, user.id))


@router.delete("/{kind_id}/ouders/{ouder_id}", response_model=Envelope[MessageOut])
async def remove_ouder(
    kind_id: int = Path(..., gt=0),
    ouder_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await kind_service.remove_ouder(db, kind_id, ouder_id, user.id)
    return ok(MessageOut(message="Ouder-kind relatie removed"))
