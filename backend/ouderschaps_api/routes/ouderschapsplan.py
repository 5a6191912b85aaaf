"""Ouderschapsplan info of a dossier: one row per dossier, upserted through PUT."""

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.planning import OuderschapsplanInfoIn, OuderschapsplanInfoOut
from ouderschaps_api.services.plan_info_service import plan_info_service

router = APIRouter(prefix="/api/dossiers", tags=["Ouderschapsplan"], responses=ERROR_RESPONSES)


@router.get("/{dossier_id}/ouderschapsplan-info", response_model=Envelope[OuderschapsplanInfoOut])
async def get_plan_info(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await plan_info_service.get_info(db, dossier_id, user.id))


@router.put(
    "/{dossier_id}/ouderschapsplan-info",
    response_model=Envelope[OuderschapsplanInfoOut],
    responses={201: {"description": "Created"}},
    summary="Create or update the ouderschapsplan info",
)
async def upsert_plan_info(
    body: OuderschapsplanInfoIn,
    response: Response,
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """201 when the row was inserted, 200 when an existing row was updated."""
    info, created = await plan_info_service.upsert_info(db, dossier_id, body, user.id)
    response.status_code = 201 if created else 200
    return ok(info)


@router.delete("/{dossier_id}/ouderschapsplan-info", response_model=Envelope[MessageOut])
async def delete_plan_info(
    dossier_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await plan_info_service.delete_info(db, dossier_id, user.id)
    return ok(MessageOut(message="Ouderschapsplan info deleted successfully"))
