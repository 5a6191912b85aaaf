"""
Ouderschaps API: Dossier Routes
=================================

What:  /api/dossiers and the partijen and kinderen attached to a dossier.
How:   Each handler resolves the user, delegates to a service and wraps the
       result in the success envelope. Errors are raised by the services and
       turned into the error envelope by the global handlers in main.py.

Endpoints:
    GET    /api/dossiers                              list (paginated)
    POST   /api/dossiers                              create
    GET    /api/dossiers/{id}                         detail with partijen, kinderen
    PUT    /api/dossiers/{id}                         status (owner only)
    PATCH  /api/dossiers/{id}/anonymity
    PATCH  /api/dossiers/{id}/template-type
    DELETE /api/dossiers/{id}                         cascade delete (owner only)
    GET    /api/dossiers/{id}/partijen
    POST   /api/dossiers/{id}/partijen
    PATCH  /api/dossiers/{id}/partijen/{partijId}
    DELETE /api/dossiers/{id}/partijen/{partijId}
    GET    /api/dossiers/{id}/kinderen
    POST   /api/dossiers/{id}/kinderen
    DELETE /api/dossiers/{id}/kinderen/{dossierKindId}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import current_user
from ouderschaps_api.models import Gebruiker
from ouderschaps_api.schemas.common import ERROR_RESPONSES, Envelope, MessageOut, ok
from ouderschaps_api.schemas.dossier import (
    AddKindIn,
    AddPartijIn,
    DossierAnonymityUpdate,
    DossierDetailOut,
    DossierListOut,
    DossierOut,
    DossierStatusUpdate,
    DossierTemplateTypeUpdate,
    KindOut,
    PartijOut,
    UpdatePartijRolIn,
)
from ouderschaps_api.services.dossier_service import dossier_service
from ouderschaps_api.services.kind_service import kind_service
from ouderschaps_api.services.partij_service import partij_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dossiers", tags=["Dossiers"], responses=ERROR_RESPONSES)

DossierId = Path(..., gt=0, description="Dossier id")


# ── Dossiers ──────────────────────────────────────────────────────────────


@router.get("", response_model=Envelope[DossierListOut], summary="List the user's dossiers")
async def list_dossiers(
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    only_inactive: bool = Query(default=False, alias="onlyInactive"),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Active dossiers (status false) by default, most recently changed first."""
    result = await dossier_service.list_dossiers(db, user.id, include_inactive, only_inactive, limit, offset)
    return ok(result)


@router.post("", status_code=201, response_model=Envelope[DossierOut], summary="Create a dossier")
async def create_dossier(
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await dossier_service.create_dossier(db, user.id))


@router.get("/{dossier_id}", response_model=Envelope[DossierDetailOut], summary="Dossier with partijen and kinderen")
async def get_dossier(
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await dossier_service.get_dossier(db, dossier_id, user.id))


@router.put("/{dossier_id}", response_model=Envelope[DossierOut], summary="Change the dossier status")
async def update_dossier(
    body: DossierStatusUpdate,
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await dossier_service.update_status(db, dossier_id, body.status, user.id))


@router.patch("/{dossier_id}/anonymity", response_model=Envelope[DossierOut])
async def update_anonymity(
    body: DossierAnonymityUpdate,
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await dossier_service.update_anonymity(db, dossier_id, body.is_anoniem, user.id))


@router.patch("/{dossier_id}/template-type", response_model=Envelope[DossierOut])
async def update_template_type(
    body: DossierTemplateTypeUpdate,
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await dossier_service.update_template_type(db, dossier_id, body.template_type, user.id))


@router.delete("/{dossier_id}", response_model=Envelope[MessageOut], summary="Delete a dossier and everything in it")
async def delete_dossier(
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await dossier_service.delete_dossier(db, dossier_id, user.id)
    return ok(MessageOut(message="Dossier deleted successfully"))


# ── Partijen ──────────────────────────────────────────────────────────────


@router.get("/{dossier_id}/partijen", response_model=Envelope[List[PartijOut]], tags=["Partijen"])
async def list_partijen(
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await partij_service.list_partijen(db, dossier_id, user.id))


@router.post(
    "/{dossier_id}/partijen", status_code=201, response_model=Envelope[PartijOut], tags=["Partijen"]
)
async def add_partij(
    body: AddPartijIn,
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await partij_service.add_partij(db, dossier_id, body, user.id))


@router.patch("/{dossier_id}/partijen/{partij_id}", response_model=Envelope[PartijOut], tags=["Partijen"])
async def update_partij_rol(
    body: UpdatePartijRolIn,
    dossier_id: int = DossierId,
    partij_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await partij_service.update_rol(db, dossier_id, partij_id, body.rol_id, user.id))


@router.delete("/{dossier_id}/partijen/{partij_id}", response_model=Envelope[MessageOut], tags=["Partijen"])
async def remove_partij(
    dossier_id: int = DossierId,
    partij_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await partij_service.remove_partij(db, dossier_id, partij_id, user.id)
    return ok(MessageOut(message="Partij removed from dossier"))


# ── Kinderen ──────────────────────────────────────────────────────────────


@router.get("/{dossier_id}/kinderen", response_model=Envelope[List[KindOut]], tags=["Kinderen"])
async def list_kinderen(
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await kind_service.list_kinderen(db, dossier_id, user.id))


@router.post("/{dossier_id}/kinderen", status_code=201, response_model=Envelope[KindOut], tags=["Kinderen"])
async def add_kind(
    body: AddKindIn,
    dossier_id: int = DossierId,
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return ok(await kind_service.add_kind(db, dossier_id, body, user.id))


@router.delete("/{dossier_id}/kinderen/{dossier_kind_id}", response_model=Envelope[MessageOut], tags=["Kinderen"])
async def remove_kind(
    dossier_id: int = DossierId,
    dossier_kind_id: int = Path(..., gt=0),
    user: Gebruiker = Depends(current_user),
    db: AsyncSession = Depends(get_db_session),
):
    await kind_service.remove_kind(db, dossier_id, dossier_kind_id, user.id)
    return ok(MessageOut(message="Kind removed from dossier"))
