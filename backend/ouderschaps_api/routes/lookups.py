"""
Ouderschaps API: Lookup Routes
================================

What:  Read-only reference data used by the plan editor.
How:   Served through the injected LookupCache; no authentication. Rollen are
       cached for 30 minutes, everything else for 5 minutes, keyed by the
       query filters.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.database import get_db_session
from ouderschaps_api.dependencies import get_lookup_cache
from ouderschaps_api.schemas.common import Envelope, ok
from ouderschaps_api.schemas.lookup import NamedOut, RegelingTemplateOut, WeekRegelingOut, ZorgSituatieOut
from ouderschaps_api.services.lookup_cache import LookupCache
from ouderschaps_api.services.lookup_service import lookup_service

router = APIRouter(prefix="/api", tags=["Lookups"])


@router.get("/rollen", response_model=Envelope[List[NamedOut]])
async def get_rollen(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.rollen(db, cache))


@router.get("/lookups/dagen", response_model=Envelope[List[NamedOut]])
async def get_dagen(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.dagen(db, cache))


@router.get("/lookups/dagdelen", response_model=Envelope[List[NamedOut]])
async def get_dagdelen(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.dagdelen(db, cache))


@router.get("/lookups/week-regelingen", response_model=Envelope[List[WeekRegelingOut]])
async def get_week_regelingen(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.week_regelingen(db, cache))


@router.get("/lookups/relatie-types", response_model=Envelope[List[NamedOut]])
async def get_relatie_types(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.relatie_types(db, cache))


@router.get("/lookups/zorg-categorieen", response_model=Envelope[List[NamedOut]])
async def get_zorg_categorieen(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.zorg_categorieen(db, cache))


@router.get("/lookups/zorg-situaties", response_model=Envelope[List[ZorgSituatieOut]])
async def get_zorg_situaties(
    categorie_id: Optional[int] = Query(default=None, alias="categorieId", gt=0),
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.zorg_situaties(db, cache, categorie_id))


@router.get("/lookups/schoolvakanties", response_model=Envelope[List[NamedOut]])
async def get_schoolvakanties(
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.schoolvakanties(db, cache))


@router.get("/lookups/regelingen-templates", response_model=Envelope[List[RegelingTemplateOut]])
async def get_regelingen_templates(
    type: Optional[str] = Query(default=None, max_length=50),
    meervoud_kinderen: Optional[bool] = Query(default=None, alias="meervoudKinderen"),
    db: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
):
    return ok(await lookup_service.regelingen_templates(db, cache, type, meervoud_kinderen))
