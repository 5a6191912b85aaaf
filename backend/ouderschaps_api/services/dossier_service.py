"""
Ouderschaps API: Dossier Service
==================================

What:  Listing, creating, reading, updating and deleting dossiers.
How:   Reads and writes go through the dossier store on the request session.
       Reads require access to the dossier; status changes and deletion
       require ownership. Deletion runs the cascade deleter so that every
       dependent row disappears in the same transaction.
Who:   routes/dossiers.py.

Numbering:
    New dossiers get the highest numeric dossier number plus one, starting
    at 1000, and start with status false (active).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import NotFoundError
from ouderschaps_api.schemas.common import Pagination
from ouderschaps_api.schemas.dossier import (
    DossierDetailOut,
    DossierListOut,
    DossierOut,
    DossierWithOwnerOut,
)
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.services.cascade import CascadeDeleter, dossier_cascade
from ouderschaps_api.services.kind_service import KindService, kind_service
from ouderschaps_api.services.partij_service import PartijService, partij_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)


class DossierService:
    def __init__(
        self,
        registry: StoreRegistry = stores,
        access: AccessService = access_service,
        cascade: CascadeDeleter = dossier_cascade,
        partijen: PartijService = partij_service,
        kinderen: KindService = kind_service,
    ):
        self.dossiers = registry.dossiers
        self.access = access
        self.cascade = cascade
        self.partijen = partijen
        self.kinderen = kinderen

    async def list_dossiers(
        self,
        db: AsyncSession,
        user_id: int,
        include_inactive: bool = False,
        only_inactive: bool = False,
        limit: int = 10,
        offset: int = 0,
    ) -> DossierListOut:
        dossiers, total = await self.dossiers.list_for_user(
            db, user_id, include_inactive, only_inactive, limit, offset
        )
        return DossierListOut(
            data=[DossierOut.model_validate(d) for d in dossiers],
            pagination=Pagination(total=total, limit=limit, offset=offset, has_more=offset + limit < total),
        )

    async def create_dossier(self, db: AsyncSession, user_id: int) -> DossierOut:
        dossier = await self.dossiers.create(db, user_id)
        logger.info("Dossier %s (%d) created for user %d", dossier.dossier_nummer, dossier.id, user_id)
        return DossierOut.model_validate(dossier)

    async def get_dossier(self, db: AsyncSession, dossier_id: int, user_id: int) -> DossierDetailOut:
        """Dossier with its partijen and kinderen. Both are read one after the other on the same session."""
        dossier = await self.access.authorize_dossier(db, dossier_id, user_id)
        is_owner = await self.access.is_owner(db, dossier_id, user_id)
        partijen = await self.partijen.rows_for_dossier(db, dossier_id)
        kinderen = await self.kinderen.rows_for_dossier(db, dossier_id)
        return DossierDetailOut(
            dossier=DossierWithOwnerOut(**DossierOut.model_validate(dossier).model_dump(), is_owner=is_owner),
            partijen=partijen,
            kinderen=kinderen,
        )

    async def update_status(self, db: AsyncSession, dossier_id: int, status, user_id: int) -> DossierOut:
        """Without a status the current dossier is returned unchanged."""
        dossier = await self.access.authorize_dossier(db, dossier_id, user_id)
        if status is None:
            return DossierOut.model_validate(dossier)
        dossier = await self.access.authorize_dossier(
            db, dossier_id, user_id, require_owner=True, denied_message="Alleen de eigenaar kan de status wijzigen"
        )
        dossier = await self.dossiers.update(db, dossier, {"status": status})
        logger.info("Dossier %d status set to %s by user %d", dossier_id, status, user_id)
        return DossierOut.model_validate(dossier)

    async def update_anonymity(self, db: AsyncSession, dossier_id: int, is_anoniem: bool, user_id: int) -> DossierOut:
        dossier = await self.access.authorize_dossier(db, dossier_id, user_id)
        dossier = await self.dossiers.update(db, dossier, {"is_anoniem": is_anoniem})
        return DossierOut.model_validate(dossier)

    async def update_template_type(
        self, db: AsyncSession, dossier_id: int, template_type: str, user_id: int
    ) -> DossierOut:
        dossier = await self.access.authorize_dossier(db, dossier_id, user_id)
        dossier = await self.dossiers.update(db, dossier, {"template_type": template_type})
        return DossierOut.model_validate(dossier)

    async def delete_dossier(self, db: AsyncSession, dossier_id: int, user_id: int) -> None:
        """
        Raises:
            NotFoundError: the dossier does not exist, or the final delete removed nothing
            AccessDeniedError: the user does not own the dossier
            DatabaseError: a cascade step failed and everything was rolled back
        """
        await self.access.authorize_dossier(db, dossier_id, user_id, require_owner=True)
        report = await self.cascade.delete(db, dossier_id)
        if not report.dossier_deleted:
            raise NotFoundError("Dossier", dossier_id)
        logger.info("Dossier %d deleted by user %d (%d rows)", dossier_id, user_id, report.total)


# Module-level singleton
dossier_service = DossierService()
