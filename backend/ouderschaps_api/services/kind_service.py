"""
Ouderschaps API: Kinderen and Ouders
======================================

What:  Children attached to a dossier and the parent relations of a child.
How:   A child is a persoon linked to the dossier through `dossiers_kinderen`;
       the link id (not the persoon id) identifies the child within the
       dossier. Parents hang off the persoon through `kind_ouder`, independent
       of any dossier.
Who:   routes/kinderen.py, services/dossier_service.py (detail view).

Rules:
    - A person cannot be their own parent, whether the parent is given by id
      or as inline data naming the child's id.
    - A kind is reachable when it belongs to a dossier of the user or is a
      persoon owned by the user.
    - When adding a kind with `ouderRelaties`, unknown ouders are skipped with
      a warning and existing relations are left alone.
"""

import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from ouderschaps_api.exceptions import AccessDeniedError, DatabaseError, NotFoundError
from ouderschaps_api.exceptions import ValidationError
from ouderschaps_api.schemas.dossier import AddKindIn, AddOuderIn, KindOuderOut, KindOut, OuderOut
from ouderschaps_api.schemas.lookup import NamedOut
from ouderschaps_api.schemas.persoon import PersoonOut
from ouderschaps_api.services.access import AccessService, access_service
from ouderschaps_api.services.persoon_service import PersoonService, persoon_service
from ouderschaps_api.stores import StoreRegistry, stores

logger = logging.getLogger(__name__)

SELF_PARENT_MESSAGE = "A person cannot be their own parent"


def kind_ouder_out(row) -> KindOuderOut:
    relation, ouder, relatie_type = row
    return KindOuderOut(
        id=relation.id,
        kind_id=relation.kind_id,
        ouder=PersoonOut.model_validate(ouder),
        relatie_type=NamedOut.model_validate(relatie_type),
    )


class KindService:
    def __init__(
        self,
        registry: StoreRegistry = stores,
        access: AccessService = access_service,
        personen: PersoonService = persoon_service,
    ):
        self.kinderen = registry.kinderen
        self.persoon_store = registry.personen
        self.access = access
        self.personen = personen

    # ── Dossier kinderen ──────────────────────────────────────────────────

    async def rows_for_dossier(self, db: AsyncSession, dossier_id: int) -> List[KindOut]:
        links = await self.kinderen.list_for_dossier(db, dossier_id)
        ouders_by_kind: Dict[int, List[OuderOut]] = defaultdict(list)
        for relation, ouder, relatie_type in await self.kinderen.ouders_of(db, [k.id for _, k in links]):
            ouders_by_kind[relation.kind_id].append(
                OuderOut(ouder=PersoonOut.model_validate(ouder), relatie_type=NamedOut.model_validate(relatie_type))
            )
        return [
            KindOut(id=link.id, kind=PersoonOut.model_validate(kind), ouders=ouders_by_kind.get(kind.id, []))
            for link, kind in links
        ]

    async def list_kinderen(self, db: AsyncSession, dossier_id: int, user_id: int) -> List[KindOut]:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        return await self.rows_for_dossier(db, dossier_id)

    async def add_kind(self, db: AsyncSession, dossier_id: int, body: AddKindIn, user_id: int) -> KindOut:
        await self.access.authorize_dossier(db, dossier_id, user_id)

        if body.kind_id is not None:
            kind = await self.persoon_store.get(db, body.kind_id)
            if kind is None:
                raise NotFoundError("Kind", body.kind_id)
            if await self.kinderen.is_linked(db, dossier_id, kind.id):
                raise ValidationError("Kind is already in this dossier", field="kindId")
        else:
            kind = await self.personen.save_inline(db, body.kind_data, user_id)
            if await self.kinderen.is_linked(db, dossier_id, kind.id):
                raise ValidationError("Kind is already in this dossier", field="kindData")

        for relatie in body.ouder_relaties:
            if relatie.ouder_id == kind.id:
                raise ValidationError(SELF_PARENT_MESSAGE, field="ouderRelaties")

        link = await self.kinderen.add_link(db, dossier_id, kind.id)

        for relatie in body.ouder_relaties:
            if await self.persoon_store.get(db, relatie.ouder_id) is None:
                logger.warning("Ouder %d not found, skipping relatie with kind %d", relatie.ouder_id, kind.id)
                continue
            if await self.kinderen.get_relation(db, kind.id, relatie.ouder_id) is None:
                await self.kinderen.add_relation(db, kind.id, relatie.ouder_id, relatie.relatie_type_id)

        logger.info("Kind %d added to dossier %d (link %d)", kind.id, dossier_id, link.id)
        for item in await self.rows_for_dossier(db, dossier_id):
            if item.id == link.id:
                return item
        raise DatabaseError("Failed to retrieve created kind")

    async def remove_kind(self, db: AsyncSession, dossier_id: int, dossier_kind_id: int, user_id: int) -> None:
        await self.access.authorize_dossier(db, dossier_id, user_id)
        link = await self.kinderen.get_link(db, dossier_id, dossier_kind_id)
        if link is None:
            raise NotFoundError("Kind", dossier_kind_id, message="Kind not found in this dossier")
        await self.kinderen.remove_link(db, link)
        logger.info("Kind link %d removed from dossier %d", dossier_kind_id, dossier_id)

    # ── Ouders of a kind ──────────────────────────────────────────────────

    async def _authorize_kind(self, db: AsyncSession, kind_id: int, user_id: int) -> None:
        if await self.persoon_store.get(db, kind_id) is None:
            raise NotFoundError("Kind", kind_id)
        if not await self.access.can_access_kind(db, kind_id, user_id):
            raise AccessDeniedError()

    async def _relation_row(self, db: AsyncSession, kind_id: int, relation_id: int) -> KindOuderOut:
        for row in await self.kinderen.ouders_of(db, [kind_id]):
            if row[0].id == relation_id:
                return kind_ouder_out(row)
        raise DatabaseError("Failed to retrieve ouder-kind relatie")

    async def list_ouders(self, db: AsyncSession, kind_id: int, user_id: int) -> List[KindOuderOut]:
        await self._authorize_kind(db, kind_id, user_id)
        return [kind_ouder_out(row) for row in await self.kinderen.ouders_of(db, [kind_id])]

    async def add_ouder(self, db: AsyncSession, kind_id: int, body: AddOuderIn, user_id: int) -> KindOuderOut:
        await self._authorize_kind(db, kind_id, user_id)

        if body.ouder_id is not None:
            if await self.persoon_store.get(db, body.ouder_id) is None:
                raise NotFoundError("Ouder", body.ouder_id)
            if body.ouder_id == kind_id:
                raise ValidationError(SELF_PARENT_MESSAGE, field="ouderId")
            ouder_id = body.ouder_id
        else:
            if body.ouder_data.id == kind_id:
                raise ValidationError(SELF_PARENT_MESSAGE, field="ouderData")
            ouder = await self.personen.save_inline(db, body.ouder_data, user_id)
            if ouder.id == kind_id:
                raise ValidationError(SELF_PARENT_MESSAGE, field="ouderData")
            ouder_id = ouder.id

        if await self.kinderen.get_relation(db, kind_id, ouder_id) is not None:
            raise ValidationError("Ouder-kind relatie already exists")

        relation = await self.kinderen.add_relation(db, kind_id, ouder_id, body.relatie_type_id)
        logger.info("Ouder %d added to kind %d with relatie type %d", ouder_id, kind_id, body.relatie_type_id)
        return await self._relation_row(db, kind_id, relation.id)

    async def _existing_relation(self, db: AsyncSession, kind_id: int, ouder_id: int, user_id: int):
        await self._authorize_kind(db, kind_id, user_id)
        if await self.persoon_store.get(db, ouder_id) is None:
            raise NotFoundError("Ouder", ouder_id)
        relation = await self.kinderen.get_relation(db, kind_id, ouder_id)
        if relation is None:
            raise NotFoundError("Ouder-kind relatie")
        return relation

    async def update_ouder(
        self, db: AsyncSession, kind_id: int, ouder_id: int, relatie_type_id: int, user_id: int
    ) -> KindOuderOut:
        relation = await self._existing_relation(db, kind_id, ouder_id, user_id)
        await self.kinderen.update_relation(db, relation, relatie_type_id)
        return await self._relation_row(db, kind_id, relation.id)

    async def remove_ouder(self, db: AsyncSession, kind_id: int, ouder_id: int, user_id: int) -> None:
        relation = await self._existing_relation(db, kind_id, ouder_id, user_id)
        await self.kinderen.remove_relation(db, relation)
        logger.info("Ouder %d removed from kind %d", ouder_id, kind_id)


# Module-level singleton
kind_service = KindService()
