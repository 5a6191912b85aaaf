"""
Ouderschaps API — Cascade Delete Tests
========================================

What:  Tests for planning and executing the delete of a dossier and every
       row that hangs off it.
How:   The planner is tested on plain edge lists; the deleter runs against
       the seeded in-memory database with one dossier of every kind of
       dependent row, next to a second dossier that must survive.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select, update

from ouderschaps_api.exceptions import DatabaseError
from ouderschaps_api.models import (
    Alimentatie,
    BijdrageKostenKinderen,
    CommunicatieAfspraken,
    Dossier,
    DossierKind,
    DossierPartij,
    FinancieleAfsprakenKinderen,
    Omgang,
    OuderschapsplanInfo,
    Persoon,
    Zorg,
)
from ouderschaps_api.services.cascade import (
    DOSSIER_EDGES,
    CascadeCycleError,
    CascadeDeleter,
    Edge,
    plan_delete_order,
)

from conftest import OWNER_ID


async def seed_full_dossier(db, nummer: str) -> int:
    """A dossier with partijen, a kind, omgang, zorg, plan info, communicatie afspraken and alimentatie."""
    dossier = Dossier(dossier_nummer=nummer, gebruiker_id=OWNER_ID, status=False)
    vader = Persoon(achternaam="Jansen", voornamen="Piet", gebruiker_id=OWNER_ID)
    moeder = Persoon(achternaam="de Vries", voornamen="Anna", gebruiker_id=OWNER_ID)
    kind = Persoon(achternaam="Jansen", voornamen="Sam", gebruiker_id=OWNER_ID)
    db.add_all([dossier, vader, moeder, kind])
    await db.flush()

    db.add_all(
        [
            DossierPartij(dossier_id=dossier.id, persoon_id=vader.id, rol_id=1),
            DossierPartij(dossier_id=dossier.id, persoon_id=moeder.id, rol_id=2),
            DossierKind(dossier_id=dossier.id, kind_id=kind.id),
            Omgang(dossier_id=dossier.id, dag_id=1, dagdeel_id=1, verzorger_id=vader.id, week_regeling_id=1),
            Omgang(dossier_id=dossier.id, dag_id=2, dagdeel_id=1, verzorger_id=moeder.id, week_regeling_id=1),
            Zorg(
                dossier_id=dossier.id,
                zorg_categorie_id=1,
                zorg_situatie_id=1,
                overeenkomst="Beide ouders gaan mee naar de huisarts",
                aangemaakt_door=OWNER_ID,
            ),
            OuderschapsplanInfo(
                dossier_id=dossier.id, partij_1_persoon_id=vader.id, partij_2_persoon_id=moeder.id
            ),
            CommunicatieAfspraken(dossier_id=dossier.id, villa_pinedo=True, kies_methode="In overleg"),
        ]
    )
    alimentatie = Alimentatie(dossier_id=dossier.id, kosten_kinderen=Decimal("450.00"))
    db.add(alimentatie)
    await db.flush()

    bijdrage = BijdrageKostenKinderen(
        alimentatie_id=alimentatie.id, personen_id=vader.id, eigen_aandeel=Decimal("200.00")
    )
    db.add_all(
        [
            bijdrage,
            BijdrageKostenKinderen(alimentatie_id=alimentatie.id, personen_id=moeder.id),
            FinancieleAfsprakenKinderen(alimentatie_id=alimentatie.id, kind_id=kind.id, hoofdverblijf="Moeder"),
        ]
    )
    await db.flush()
    # The parent points back at one of its children
    await db.execute(
        update(Alimentatie).where(Alimentatie.id == alimentatie.id).values(bijdrage_kosten_kinderen=bijdrage.id)
    )
    dossier_id = dossier.id
    await db.commit()
    return dossier_id


EXPECTED_ROWS = {
    "bijdragen_kosten_kinderen": 2,
    "financiele_afspraken_kinderen": 1,
    "alimentaties": 1,
    "ouderschapsplan_info": 1,
    "communicatie_afspraken": 1,
    "omgang": 2,
    "zorg": 1,
    "dossiers_kinderen": 1,
    "dossiers_partijen": 2,
    "dossiers": 1,
}


# ══════════════════════════════════════════════════════════════════════════
# Delete order planning
# ══════════════════════════════════════════════════════════════════════════

class TestPlanDeleteOrder:

    def test_dossier_graph_order(self):
        assert plan_delete_order(DOSSIER_EDGES) == [
            "bijdragen_kosten_kinderen",
            "financiele_afspraken_kinderen",
            "alimentaties",
            "ouderschapsplan_info",
            "communicatie_afspraken",
            "omgang",
            "zorg",
            "dossiers_kinderen",
            "dossiers_partijen",
            "dossiers",
        ]

    def test_every_child_precedes_its_parent(self):
        order = plan_delete_order(DOSSIER_EDGES)
        for edge in DOSSIER_EDGES:
            assert order.index(edge.child) < order.index(edge.parent)

    def test_root_without_edges(self):
        assert plan_delete_order([], root="dossiers") == ["dossiers"]

    def test_cycle_is_rejected(self):
        edges = [Edge("a", "b_id", "b"), Edge("b", "a_id", "a"), Edge("a", "root_id", "root")]

        with pytest.raises(CascadeCycleError, match="a, b"):
            plan_delete_order(edges, root="root")


# ══════════════════════════════════════════════════════════════════════════
# Executing the delete
# ══════════════════════════════════════════════════════════════════════════

class FailingOnZorg(CascadeDeleter):
    """Raises when the zorg step is reached, after earlier tables were hit."""

    def _table(self, name):
        if name == "zorg":
            raise RuntimeError("simulated failure on zorg")
        return super()._table(name)


class TestCascadeDeleter:

    @pytest.mark.asyncio
    async def test_count_related(self, db_session):
        dossier_id = await seed_full_dossier(db_session, "1000")

        counts = await CascadeDeleter().count_related(db_session, dossier_id)

        assert counts == EXPECTED_ROWS

    @pytest.mark.asyncio
    async def test_delete_removes_everything(self, db_session):
        dossier_id = await seed_full_dossier(db_session, "1000")
        other_id = await seed_full_dossier(db_session, "1001")
        deleter = CascadeDeleter()

        report = await deleter.delete(db_session, dossier_id)
        await db_session.commit()

        assert report.dossier_deleted is True
        assert report.deleted == EXPECTED_ROWS
        assert report.total == sum(EXPECTED_ROWS.values())
        assert all(n == 0 for n in (await deleter.count_related(db_session, dossier_id)).values())
        assert await deleter.count_related(db_session, other_id) == EXPECTED_ROWS

    @pytest.mark.asyncio
    async def test_people_are_kept(self, db_session):
        dossier_id = await seed_full_dossier(db_session, "1000")

        await CascadeDeleter().delete(db_session, dossier_id)
        await db_session.commit()

        personen = (await db_session.execute(select(func.count()).select_from(Persoon))).scalar_one()
        assert personen == 3

    @pytest.mark.asyncio
    async def test_missing_dossier_reports_nothing_deleted(self, db_session):
        report = await CascadeDeleter().delete(db_session, 4040)

        assert report.dossier_deleted is False
        assert report.total == 0

    @pytest.mark.asyncio
    async def test_failure_rolls_back_every_step(self, db_session):
        dossier_id = await seed_full_dossier(db_session, "1000")

        with pytest.raises(DatabaseError) as exc_info:
            await FailingOnZorg().delete(db_session, dossier_id)

        assert exc_info.value.message.startswith(f"Failed to delete dossier {dossier_id}: ")
        assert exc_info.value.status_code == 500
        assert exc_info.value.context["step"] == "zorg"
        # Rows deleted before the failing step are back
        assert await CascadeDeleter().count_related(db_session, dossier_id) == EXPECTED_ROWS
        back_ref = (
            await db_session.execute(select(Alimentatie.bijdrage_kosten_kinderen))
        ).scalar_one()
        assert back_ref is not None
