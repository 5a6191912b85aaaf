"""
Ouderschaps API — Omgang Tests
================================

What:  Tests for the contact schedule: single slots, week replacement and
       the schedule view.
How:   Requests go through the app with the legacy x-user-id header; the
       legacy store path is exercised on the service directly.
"""

import pytest

from ouderschaps_api.config import Settings
from ouderschaps_api.exceptions import LegacyPathNotImplementedError
from ouderschaps_api.schemas.planning import OmgangCreate
from ouderschaps_api.services.access import AccessService
from ouderschaps_api.services.omgang_service import OmgangService
from ouderschaps_api.stores import build_store_registry
from ouderschaps_api.stores.legacy import LegacyOmgangStore

from conftest import OWNER_ID, add_partij, create_dossier


async def dossier_with_parents(client, headers):
    dossier = await create_dossier(client, headers)
    vader = await add_partij(client, dossier["id"], headers, "Jansen", rol_id=1)
    moeder = await add_partij(client, dossier["id"], headers, "de Vries", rol_id=2)
    return dossier["id"], vader["persoon"]["id"], moeder["persoon"]["id"]


def slot(dossier_id, verzorger_id, dag_id=2, dagdeel_id=1, week_regeling_id=3, **extra):
    body = {
        "dossierId": dossier_id,
        "dagId": dag_id,
        "dagdeelId": dagdeel_id,
        "verzorgerId": verzorger_id,
        "weekRegelingId": week_regeling_id,
    }
    body.update(extra)
    return body


# ══════════════════════════════════════════════════════════════════════════
# Single slots
# ══════════════════════════════════════════════════════════════════════════

class TestCreateOmgang:

    @pytest.mark.asyncio
    async def test_create_slot(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)

        response = await client.post(
            "/api/omgang", json=slot(dossier_id, vader_id, wisselTijd="18:00"), headers=owner_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["dag"]["naam"] == "Dinsdag"
        assert data["dagdeel"]["naam"] == "Ochtend"
        assert data["weekRegeling"]["omschrijving"] == "Oneven weken"
        assert data["verzorger"]["id"] == vader_id
        assert data["wisselTijd"] == "18:00"

    @pytest.mark.asyncio
    async def test_taken_slot_conflicts(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id), headers=owner_headers)

        response = await client.post("/api/omgang", json=slot(dossier_id, moeder_id), headers=owner_headers)

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "Schedule conflict: This time slot is already assigned",
        }

    @pytest.mark.asyncio
    async def test_same_slot_in_other_week_regeling(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id, week_regeling_id=3), headers=owner_headers)

        response = await client.post(
            "/api/omgang", json=slot(dossier_id, moeder_id, week_regeling_id=2), headers=owner_headers
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_verzorger_must_be_partij(self, client, owner_headers):
        dossier_id, _, _ = await dossier_with_parents(client, owner_headers)
        stranger = await client.post("/api/personen", json={"achternaam": "Vreemd"}, headers=owner_headers)

        response = await client.post(
            "/api/omgang", json=slot(dossier_id, stranger.json()["data"]["id"]), headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Verzorger must be a partij in the dossier"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value",
        [("dagId", 8), ("dagId", 0), ("dagdeelId", 5), ("wisselTijd", "25:00"), ("weekRegelingAnders", "x" * 256)],
    )
    async def test_out_of_range_fields(self, client, owner_headers, field, value):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)

        response = await client.post(
            "/api/omgang", json=slot(dossier_id, vader_id, **{field: value}), headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Validation failed: ")
        assert field in response.json()["error"]

    @pytest.mark.asyncio
    async def test_other_users_dossier(self, client, owner_headers, other_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)

        response = await client.post("/api/omgang", json=slot(dossier_id, vader_id), headers=other_headers)

        assert response.status_code == 403


class TestUpdateOmgang:

    @pytest.mark.asyncio
    async def test_update_own_slot_keeps_it(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        created = await client.post("/api/omgang", json=slot(dossier_id, vader_id), headers=owner_headers)
        omgang_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/omgang/{omgang_id}", json={"wisselTijd": "09:30"}, headers=owner_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["wisselTijd"] == "09:30"

    @pytest.mark.asyncio
    async def test_move_onto_taken_slot(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id, dag_id=1), headers=owner_headers)
        second = await client.post("/api/omgang", json=slot(dossier_id, moeder_id, dag_id=2), headers=owner_headers)

        response = await client.put(
            f"/api/omgang/{second.json()['data']['id']}", json={"dagId": 1}, headers=owner_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_moved_slot_frees_its_old_place(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        first = await client.post("/api/omgang", json=slot(dossier_id, vader_id, dagdeel_id=1), headers=owner_headers)

        moved = await client.put(
            f"/api/omgang/{first.json()['data']['id']}", json={"dagdeelId": 2}, headers=owner_headers
        )
        second = await client.post("/api/omgang", json=slot(dossier_id, moeder_id, dagdeel_id=1), headers=owner_headers)

        assert moved.status_code == 200
        assert second.status_code == 201
        everything = await client.get(f"/api/dossiers/{dossier_id}/omgang", headers=owner_headers)
        slots = {(o["dagdeel"]["id"], o["verzorger"]["id"]) for o in everything.json()["data"]}
        assert slots == {(2, vader_id), (1, moeder_id)}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["dagId", "dagdeelId", "verzorgerId", "weekRegelingId"])
    async def test_explicit_null_on_required_column(self, client, owner_headers, field):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        created = await client.post("/api/omgang", json=slot(dossier_id, vader_id), headers=owner_headers)

        response = await client.put(
            f"/api/omgang/{created.json()['data']['id']}", json={field: None}, headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == f"Validation failed: {field}: may not be null"

    @pytest.mark.asyncio
    async def test_null_optional_field_clears_it(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        created = await client.post(
            "/api/omgang", json=slot(dossier_id, vader_id, wisselTijd="18:00"), headers=owner_headers
        )

        response = await client.put(
            f"/api/omgang/{created.json()['data']['id']}", json={"wisselTijd": None}, headers=owner_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["wisselTijd"] is None

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        created = await client.post("/api/omgang", json=slot(dossier_id, vader_id), headers=owner_headers)

        response = await client.put(f"/api/omgang/{created.json()['data']['id']}", json={}, headers=owner_headers)

        assert response.status_code == 400
        assert "At least one field must be provided for update" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_unknown_omgang(self, client, owner_headers):
        response = await client.put("/api/omgang/999", json={"dagId": 3}, headers=owner_headers)

        assert response.status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Week replacement and schedule
# ══════════════════════════════════════════════════════════════════════════

class TestWeek:

    @pytest.mark.asyncio
    async def test_week_replaces_previous_slots(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id, dag_id=5, week_regeling_id=1), headers=owner_headers)

        week = {
            "weekRegelingId": 1,
            "days": [
                {"dagId": 1, "wisselTijd": "08:00", "dagdelen": [{"dagdeelId": 1, "verzorgerId": vader_id}]},
                {"dagId": 2, "dagdelen": [{"dagdeelId": 1, "verzorgerId": moeder_id}, {"dagdeelId": 2, "verzorgerId": moeder_id}]},
            ],
        }
        response = await client.put(f"/api/dossiers/{dossier_id}/omgang/week", json=week, headers=owner_headers)

        assert response.status_code == 200
        stored = await client.get(f"/api/dossiers/{dossier_id}/omgang/week/1", headers=owner_headers)
        slots = {(o["dag"]["id"], o["dagdeel"]["id"]) for o in stored.json()["data"]}
        assert slots == {(1, 1), (2, 1), (2, 2)}

    @pytest.mark.asyncio
    async def test_week_leaves_other_regelingen_alone(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id, week_regeling_id=2), headers=owner_headers)

        week = {"weekRegelingId": 1, "days": [{"dagId": 3, "dagdelen": [{"dagdeelId": 3, "verzorgerId": vader_id}]}]}
        await client.post(f"/api/dossiers/{dossier_id}/omgang/week", json=week, headers=owner_headers)

        everything = await client.get(f"/api/dossiers/{dossier_id}/omgang", headers=owner_headers)
        assert len(everything.json()["data"]) == 2

    @pytest.mark.asyncio
    async def test_duplicate_slot_in_week(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        week = {
            "weekRegelingId": 1,
            "days": [
                {"dagId": 1, "dagdelen": [{"dagdeelId": 1, "verzorgerId": vader_id}]},
                {"dagId": 1, "dagdelen": [{"dagdeelId": 1, "verzorgerId": moeder_id}]},
            ],
        }

        response = await client.put(f"/api/dossiers/{dossier_id}/omgang/week", json=week, headers=owner_headers)

        assert response.status_code == 400
        assert "Duplicate slot dagId=1 dagdeelId=1" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_schedule_groups_by_dag_and_dagdeel(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id, dag_id=1, dagdeel_id=1), headers=owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, moeder_id, dag_id=1, dagdeel_id=3), headers=owner_headers)

        response = await client.get(f"/api/dossiers/{dossier_id}/omgang/schedule", headers=owner_headers)

        data = response.json()["data"]
        assert data["dossierId"] == dossier_id
        schedule = data["schedule"]
        assert set(schedule) == {"Maandag"}
        assert schedule["Maandag"]["Ochtend"]["verzorger"]["id"] == vader_id
        assert schedule["Maandag"]["Avond"]["verzorger"]["id"] == moeder_id
        assert schedule["Maandag"]["Avond"]["weekRegeling"] == "Oneven weken"

    @pytest.mark.asyncio
    async def test_delete_slot(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        created = await client.post("/api/omgang", json=slot(dossier_id, vader_id), headers=owner_headers)

        response = await client.delete(
            f"/api/dossiers/{dossier_id}/omgang/{created.json()['data']['id']}", headers=owner_headers
        )

        assert response.json() == {"success": True, "data": {"message": "Omgang successfully deleted"}}


# ══════════════════════════════════════════════════════════════════════════
# Batch
# ══════════════════════════════════════════════════════════════════════════

def entry(verzorger_id, dag_id, dagdeel_id=1, week_regeling_id=3, **extra):
    body = {"dagId": dag_id, "dagdeelId": dagdeel_id, "verzorgerId": verzorger_id, "weekRegelingId": week_regeling_id}
    body.update(extra)
    return body


class TestBatch:

    @pytest.mark.asyncio
    async def test_batch_creates_every_entry(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        entries = [entry(vader_id, 1), entry(moeder_id, 2, wisselTijd="17:00"), entry(vader_id, 3, dagdeel_id=4)]

        response = await client.post(
            f"/api/dossiers/{dossier_id}/omgang/batch", json={"entries": entries}, headers=owner_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert [(o["dag"]["id"], o["verzorger"]["id"]) for o in data] == [(1, vader_id), (2, moeder_id), (3, vader_id)]
        assert data[1]["wisselTijd"] == "17:00"
        assert all(o["dossierId"] == dossier_id for o in data)

    @pytest.mark.asyncio
    async def test_taken_slot_rejects_whole_batch(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)
        await client.post("/api/omgang", json=slot(dossier_id, vader_id, dag_id=2), headers=owner_headers)

        response = await client.post(
            f"/api/dossiers/{dossier_id}/omgang/batch",
            json={"entries": [entry(moeder_id, 1), entry(moeder_id, 2)]},
            headers=owner_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Schedule conflict: This time slot is already assigned"
        everything = await client.get(f"/api/dossiers/{dossier_id}/omgang", headers=owner_headers)
        assert len(everything.json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_repeated_slot_within_batch(self, client, owner_headers):
        dossier_id, vader_id, moeder_id = await dossier_with_parents(client, owner_headers)

        response = await client.post(
            f"/api/dossiers/{dossier_id}/omgang/batch",
            json={"entries": [entry(vader_id, 4), entry(moeder_id, 4)]},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert "Duplicate slot dagId=4 dagdeelId=1 weekRegelingId=3" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_verzorger_outside_dossier(self, client, owner_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        stranger = await client.post("/api/personen", json={"achternaam": "Vreemd"}, headers=owner_headers)

        response = await client.post(
            f"/api/dossiers/{dossier_id}/omgang/batch",
            json={"entries": [entry(vader_id, 1), entry(stranger.json()["data"]["id"], 2)]},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Verzorger must be a partij in the dossier"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 101])
    async def test_batch_size_bounds(self, client, owner_headers, count):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)
        entries = [entry(vader_id, 1 + i % 7, dagdeel_id=1 + (i // 7) % 4, week_regeling_id=1 + i // 28) for i in range(count)]

        response = await client.post(
            f"/api/dossiers/{dossier_id}/omgang/batch", json={"entries": entries}, headers=owner_headers
        )

        assert response.status_code == 400
        assert "entries" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_batch_on_other_users_dossier(self, client, owner_headers, other_headers):
        dossier_id, vader_id, _ = await dossier_with_parents(client, owner_headers)

        response = await client.post(
            f"/api/dossiers/{dossier_id}/omgang/batch", json={"entries": [entry(vader_id, 1)]}, headers=other_headers
        )

        assert response.status_code == 403


# ══════════════════════════════════════════════════════════════════════════
# Legacy store
# ══════════════════════════════════════════════════════════════════════════

class TestLegacyStore:

    def test_registry_selects_legacy_store(self):
        registry = build_store_registry(Settings(use_repository_pattern=False))

        assert isinstance(registry.omgang, LegacyOmgangStore)

    @pytest.mark.asyncio
    async def test_legacy_create_is_not_implemented(self, db_session):
        registry = build_store_registry(Settings(use_repository_pattern=False))
        service = OmgangService(registry, AccessService(registry))
        dossier = await registry.dossiers.create(db_session, OWNER_ID)
        vader = await registry.personen.create(db_session, {"achternaam": "Jansen"}, gebruiker_id=OWNER_ID)
        await registry.partijen.add(db_session, dossier.id, vader.id, 1)

        body = OmgangCreate(dossier_id=dossier.id, dag_id=2, dagdeel_id=1, verzorger_id=vader.id, week_regeling_id=3)
        with pytest.raises(LegacyPathNotImplementedError) as exc_info:
            await service.create_omgang(db_session, body, OWNER_ID)

        assert exc_info.value.status_code == 501
        assert exc_info.value.message == "Legacy omgang creation not implemented"
