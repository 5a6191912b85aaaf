"""
Ouderschaps API — Personen Tests
==================================

What:  Tests for persoon CRUD, the reference check that guards deletion and
       inline person data sent with a partij.
How:   Through the app as the owner (user 42) and as another user (user 99).
"""

import pytest

from conftest import add_partij, create_dossier


async def create_persoon(client, headers, **fields):
    fields.setdefault("achternaam", "Jansen")
    response = await client.post("/api/personen", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestPersoonCrud:

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client, owner_headers):
        await create_persoon(client, owner_headers, email="ouder@example.nl")

        response = await client.post(
            "/api/personen", json={"achternaam": "de Vries", "email": "OUDER@example.nl"}, headers=owner_headers
        )

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Email address already exists"}

    @pytest.mark.asyncio
    async def test_update_to_taken_email_conflicts(self, client, owner_headers):
        await create_persoon(client, owner_headers, email="eerste@example.nl")
        tweede = await create_persoon(client, owner_headers, email="tweede@example.nl")

        same = await client.put(
            f"/api/personen/{tweede['id']}", json={"email": "tweede@example.nl"}, headers=owner_headers
        )
        taken = await client.put(
            f"/api/personen/{tweede['id']}", json={"email": "eerste@example.nl"}, headers=owner_headers
        )

        assert same.status_code == 200
        assert taken.status_code == 409

    @pytest.mark.asyncio
    async def test_explicit_null_achternaam(self, client, owner_headers):
        persoon = await create_persoon(client, owner_headers)

        response = await client.put(f"/api/personen/{persoon['id']}", json={"achternaam": None}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed: achternaam: may not be null"
        unchanged = await client.get(f"/api/personen/{persoon['id']}", headers=owner_headers)
        assert unchanged.json()["data"]["achternaam"] == "Jansen"

    @pytest.mark.asyncio
    async def test_personen_are_private(self, client, owner_headers, other_headers):
        persoon = await create_persoon(client, owner_headers)

        response = await client.get(f"/api/personen/{persoon['id']}", headers=other_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unlinked_persoon_can_be_deleted(self, client, owner_headers):
        persoon = await create_persoon(client, owner_headers)

        deleted = await client.delete(f"/api/personen/{persoon['id']}", headers=owner_headers)
        gone = await client.get(f"/api/personen/{persoon['id']}", headers=owner_headers)

        assert deleted.json()["data"]["message"] == "Persoon deleted successfully"
        assert gone.status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Dependencies
# ══════════════════════════════════════════════════════════════════════════

class TestDependencies:

    @pytest.mark.asyncio
    async def test_unlinked_persoon_has_none(self, client, owner_headers):
        persoon = await create_persoon(client, owner_headers)

        response = await client.get(f"/api/personen/{persoon['id']}/dependencies", headers=owner_headers)

        data = response.json()["data"]
        assert data["hasDependencies"] is False
        assert set(data["dependencies"].values()) == {0}

    @pytest.mark.asyncio
    async def test_linked_persoon_reports_each_link(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        vader_id = (await add_partij(client, dossier["id"], owner_headers, "Jansen"))["persoon"]["id"]
        await client.post(
            f"/api/dossiers/{dossier['id']}/kinderen",
            json={"kindData": {"achternaam": "Jansen"}, "ouderRelaties": [{"ouderId": vader_id, "relatieTypeId": 1}]},
            headers=owner_headers,
        )
        await client.post(
            "/api/omgang",
            json={"dossierId": dossier["id"], "dagId": 1, "dagdeelId": 1, "verzorgerId": vader_id, "weekRegelingId": 1},
            headers=owner_headers,
        )

        response = await client.get(f"/api/personen/{vader_id}/dependencies", headers=owner_headers)

        data = response.json()["data"]
        assert data["hasDependencies"] is True
        assert data["dependencies"]["dossiersPartijen"] == 1
        assert data["dependencies"]["kinderenOudersAlsOuder"] == 1
        assert data["dependencies"]["omgang"] == 1
        assert data["dependencies"]["dossiersKinderen"] == 0
        assert data["message"] == (
            "Deze persoon kan niet worden verwijderd omdat deze nog is gekoppeld aan: "
            "1 dossier als partij, 1 kind relatie, 1 omgang regeling. Verwijder eerst deze koppelingen."
        )

    @pytest.mark.asyncio
    async def test_linked_persoon_cannot_be_deleted(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        vader_id = (await add_partij(client, dossier["id"], owner_headers, "Jansen"))["persoon"]["id"]

        response = await client.delete(f"/api/personen/{vader_id}", headers=owner_headers)

        assert response.status_code == 409
        assert "1 dossier als partij" in response.json()["error"]
        still_there = await client.get(f"/api/personen/{vader_id}", headers=owner_headers)
        assert still_there.status_code == 200

    @pytest.mark.asyncio
    async def test_dependencies_of_other_users_persoon(self, client, owner_headers, other_headers):
        persoon = await create_persoon(client, other_headers)

        response = await client.get(f"/api/personen/{persoon['id']}/dependencies", headers=owner_headers)

        assert response.status_code == 403


# ══════════════════════════════════════════════════════════════════════════
# Inline person data
# ══════════════════════════════════════════════════════════════════════════

class TestInlinePersoon:

    @pytest.mark.asyncio
    async def test_inline_id_updates_own_persoon(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        persoon = await create_persoon(client, owner_headers, achternaam="Oud")

        response = await client.post(
            f"/api/dossiers/{dossier['id']}/partijen",
            json={"persoonData": {"id": persoon["id"], "achternaam": "Nieuw"}, "rolId": 1},
            headers=owner_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["persoon"]["id"] == persoon["id"]
        assert response.json()["data"]["persoon"]["achternaam"] == "Nieuw"

    @pytest.mark.asyncio
    async def test_inline_id_of_other_users_persoon_is_refused(self, client, owner_headers, other_headers):
        dossier = await create_dossier(client, owner_headers)
        foreign = await create_persoon(client, other_headers, achternaam="Ander")

        response = await client.post(
            f"/api/dossiers/{dossier['id']}/partijen",
            json={"persoonData": {"id": foreign["id"], "achternaam": "Gekaapt"}, "rolId": 1},
            headers=owner_headers,
        )

        assert response.status_code == 403
        own_view = await client.get(f"/api/personen/{foreign['id']}", headers=other_headers)
        assert own_view.json()["data"]["achternaam"] == "Ander"
        partijen = await client.get(f"/api/dossiers/{dossier['id']}/partijen", headers=owner_headers)
        assert partijen.json()["data"] == []

    @pytest.mark.asyncio
    async def test_inline_id_of_missing_persoon(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)

        response = await client.post(
            f"/api/dossiers/{dossier['id']}/partijen",
            json={"persoonData": {"id": 9999, "achternaam": "Niemand"}, "rolId": 1},
            headers=owner_headers,
        )

        assert response.status_code == 404
