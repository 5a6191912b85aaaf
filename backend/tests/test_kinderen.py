"""
Ouderschaps API — Kinderen Tests
==================================

What:  Tests for children in a dossier and the parent relations of a child.
How:   Through the app, as the owner of the dossier (user 42).
"""

import pytest

from conftest import create_dossier


async def add_kind(client, dossier_id, headers, **body):
    body.setdefault("kindData", {"achternaam": "Jansen", "voornamen": "Sam"})
    return await client.post(f"/api/dossiers/{dossier_id}/kinderen", json=body, headers=headers)


async def create_persoon(client, headers, achternaam):
    response = await client.post("/api/personen", json={"achternaam": achternaam}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


class TestDossierKinderen:

    @pytest.mark.asyncio
    async def test_add_kind_inline_with_ouders(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        vader_id = await create_persoon(client, owner_headers, "Jansen")

        response = await add_kind(
            client, dossier["id"], owner_headers, ouderRelaties=[{"ouderId": vader_id, "relatieTypeId": 1}]
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["kind"]["voornamen"] == "Sam"
        assert [o["ouder"]["id"] for o in data["ouders"]] == [vader_id]
        assert data["ouders"][0]["relatieType"]["naam"] == "Biologisch"

    @pytest.mark.asyncio
    async def test_unknown_ouder_is_skipped(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)

        response = await add_kind(
            client, dossier["id"], owner_headers, ouderRelaties=[{"ouderId": 9999, "relatieTypeId": 1}]
        )

        assert response.status_code == 201
        assert response.json()["data"]["ouders"] == []

    @pytest.mark.asyncio
    async def test_kind_cannot_be_added_twice(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        kind_id = await create_persoon(client, owner_headers, "Jansen")
        await client.post(f"/api/dossiers/{dossier['id']}/kinderen", json={"kindId": kind_id}, headers=owner_headers)

        response = await client.post(
            f"/api/dossiers/{dossier['id']}/kinderen", json={"kindId": kind_id}, headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Kind is already in this dossier"

    @pytest.mark.asyncio
    async def test_remove_uses_link_id(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        link_id = (await add_kind(client, dossier["id"], owner_headers)).json()["data"]["id"]

        response = await client.delete(f"/api/dossiers/{dossier['id']}/kinderen/{link_id}", headers=owner_headers)
        listed = await client.get(f"/api/dossiers/{dossier['id']}/kinderen", headers=owner_headers)

        assert response.json()["data"]["message"] == "Kind removed from dossier"
        assert listed.json()["data"] == []

    @pytest.mark.asyncio
    async def test_remove_unknown_link(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)

        response = await client.delete(f"/api/dossiers/{dossier['id']}/kinderen/777", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Kind not found in this dossier"


class TestOuders:

    @pytest.mark.asyncio
    async def test_add_update_remove_ouder(self, client, owner_headers):
        kind_id = await create_persoon(client, owner_headers, "Jansen")
        moeder_id = await create_persoon(client, owner_headers, "de Vries")
        base = f"/api/kinderen/{kind_id}/ouders"

        added = await client.post(base, json={"ouderId": moeder_id, "relatieTypeId": 1}, headers=owner_headers)
        updated = await client.put(f"{base}/{moeder_id}", json={"relatieTypeId": 2}, headers=owner_headers)
        removed = await client.delete(f"{base}/{moeder_id}", headers=owner_headers)
        listed = await client.get(base, headers=owner_headers)

        assert added.status_code == 201
        assert added.json()["data"]["kindId"] == kind_id
        assert updated.json()["data"]["relatieType"]["naam"] == "Adoptief"
        assert removed.json()["data"]["message"] == "Ouder-kind relatie removed"
        assert listed.json()["data"] == []

    @pytest.mark.asyncio
    async def test_self_parenting_by_id(self, client, owner_headers):
        kind_id = await create_persoon(client, owner_headers, "Jansen")

        response = await client.post(
            f"/api/kinderen/{kind_id}/ouders", json={"ouderId": kind_id, "relatieTypeId": 1}, headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "A person cannot be their own parent"

    @pytest.mark.asyncio
    async def test_self_parenting_inline(self, client, owner_headers):
        kind_id = await create_persoon(client, owner_headers, "Jansen")

        response = await client.post(
            f"/api/kinderen/{kind_id}/ouders",
            json={"ouderData": {"id": kind_id, "achternaam": "Jansen"}, "relatieTypeId": 1},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "A person cannot be their own parent"

    @pytest.mark.asyncio
    async def test_self_parenting_when_adding_kind(self, client, owner_headers):
        dossier = await create_dossier(client, owner_headers)
        kind_id = await create_persoon(client, owner_headers, "Jansen")

        response = await client.post(
            f"/api/dossiers/{dossier['id']}/kinderen",
            json={"kindId": kind_id, "ouderRelaties": [{"ouderId": kind_id, "relatieTypeId": 1}]},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "A person cannot be their own parent"

    @pytest.mark.asyncio
    async def test_duplicate_relation(self, client, owner_headers):
        kind_id = await create_persoon(client, owner_headers, "Jansen")
        vader_id = await create_persoon(client, owner_headers, "Jansen")
        body = {"ouderId": vader_id, "relatieTypeId": 1}
        await client.post(f"/api/kinderen/{kind_id}/ouders", json=body, headers=owner_headers)

        response = await client.post(f"/api/kinderen/{kind_id}/ouders", json=body, headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Ouder-kind relatie already exists"

    @pytest.mark.asyncio
    async def test_other_users_kind(self, client, owner_headers, other_headers):
        kind_id = await create_persoon(client, owner_headers, "Jansen")

        response = await client.get(f"/api/kinderen/{kind_id}/ouders", headers=other_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_inline_ouder_of_other_user_is_refused(self, client, owner_headers, other_headers):
        kind_id = await create_persoon(client, owner_headers, "Jansen")
        foreign_id = await create_persoon(client, other_headers, "Ander")

        response = await client.post(
            f"/api/kinderen/{kind_id}/ouders",
            json={"ouderData": {"id": foreign_id, "achternaam": "Gekaapt"}, "relatieTypeId": 1},
            headers=owner_headers,
        )

        assert response.status_code == 403
        foreign = await client.get(f"/api/personen/{foreign_id}", headers=other_headers)
        assert foreign.json()["data"]["achternaam"] == "Ander"

    @pytest.mark.asyncio
    async def test_inline_kind_of_other_user_is_refused(self, client, owner_headers, other_headers):
        dossier = await create_dossier(client, owner_headers)
        foreign_id = await create_persoon(client, other_headers, "Ander")

        response = await add_kind(
            client, dossier["id"], owner_headers, kindData={"id": foreign_id, "achternaam": "Gekaapt"}
        )

        assert response.status_code == 403
