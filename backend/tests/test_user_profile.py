"""
Ouderschaps API — User Profile Tests
======================================

What:  Tests for the billing profile: Dutch format checks, the zakelijk
       rules and clearing company fields for particulieren.
How:   PUT /api/user/profile through the app as user 42.
"""

import pytest

PARTICULIER = {
    "klant_type": "particulier",
    "straat": "Dorpsstraat",
    "huisnummer": "12a",
    "postcode": "1234 ab",
    "plaats": "Utrecht",
}


def profile(**overrides):
    body = dict(PARTICULIER)
    body.update(overrides)
    return body


class TestBillingProfile:

    @pytest.mark.asyncio
    async def test_particulier_profile_is_stored(self, client, owner_headers):
        response = await client.put("/api/user/profile", json=profile(telefoon="0612345678"), headers=owner_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["postcode"] == "1234 AB"
        assert data["telefoon"] == "0612345678"
        assert data["isZakelijk"] is False
        assert data["profielCompleet"] is True
        assert data["profielIngevuldOp"] is not None

    @pytest.mark.asyncio
    async def test_zakelijk_profile_is_stored(self, client, owner_headers):
        response = await client.put(
            "/api/user/profile",
            json=profile(
                klant_type="zakelijk", bedrijfsnaam="Mediation BV", btw_nummer="NL123456789B01", kvk_nummer="12345678"
            ),
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isZakelijk"] is True
        assert data["bedrijfsnaam"] == "Mediation BV"
        assert data["btwNummer"] == "NL123456789B01"

    @pytest.mark.asyncio
    async def test_company_fields_cleared_for_particulier(self, client, owner_headers):
        await client.put(
            "/api/user/profile",
            json=profile(klant_type="zakelijk", bedrijfsnaam="Mediation BV", kvk_nummer="12345678"),
            headers=owner_headers,
        )

        response = await client.put(
            "/api/user/profile", json=profile(bedrijfsnaam="Blijft niet", kvk_nummer="87654321"), headers=owner_headers
        )

        data = response.json()["data"]
        assert data["klantType"] == "particulier"
        assert data["bedrijfsnaam"] is None
        assert data["kvkNummer"] is None
        assert data["btwNummer"] is None

    @pytest.mark.asyncio
    async def test_zakelijk_requires_bedrijfsnaam(self, client, owner_headers):
        response = await client.put("/api/user/profile", json=profile(klant_type="zakelijk"), headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed: Bedrijfsnaam is verplicht voor zakelijke klanten"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"postcode": "0123 AB"}, "Ongeldige postcode"),
            ({"telefoon": "12345"}, "Ongeldig telefoonnummer"),
            ({"land": "nl"}, "Landcode moet in hoofdletters zijn"),
            ({"klant_type": "zakelijk", "bedrijfsnaam": "BV", "btw_nummer": "NL12"}, "Ongeldig BTW-nummer"),
            ({"klant_type": "zakelijk", "bedrijfsnaam": "BV", "kvk_nummer": "1234"}, "Ongeldig KvK-nummer"),
        ],
    )
    async def test_invalid_formats(self, client, owner_headers, overrides, message):
        response = await client.put("/api/user/profile", json=profile(**overrides), headers=owner_headers)

        assert response.status_code == 400
        assert message in response.json()["error"]

    @pytest.mark.asyncio
    async def test_profile_requires_authentication(self, client):
        response = await client.put("/api/user/profile", json=profile())

        assert response.status_code == 401
