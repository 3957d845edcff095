"""Integration tests for the customer tag catalog API."""

import pytest
from httpx import AsyncClient

TAGS_URL = "/api/v1/customer-tags"


async def _create_tag(client: AsyncClient, prefix: str, code: str, **extra) -> dict:
    response = await client.post(TAGS_URL, json={"prefix": prefix, "code": code, **extra})
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCustomerTagsAPI:
    """Integration tests for catalog CRUD."""

    @pytest.mark.asyncio
    async def test_create_tag(self, client: AsyncClient):
        """POST /api/v1/customer-tags."""
        data = await _create_tag(
            client, "categoria-di-sconto", "sconto-45", description="45%", color="#3b82f6"
        )

        assert data["full_tag"] == "categoria-di-sconto:sconto-45"
        assert data["tag_id"].startswith("ctag_")
        assert data["color"] == "#3B82F6"
        assert data["is_active"] is True
        assert data["customer_count"] == 0

    @pytest.mark.asyncio
    async def test_create_duplicate_tag(self, client: AsyncClient):
        """Creating the same prefix:code twice returns 409."""
        await _create_tag(client, "categoria-clienti", "idraulico")

        response = await client.post(
            TAGS_URL, json={"prefix": "categoria-clienti", "code": "idraulico"}
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "DUPLICATE_TAG"
        assert "already exists" in body["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("prefix", "code", "field"),
        [
            ("Categoria", "idraulico", "prefix"),
            ("categoria-clienti", "-idraulico", "code"),
            ("categoria_clienti", "idraulico", "prefix"),
        ],
    )
    async def test_create_rejects_bad_format(
        self, client: AsyncClient, prefix: str, code: str, field: str
    ):
        """Malformed prefix or code returns 400 naming the field."""
        response = await client.post(TAGS_URL, json={"prefix": prefix, "code": code})

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_TAG_FORMAT"
        assert body["details"]["field"] == field

    @pytest.mark.asyncio
    async def test_list_sorted_and_filtered(self, client: AsyncClient):
        """GET lists active tags by prefix then code, optionally one prefix."""
        await _create_tag(client, "categoria-di-sconto", "sconto-50")
        await _create_tag(client, "categoria-clienti", "idraulico")
        await _create_tag(client, "categoria-di-sconto", "sconto-45")

        response = await client.get(TAGS_URL)
        filtered = await client.get(TAGS_URL, params={"prefix": "categoria-di-sconto"})

        assert [t["full_tag"] for t in response.json()["data"]] == [
            "categoria-clienti:idraulico",
            "categoria-di-sconto:sconto-45",
            "categoria-di-sconto:sconto-50",
        ]
        assert [t["code"] for t in filtered.json()["data"]] == ["sconto-45", "sconto-50"]

    @pytest.mark.asyncio
    async def test_prefixes(self, client: AsyncClient):
        """GET /customer-tags/prefixes lists the well-known prefixes."""
        response = await client.get(f"{TAGS_URL}/prefixes")

        assert response.status_code == 200
        prefixes = [p["prefix"] for p in response.json()["data"]]
        assert prefixes == [
            "categoria-di-sconto",
            "categoria-clienti",
            "categoria-acquisto-medio-mensile",
        ]

    @pytest.mark.asyncio
    async def test_get_update_and_deactivate(self, client: AsyncClient):
        """GET, PATCH and DELETE a tag by id."""
        tag = await _create_tag(client, "categoria-clienti", "elettricista")
        url = f"{TAGS_URL}/{tag['tag_id']}"

        patched = await client.patch(url, json={"description": "Elettricisti", "color": "#00aa00"})
        deleted = await client.delete(url)
        fetched = await client.get(url)
        listed = await client.get(TAGS_URL)

        assert patched.status_code == 200
        assert patched.json()["data"]["description"] == "Elettricisti"
        assert patched.json()["data"]["color"] == "#00AA00"
        assert deleted.status_code == 204
        assert fetched.json()["data"]["is_active"] is False
        assert listed.json()["data"] == []

    @pytest.mark.asyncio
    async def test_get_unknown_tag(self, client: AsyncClient):
        """Unknown tag id returns 404."""
        response = await client.get(f"{TAGS_URL}/ctag_missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "TAG_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_holders_and_recount(self, client: AsyncClient):
        """Holders list customers and overriding addresses; recount is a no-op when exact."""
        tag = await _create_tag(client, "categoria-di-sconto", "sconto-50")
        created = await client.post(
            "/api/v1/customers",
            json={"email": "a@b.it", "addresses": [{"label": "Sede"}]},
        )
        customer = created.json()["data"]
        address_id = customer["addresses"][0]["id"]
        base = f"/api/v1/customers/{customer['id']}"
        await client.put(f"{base}/tags", json={"full_tag": "categoria-di-sconto:sconto-50"})
        await client.put(
            f"{base}/addresses/{address_id}/tags",
            json={"full_tag": "categoria-di-sconto:sconto-50"},
        )

        holders = await client.get(f"{TAGS_URL}/{tag['tag_id']}/customers")
        recount = await client.post(f"{TAGS_URL}/recount")

        body = holders.json()
        assert [c["customer_id"] for c in body["customers"]] == [customer["id"]]
        assert [a["address_id"] for a in body["addresses"]] == [address_id]
        assert body["tag"]["customer_count"] == 1
        assert recount.status_code == 200
        assert recount.json()["corrected"] == []
