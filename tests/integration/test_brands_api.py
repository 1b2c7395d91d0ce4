import pytest
from httpx import AsyncClient

BASE = "/api/v1/catalog/brand/"


@pytest.fixture
def brand_payload() -> dict:
    return {
        "name": "Acme Sports",
        "description": "Running gear",
        "logo": {"url": "https://cdn.example.com/acme.png"},
        "website": "https://acme.example.com",
        "countries": ["SA", "EG"],
    }


async def create_brand(client: AsyncClient, headers: dict, payload: dict) -> dict:
    response = await client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestBrandEndpoints:

    async def test_create_brand(self, client: AsyncClient, admin_headers, brand_payload):
        """Test brand creation"""
        brand = await create_brand(client, admin_headers, brand_payload)

        assert brand["slug"] == "acme-sports"
        assert brand["logo"] == {"url": "https://cdn.example.com/acme.png", "alt": "Acme Sports"}
        assert brand["countries"] == ["SA", "EG"]
        assert brand["status"] is True

    async def test_same_name_gets_unique_slug(self, client: AsyncClient, admin_headers, brand_payload):
        """Test a repeated name gets a suffixed slug"""
        await create_brand(client, admin_headers, brand_payload)
        second = await create_brand(client, admin_headers, brand_payload)

        assert second["slug"] == "acme-sports-1"

    @pytest.mark.parametrize("override", [
        {"countries": []},
        {"website": "ftp://acme.example.com"},
        {"name": " "},
    ])
    async def test_invalid_payloads(self, client: AsyncClient, admin_headers, brand_payload, override):
        """Test invalid brand payloads are rejected"""
        response = await client.post(BASE, json={**brand_payload, **override}, headers=admin_headers)
        assert response.status_code == 422

    async def test_update_records_list_change(self, client: AsyncClient, admin_headers, brand_payload):
        """Test a list field change is audited"""
        brand = await create_brand(client, admin_headers, brand_payload)

        response = await client.patch(
            f"{BASE}{brand['id']}",
            json={"countries": ["EG", "SA"], "description": "Running gear"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        logs = await client.get(
            "/api/v1/audit/logs/", params={"action_type": "brand.update"}, headers=admin_headers
        )
        entry = logs.json()[0]
        assert entry["changes"] == {"countries": {"oldValue": ["SA", "EG"], "newValue": ["EG", "SA"]}}
        assert entry["metadata"]["updatedFields"] == ["countries"]

    async def test_status_only_update(self, client: AsyncClient, admin_headers, brand_payload):
        """Test a status-only brand update"""
        brand = await create_brand(client, admin_headers, brand_payload)

        response = await client.patch(f"{BASE}{brand['id']}", json={"status": False}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] is False
        logs = await client.get(
            "/api/v1/audit/logs/", params={"action_type": "brand.status.update"}, headers=admin_headers
        )
        assert logs.json()[0]["changes"] == {"status": {"oldValue": True, "newValue": False}}

    async def test_rename_regenerates_slug(self, client: AsyncClient, admin_headers, brand_payload):
        """Test a brand rename regenerates its slug"""
        brand = await create_brand(client, admin_headers, brand_payload)

        response = await client.patch(f"{BASE}{brand['id']}", json={"name": "Acme Outdoor"}, headers=admin_headers)

        assert response.json()["slug"] == "acme-outdoor"

    async def test_null_countries_rejected(self, client: AsyncClient, admin_headers, brand_payload):
        """Test countries cannot be cleared"""
        brand = await create_brand(client, admin_headers, brand_payload)

        response = await client.patch(f"{BASE}{brand['id']}", json={"countries": None}, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "VALIDATION_ERROR"

    async def test_delete_brand(self, client: AsyncClient, admin_headers, brand_payload):
        """Test brand deletion"""
        brand = await create_brand(client, admin_headers, brand_payload)

        response = await client.delete(f"{BASE}{brand['id']}", headers=admin_headers)

        assert response.status_code == 200
        listing = await client.get(BASE, headers=admin_headers)
        assert listing.json() == []
        logs = await client.get(
            "/api/v1/audit/logs/", params={"action_type": "brand.delete"}, headers=admin_headers
        )
        assert logs.json()[0]["changes"]["name"] == {"oldValue": "Acme Sports", "newValue": None}

    async def test_delete_missing_brand(self, client: AsyncClient, admin_headers):
        """Test deleting an unknown brand returns 404"""
        response = await client.delete(f"{BASE}404", headers=admin_headers)
        assert response.status_code == 404

    async def test_viewer_cannot_delete(self, client: AsyncClient, viewer, make_headers, brand_payload, admin_headers):
        """Test view-only employees cannot delete brands"""
        brand = await create_brand(client, admin_headers, brand_payload)

        response = await client.delete(f"{BASE}{brand['id']}", headers=make_headers(viewer))

        assert response.status_code == 403
