import pytest
from httpx import AsyncClient

SITE_CONFIG = "/api/admin/site-config"


@pytest.mark.asyncio
async def test_defaults_served_before_first_save(client: AsyncClient):
    response = await client.get(SITE_CONFIG)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] is None
    assert data["siteName"] == "Cuerpo de Banderas"
    assert data["foundingYear"] == 1951
    assert len(data["admissionRequirements"]) == 5
    assert data["logoUrl"] is None


@pytest.mark.asyncio
async def test_first_save_creates_row_and_keeps_defaults(client: AsyncClient, admin_headers):
    response = await client.put(SITE_CONFIG, json={"siteSubtitle": "LCR"}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] is not None
    assert data["siteSubtitle"] == "LCR"
    assert data["siteName"] == "Cuerpo de Banderas"

    again = (await client.get(SITE_CONFIG)).json()
    assert again["id"] == data["id"]
    assert again["siteSubtitle"] == "LCR"


@pytest.mark.asyncio
async def test_partial_update_only_touches_sent_fields(client: AsyncClient, admin_headers):
    await client.put(SITE_CONFIG, json={"contactPhone": "+506 0000-0000"}, headers=admin_headers)
    response = await client.put(
        SITE_CONFIG, json={"admissionRequirements": ["Ser estudiante"]}, headers=admin_headers
    )

    data = response.json()
    assert data["contactPhone"] == "+506 0000-0000"
    assert data["admissionRequirements"] == ["Ser estudiante"]


@pytest.mark.asyncio
async def test_logo_replacement_and_clearing(client: AsyncClient, admin_headers, bucket_url, storage):
    first = await client.put(SITE_CONFIG, json={"logoUrl": bucket_url("site/logo-1.png")}, headers=admin_headers)
    assert first.json()["logoS3Key"] == "site/logo-1.png"

    second = await client.put(SITE_CONFIG, json={"logoUrl": bucket_url("site/logo-2.png")}, headers=admin_headers)
    assert second.json()["logoS3Key"] == "site/logo-2.png"
    assert storage.deleted == ["site/logo-1.png"]

    cleared = await client.put(SITE_CONFIG, json={"logoUrl": ""}, headers=admin_headers)
    assert cleared.json()["logoUrl"] is None
    assert cleared.json()["logoS3Key"] is None
    assert storage.deleted == ["site/logo-1.png", "site/logo-2.png"]


@pytest.mark.asyncio
async def test_untrusted_logo_url_is_rejected(client: AsyncClient, admin_headers):
    response = await client.put(SITE_CONFIG, json={"logoUrl": "https://example.com/logo.png"}, headers=admin_headers)

    assert response.status_code == 400
    assert (await client.get(SITE_CONFIG)).json()["id"] is None


@pytest.mark.asyncio
async def test_required_fields_cannot_be_nulled(client: AsyncClient, admin_headers):
    response = await client.put(SITE_CONFIG, json={"siteName": None}, headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_requires_admin(client: AsyncClient):
    response = await client.put(SITE_CONFIG, json={"siteName": "X"})

    assert response.status_code == 401
