import pytest
from httpx import AsyncClient

from app.utils.s3_validation import validate_and_parse_s3_url


@pytest.mark.asyncio
async def test_presigned_url_round_trips_through_validator(client: AsyncClient, admin_headers, storage):
    response = await client.post(
        "/api/uploads/presigned-url",
        json={"fileType": "image/png", "folder": "shields"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["fileKey"].startswith("shields/")
    assert data["fileKey"].endswith(".png")
    assert "X-Amz-Signature" in data["uploadUrl"]

    parts = validate_and_parse_s3_url(data["publicUrl"], storage.bucket, storage.region)
    assert parts is not None
    assert parts.key == data["fileKey"]


@pytest.mark.asyncio
async def test_presigned_public_url_is_accepted_on_create(client: AsyncClient, admin_headers):
    presigned = (await client.post(
        "/api/uploads/presigned-url",
        json={"fileType": "image/jpeg", "folder": "historical-images"},
        headers=admin_headers,
    )).json()

    response = await client.post(
        "/api/admin/historical-images/with-url",
        json={"title": "Fundación", "description": "1951", "imageUrl": presigned["publicUrl"]},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["imageS3Key"] == presigned["fileKey"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"fileType": "application/pdf"},
        {"fileType": "image/png", "folder": "../escape"},
        {"fileType": "image/png", "folder": "bad folder!"},
    ],
)
async def test_presigned_url_rejects_bad_requests(client: AsyncClient, admin_headers, payload):
    response = await client.post("/api/uploads/presigned-url", json=payload, headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_presigned_download(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/uploads/presigned-download", json={"fileKey": "gallery/a.jpg"}, headers=admin_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert "gallery/a.jpg" in data["downloadUrl"]
    assert data["expiresIn"] == 3600

    traversal = await client.post(
        "/api/uploads/presigned-download", json={"fileKey": "../etc/passwd"}, headers=admin_headers
    )
    assert traversal.status_code == 400


@pytest.mark.asyncio
async def test_presign_requires_admin(client: AsyncClient):
    response = await client.post("/api/uploads/presigned-url", json={"fileType": "image/png"})

    assert response.status_code == 401
