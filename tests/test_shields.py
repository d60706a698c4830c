import pytest
from httpx import AsyncClient

from app.exceptions import ConflictError
from app.repositories.shields import ShieldRepository

SHIELDS = "/api/admin/shields"


def shield_payload(bucket_url, title, **extra):
    payload = {
        "title": title,
        "description": f"Descripción de {title}",
        "imageUrl": bucket_url(f"shields/{title.lower().replace(' ', '-')}.jpg"),
    }
    payload.update(extra)
    return payload


@pytest.mark.asyncio
async def test_create_shield_derives_storage_key(client: AsyncClient, admin_headers, bucket_url):
    response = await client.post(SHIELDS, json=shield_payload(bucket_url, "Escudo Nacional"), headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["imageS3Key"] == "shields/escudo-nacional.jpg"
    assert data["isMainShield"] is False
    assert data["displayOrder"] == 0


@pytest.mark.asyncio
async def test_create_shield_with_foreign_url_is_rejected(client: AsyncClient, admin_headers):
    payload = {
        "title": "Escudo",
        "description": "Desc",
        "imageUrl": "https://evil.example.com/escudo.jpg",
    }
    response = await client.post(SHIELDS, json=payload, headers=admin_headers)

    assert response.status_code == 400
    assert "Invalid S3 URL" in response.json()["error"]

    listing = await client.get(SHIELDS)
    assert listing.json() == []


@pytest.mark.asyncio
async def test_second_main_shield_displaces_first(client: AsyncClient, admin_headers, bucket_url):
    first = await client.post(
        SHIELDS, json=shield_payload(bucket_url, "Primero", isMainShield=True), headers=admin_headers
    )
    second = await client.post(
        SHIELDS, json=shield_payload(bucket_url, "Segundo", isMainShield=True), headers=admin_headers
    )
    assert first.status_code == 201
    assert second.status_code == 201

    shields = (await client.get(SHIELDS)).json()
    main_ids = [s["id"] for s in shields if s["isMainShield"]]
    assert main_ids == [second.json()["id"]]

    main = await client.get(f"{SHIELDS}/main")
    assert main.status_code == 200
    assert main.json()["id"] == second.json()["id"]


@pytest.mark.asyncio
async def test_update_to_main_unflags_previous(client: AsyncClient, admin_headers, bucket_url):
    first = (await client.post(
        SHIELDS, json=shield_payload(bucket_url, "Primero", isMainShield=True), headers=admin_headers
    )).json()
    second = (await client.post(SHIELDS, json=shield_payload(bucket_url, "Segundo"), headers=admin_headers)).json()

    response = await client.put(f"{SHIELDS}/{second['id']}", json={"isMainShield": True}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["isMainShield"] is True

    refreshed = (await client.get(f"{SHIELDS}/{first['id']}")).json()
    assert refreshed["isMainShield"] is False


@pytest.mark.asyncio
async def test_set_main_endpoint(client: AsyncClient, admin_headers, bucket_url):
    first = (await client.post(
        SHIELDS, json=shield_payload(bucket_url, "Primero", isMainShield=True), headers=admin_headers
    )).json()
    second = (await client.post(SHIELDS, json=shield_payload(bucket_url, "Segundo"), headers=admin_headers)).json()

    response = await client.put(f"{SHIELDS}/{second['id']}/set-main", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["isMainShield"] is True
    assert (await client.get(f"{SHIELDS}/{first['id']}")).json()["isMainShield"] is False

    missing = await client.put(f"{SHIELDS}/does-not-exist/set-main", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_main_shield_missing_returns_404(client: AsyncClient):
    response = await client.get(f"{SHIELDS}/main")

    assert response.status_code == 404
    assert response.json()["error"] == "Main shield not found"


@pytest.mark.asyncio
async def test_replacing_image_deletes_old_object_after_commit(client: AsyncClient, admin_headers, bucket_url, storage):
    shield = (await client.post(SHIELDS, json=shield_payload(bucket_url, "Escudo"), headers=admin_headers)).json()

    new_url = bucket_url("shields/nuevo.jpg")
    response = await client.put(
        f"{SHIELDS}/{shield['id']}/with-url", json={"imageUrl": new_url}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["imageS3Key"] == "shields/nuevo.jpg"
    assert storage.deleted == ["shields/escudo.jpg"]


@pytest.mark.asyncio
async def test_same_image_url_does_not_delete(client: AsyncClient, admin_headers, bucket_url, storage):
    payload = shield_payload(bucket_url, "Escudo")
    shield = (await client.post(SHIELDS, json=payload, headers=admin_headers)).json()

    response = await client.put(
        f"{SHIELDS}/{shield['id']}", json={"imageUrl": payload["imageUrl"], "title": "Escudo 2"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Escudo 2"
    assert storage.deleted == []


@pytest.mark.asyncio
async def test_required_image_cannot_be_cleared(client: AsyncClient, admin_headers, bucket_url):
    shield = (await client.post(SHIELDS, json=shield_payload(bucket_url, "Escudo"), headers=admin_headers)).json()

    empty = await client.put(f"{SHIELDS}/{shield['id']}", json={"imageUrl": ""}, headers=admin_headers)
    null = await client.put(f"{SHIELDS}/{shield['id']}", json={"imageUrl": None}, headers=admin_headers)

    assert empty.status_code == 400
    assert null.status_code == 400


@pytest.mark.asyncio
async def test_writes_require_admin_token(client: AsyncClient, bucket_url):
    response = await client.post(SHIELDS, json=shield_payload(bucket_url, "Escudo"))

    assert response.status_code == 401
    assert (await client.get(SHIELDS)).status_code == 200


def raw_shield(title, **extra):
    data = {"title": title, "description": "D", "image_url": "https://example.org/escudo.jpg"}
    data.update(extra)
    return data


@pytest.mark.asyncio
async def test_unique_index_rejects_second_main_shield(db_session):
    repository = ShieldRepository(db_session)
    await repository.create(raw_shield("Primero", is_main_shield=True))
    await db_session.commit()

    # Any number of non-main rows is allowed
    await repository.create(raw_shield("Secundario"))
    await repository.create(raw_shield("Terciario"))
    await db_session.commit()

    with pytest.raises(ConflictError):
        await repository.create(raw_shield("Segundo", is_main_shield=True))

    main = await repository.get_main()
    assert main.title == "Primero"


@pytest.mark.asyncio
async def test_racing_main_shield_writer_gets_conflict(client: AsyncClient, admin_headers, bucket_url, monkeypatch):
    first = await client.post(
        SHIELDS, json=shield_payload(bucket_url, "Primero", isMainShield=True), headers=admin_headers
    )
    assert first.status_code == 201

    # A concurrent writer that read before the first commit sees no main shield to clear
    async def stale_clear_main(self, except_id=None):
        return None

    monkeypatch.setattr(ShieldRepository, "clear_main", stale_clear_main)

    second = await client.post(
        SHIELDS, json=shield_payload(bucket_url, "Segundo", isMainShield=True), headers=admin_headers
    )

    assert second.status_code == 409
    assert [s["title"] for s in (await client.get(SHIELDS)).json()] == ["Primero"]
    assert (await client.get(f"{SHIELDS}/main")).json()["id"] == first.json()["id"]
