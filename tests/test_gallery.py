import pytest
from httpx import AsyncClient

from app.utils import image_converter

GALLERY = "/api/admin/gallery"
CATEGORIES = "/api/admin/gallery-categories"


async def create_category(client, headers, name="Desfiles"):
    response = await client.post(CATEGORIES, json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def create_item_with_url(client, headers, bucket_url, key, **extra):
    payload = {"title": f"Foto {key}", "imageUrl": bucket_url(key)}
    payload.update(extra)
    response = await client.post(f"{GALLERY}/with-url", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_multipart_upload_stores_image_and_thumbnail(client: AsyncClient, admin_headers, png_bytes, storage):
    category = await create_category(client, admin_headers)

    response = await client.post(
        GALLERY,
        data={"title": "Desfile 15 de setiembre", "categoryId": category["id"], "year": "2024"},
        files={"image": ("desfile.png", png_bytes, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 201
    item = response.json()
    assert item["categoryId"] == category["id"]
    assert item["imageS3Key"].startswith("gallery/")
    assert item["imageS3Key"].endswith(".png")
    assert item["thumbnailS3Key"] == item["imageS3Key"].replace("gallery/", "gallery/thumb_")
    assert item["imageUrl"].endswith(item["imageS3Key"])

    # Both objects are re-encoded JPEG bytes
    assert set(storage.uploaded) == {item["imageS3Key"], item["thumbnailS3Key"]}
    assert all(data[:2] == b"\xff\xd8" for data in storage.uploaded.values())


@pytest.mark.asyncio
async def test_multipart_upload_rejects_non_images(client: AsyncClient, admin_headers, storage):
    not_an_image = await client.post(
        GALLERY,
        data={"title": "Documento"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )
    corrupt = await client.post(
        GALLERY,
        data={"title": "Roto"},
        files={"image": ("broken.png", b"not really a png", "image/png")},
        headers=admin_headers,
    )

    assert not_an_image.status_code == 400
    assert not_an_image.json()["error"] == "Only image files are allowed"
    assert corrupt.status_code == 400
    assert corrupt.json()["error"] == "Invalid image file"
    assert storage.uploaded == {}


@pytest.mark.asyncio
async def test_multipart_upload_rejects_oversized_dimensions(
    client: AsyncClient, admin_headers, png_bytes, storage, monkeypatch
):
    monkeypatch.setattr(image_converter, "MAX_IMAGE_PIXELS", 100_000)

    response = await client.post(
        GALLERY,
        data={"title": "Panorama"},
        files={"image": ("panorama.png", png_bytes, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid image file"
    assert "too large" in response.json()["details"]
    assert storage.uploaded == {}
    assert (await client.get(GALLERY)).json() == []


@pytest.mark.asyncio
async def test_unknown_category_is_rejected_before_upload(client: AsyncClient, admin_headers, png_bytes, storage):
    response = await client.post(
        GALLERY,
        data={"title": "Huérfana", "categoryId": "no-such-category"},
        files={"image": ("a.png", png_bytes, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Category not found"
    assert storage.uploaded == {}


@pytest.mark.asyncio
async def test_delete_triggers_single_storage_delete_even_when_it_fails(
    client: AsyncClient, admin_headers, bucket_url, storage
):
    item = await create_item_with_url(client, admin_headers, bucket_url, "gallery/solo.jpg")
    storage.fail_deletes = True

    response = await client.delete(f"{GALLERY}/{item['id']}", headers=admin_headers)

    assert response.status_code == 204
    assert storage.deleted == ["gallery/solo.jpg"]
    assert (await client.get(f"{GALLERY}/{item['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_multipart_update_replaces_image_and_thumbnail(client: AsyncClient, admin_headers, png_bytes, storage):
    created = (await client.post(
        GALLERY,
        data={"title": "Original"},
        files={"image": ("a.png", png_bytes, "image/png")},
        headers=admin_headers,
    )).json()

    response = await client.put(
        f"{GALLERY}/{created['id']}",
        data={"title": "Reemplazada"},
        files={"image": ("b.jpg", png_bytes, "image/jpeg")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Reemplazada"
    assert updated["imageS3Key"] != created["imageS3Key"]
    assert sorted(storage.deleted) == sorted([created["imageS3Key"], created["thumbnailS3Key"]])


@pytest.mark.asyncio
async def test_multipart_update_without_file_keeps_image(client: AsyncClient, admin_headers, bucket_url, storage):
    item = await create_item_with_url(client, admin_headers, bucket_url, "gallery/keep.jpg")

    response = await client.put(f"{GALLERY}/{item['id']}", data={"year": "1999"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["year"] == "1999"
    assert response.json()["imageS3Key"] == "gallery/keep.jpg"
    assert storage.deleted == []


@pytest.mark.asyncio
async def test_filters_by_category_and_uncategorized(client: AsyncClient, admin_headers, bucket_url):
    category = await create_category(client, admin_headers)
    inside = await create_item_with_url(client, admin_headers, bucket_url, "gallery/in.jpg", categoryId=category["id"])
    outside = await create_item_with_url(client, admin_headers, bucket_url, "gallery/out.jpg")

    by_category = (await client.get(f"{GALLERY}/category/{category['id']}")).json()
    uncategorized = (await client.get(f"{GALLERY}/uncategorized")).json()

    assert [i["id"] for i in by_category] == [inside["id"]]
    assert [i["id"] for i in uncategorized] == [outside["id"]]


@pytest.mark.asyncio
async def test_deleting_category_removes_items_and_their_images(
    client: AsyncClient, admin_headers, bucket_url, storage
):
    category = await create_category(client, admin_headers)
    first = await create_item_with_url(
        client, admin_headers, bucket_url, "gallery/1.jpg",
        categoryId=category["id"], thumbnailUrl=bucket_url("gallery/thumb_1.jpg"),
    )
    second = await create_item_with_url(client, admin_headers, bucket_url, "gallery/2.jpg", categoryId=category["id"])
    survivor = await create_item_with_url(client, admin_headers, bucket_url, "gallery/3.jpg")

    response = await client.delete(f"{CATEGORIES}/{category['id']}", headers=admin_headers)

    assert response.status_code == 204
    assert sorted(storage.deleted) == ["gallery/1.jpg", "gallery/2.jpg", "gallery/thumb_1.jpg"]
    assert (await client.get(f"{GALLERY}/{first['id']}")).status_code == 404
    assert (await client.get(f"{GALLERY}/{second['id']}")).status_code == 404
    assert (await client.get(f"{GALLERY}/{survivor['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_category_slug_generation_and_conflicts(client: AsyncClient, admin_headers):
    category = await create_category(client, admin_headers, name="Ceremonias Patrias")
    assert category["slug"] == "ceremonias-patrias"

    by_slug = await client.get(f"{CATEGORIES}/slug/ceremonias-patrias")
    assert by_slug.status_code == 200
    assert by_slug.json()["id"] == category["id"]

    duplicate = await client.post(CATEGORIES, json={"name": "Ceremonias Patrias"}, headers=admin_headers)
    assert duplicate.status_code == 409

    renamed = await client.put(f"{CATEGORIES}/{category['id']}", json={"name": "Actos Cívicos"}, headers=admin_headers)
    assert renamed.status_code == 200
    assert renamed.json()["slug"] == "actos-civicos"

    assert (await client.get(f"{CATEGORIES}/slug/unknown")).status_code == 404


@pytest.mark.asyncio
async def test_replacing_image_url_without_thumbnail_drops_old_thumbnail(
    client: AsyncClient, admin_headers, bucket_url, storage
):
    item = await create_item_with_url(
        client, admin_headers, bucket_url, "gallery/antes.jpg", thumbnailUrl=bucket_url("gallery/thumb_antes.jpg")
    )
    assert item["thumbnailS3Key"] == "gallery/thumb_antes.jpg"

    response = await client.put(
        f"{GALLERY}/{item['id']}/with-url",
        json={"imageUrl": bucket_url("gallery/despues.jpg")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["imageS3Key"] == "gallery/despues.jpg"
    assert updated["thumbnailUrl"] is None
    assert updated["thumbnailS3Key"] is None
    assert sorted(storage.deleted) == ["gallery/antes.jpg", "gallery/thumb_antes.jpg"]


@pytest.mark.asyncio
async def test_replacing_image_url_with_new_thumbnail_keeps_both(
    client: AsyncClient, admin_headers, bucket_url, storage
):
    item = await create_item_with_url(
        client, admin_headers, bucket_url, "gallery/a.jpg", thumbnailUrl=bucket_url("gallery/thumb_a.jpg")
    )

    response = await client.put(
        f"{GALLERY}/{item['id']}/with-url",
        json={"imageUrl": bucket_url("gallery/b.jpg"), "thumbnailUrl": bucket_url("gallery/thumb_b.jpg")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["thumbnailS3Key"] == "gallery/thumb_b.jpg"
    assert sorted(storage.deleted) == ["gallery/a.jpg", "gallery/thumb_a.jpg"]
