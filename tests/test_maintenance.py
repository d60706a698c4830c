from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from app.maintenance.local_migration import migrate_local_images
from app.maintenance.orphan_cleanup import cleanup_orphaned_files, collect_referenced_keys
from app.models import GalleryItem, LeadershipPeriod, Shield, SiteConfig
from app.services.image_upload_service import ImageUploadService
from app.services.s3_storage_service import StoredObject

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def stored(key, hours_old):
    return StoredObject(key=key, size=100, last_modified=NOW - timedelta(hours=hours_old))


async def seed_referenced_rows(session):
    session.add_all([
        GalleryItem(title="A", image_url="u", image_s3_key="gallery/a.jpg",
                    thumbnail_url="t", thumbnail_s3_key="gallery/thumb_a.jpg"),
        Shield(title="S", description="D", image_url="u", image_s3_key="shields/s.jpg"),
        SiteConfig(logo_url="u", logo_s3_key="site/logo.png"),
    ])
    await session.commit()


@pytest.mark.asyncio
async def test_collect_referenced_keys(db_session):
    await seed_referenced_rows(db_session)

    keys = await collect_referenced_keys(db_session)

    assert keys == {"gallery/a.jpg", "gallery/thumb_a.jpg", "shields/s.jpg", "site/logo.png"}


@pytest.mark.asyncio
async def test_cleanup_deletes_only_old_unreferenced_objects(db_session, storage):
    await seed_referenced_rows(db_session)
    storage.objects = [
        stored("gallery/a.jpg", 100),
        stored("shields/s.jpg", 100),
        stored("gallery/orphan-old.jpg", 48),
        stored("gallery/orphan-fresh.jpg", 1),
    ]

    report = await cleanup_orphaned_files(db_session, storage, older_than_hours=24, now=NOW)

    assert report.total_objects == 4
    assert report.referenced == 2
    assert report.too_recent == 1
    assert report.orphaned == ["gallery/orphan-old.jpg"]
    assert report.deleted == 1
    assert storage.deleted == ["gallery/orphan-old.jpg"]


@pytest.mark.asyncio
async def test_cleanup_dry_run_deletes_nothing(db_session, storage):
    storage.objects = [stored("gallery/orphan.jpg", 72)]

    report = await cleanup_orphaned_files(db_session, storage, dry_run=True, now=NOW)

    assert report.orphaned == ["gallery/orphan.jpg"]
    assert report.deleted == 0
    assert storage.deleted == []


@pytest.mark.asyncio
async def test_migration_uploads_local_files_and_rewrites_urls(db_session, storage, tmp_path, png_bytes):
    (tmp_path / "escudo.png").write_bytes(png_bytes)
    db_session.add_all([
        Shield(id="local", title="Local", description="D", image_url="/uploads/escudo.png"),
        Shield(id="remote", title="Remote", description="D", image_url="https://cdn.example.org/x.jpg"),
        Shield(id="missing", title="Missing", description="D", image_url="/uploads/gone.png"),
        LeadershipPeriod(year="1990", jefatura="J", image_url=None),
    ])
    await db_session.commit()

    results = await migrate_local_images(db_session, storage, tmp_path)

    shields = results["shields"]
    assert shields.migrated == 1
    assert shields.skipped == 1
    assert shields.missing == 1
    assert results["leadership"].skipped == 1

    migrated = (await db_session.execute(select(Shield).where(Shield.id == "local"))).scalar_one()
    assert migrated.image_s3_key.startswith("shields/")
    assert migrated.image_s3_key.endswith(".png")
    assert migrated.image_url == storage.get_public_url(migrated.image_s3_key)
    assert storage.uploaded[migrated.image_s3_key] == png_bytes


@pytest.mark.asyncio
async def test_migration_dry_run_changes_nothing(db_session, storage, tmp_path, png_bytes):
    (tmp_path / "foto.png").write_bytes(png_bytes)
    db_session.add(GalleryItem(title="G", image_url="/public/foto.png"))
    await db_session.commit()

    results = await migrate_local_images(db_session, storage, tmp_path, dry_run=True)

    assert results["gallery"].planned == [str(tmp_path / "foto.png")]
    assert storage.uploaded == {}
    item = (await db_session.execute(select(GalleryItem))).scalar_one()
    assert item.image_url == "/public/foto.png"


@pytest.mark.asyncio
async def test_migration_moves_images_saved_by_local_backend(db_session, storage, tmp_path, png_bytes):
    local = ImageUploadService("local", storage, str(tmp_path))
    uploaded = await local.upload_image(png_bytes, "desfile.png", folder="gallery", with_thumbnail=True)
    db_session.add(GalleryItem(
        title="Desfile",
        image_url=uploaded.original_url,
        image_s3_key=uploaded.original_key,
        thumbnail_url=uploaded.thumbnail_url,
        thumbnail_s3_key=uploaded.thumbnail_key,
    ))
    await db_session.commit()
    assert storage.uploaded == {}

    results = await migrate_local_images(db_session, storage, tmp_path)

    assert results["gallery"].migrated == 1
    assert results["gallery thumbnails"].migrated == 1
    item = (await db_session.execute(select(GalleryItem))).scalar_one()
    assert item.image_s3_key.startswith("gallery/")
    assert item.thumbnail_s3_key.startswith("gallery/")
    assert item.image_url == storage.get_public_url(item.image_s3_key)
    assert set(storage.uploaded) == {item.image_s3_key, item.thumbnail_s3_key}

    # Already migrated rows carry S3 keys and are left alone on a second run
    again = await migrate_local_images(db_session, storage, tmp_path)
    assert again["gallery"].migrated == 0
    assert again["gallery"].skipped == 1
