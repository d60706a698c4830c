"""
One-off migration of images stored on local disk to S3.

Rows whose URL is a local path (anything not starting with http) get their
file uploaded and their URL/key rewritten. Local backend keys are bare
filenames; a key containing a slash is already an S3 object.
"""
import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import GalleryItem, HistoricalImage, LeadershipPeriod, Shield, SiteConfig
from app.services.s3_storage_service import S3StorageService

logger = logging.getLogger(__name__)


class MigrationTarget(NamedTuple):
    label: str
    model: type
    url_field: str
    key_field: str
    folder: str


MIGRATION_TARGETS = [
    MigrationTarget("gallery", GalleryItem, "image_url", "image_s3_key", "gallery"),
    MigrationTarget("gallery thumbnails", GalleryItem, "thumbnail_url", "thumbnail_s3_key", "gallery"),
    MigrationTarget("shields", Shield, "image_url", "image_s3_key", "shields"),
    MigrationTarget("leadership", LeadershipPeriod, "image_url", "image_s3_key", "leadership"),
    MigrationTarget("historical images", HistoricalImage, "image_url", "image_s3_key", "historical-images"),
    MigrationTarget("site logo", SiteConfig, "logo_url", "logo_s3_key", "site"),
    MigrationTarget("site favicon", SiteConfig, "favicon_url", "favicon_s3_key", "site"),
    MigrationTarget("site leadership image", SiteConfig, "leadership_image_url", "leadership_image_s3_key", "site"),
]


@dataclass
class MigrationCounts:
    migrated: int = 0
    skipped: int = 0
    missing: int = 0
    failed: int = 0
    planned: List[str] = field(default_factory=list)


def is_local_url(url: Optional[str]) -> bool:
    return bool(url) and not url.startswith(("http://", "https://"))


def is_local_row(url: Optional[str], key: Optional[str]) -> bool:
    return is_local_url(url) and not (key and "/" in key)


def local_path_for(url: str, uploads_dir: Path) -> Path:
    # /uploads/abc.jpg and /public/abc.jpg both map to <uploads_dir>/abc.jpg
    return uploads_dir / Path(url).name


async def migrate_target(
    session: AsyncSession,
    storage: S3StorageService,
    target: MigrationTarget,
    uploads_dir: Path,
    dry_run: bool = False,
) -> MigrationCounts:
    counts = MigrationCounts()
    result = await session.execute(select(target.model))

    for row in result.scalars().all():
        url = getattr(row, target.url_field)
        if not is_local_row(url, getattr(row, target.key_field)):
            counts.skipped += 1
            continue

        path = local_path_for(url, uploads_dir)
        if not path.is_file():
            logger.warning(f"[{target.label}] Local file not found for {row.id}: {path}")
            counts.missing += 1
            continue

        if dry_run:
            counts.planned.append(str(path))
            continue

        content_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        key = f"{target.folder}/{uuid.uuid4()}{path.suffix.lower() or '.jpg'}"
        try:
            public_url = await storage.upload_bytes(key, path.read_bytes(), content_type)
        except Exception as e:
            logger.error(f"[{target.label}] Failed to upload {path}: {str(e)}", exc_info=True)
            counts.failed += 1
            continue

        setattr(row, target.url_field, public_url)
        setattr(row, target.key_field, key)
        await session.commit()
        counts.migrated += 1
        logger.info(f"[{target.label}] Migrated {row.id}: {path.name} -> {key}")

    return counts


async def migrate_local_images(
    session: AsyncSession,
    storage: S3StorageService,
    uploads_dir: Path,
    dry_run: bool = False,
) -> Dict[str, MigrationCounts]:
    """Run every migration target; returns counts keyed by target label."""
    results = {}
    for target in MIGRATION_TARGETS:
        results[target.label] = await migrate_target(session, storage, target, uploads_dir, dry_run)
    return results
