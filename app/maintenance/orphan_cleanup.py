"""
Removal of S3 objects that no database row references.

Objects can be orphaned when a client uploads through a presigned URL and
never saves the resource, or when a best-effort delete after a commit
fails. Only objects older than a grace period are removed so uploads that
are still being saved are left alone.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import GalleryItem, HistoricalImage, LeadershipPeriod, Shield, SiteConfig
from app.services.s3_storage_service import S3StorageService

logger = logging.getLogger(__name__)

REFERENCED_KEY_COLUMNS = [
    GalleryItem.image_s3_key,
    GalleryItem.thumbnail_s3_key,
    Shield.image_s3_key,
    LeadershipPeriod.image_s3_key,
    HistoricalImage.image_s3_key,
    SiteConfig.logo_s3_key,
    SiteConfig.favicon_s3_key,
    SiteConfig.leadership_image_s3_key,
]


@dataclass
class CleanupReport:
    total_objects: int = 0
    referenced: int = 0
    too_recent: int = 0
    orphaned: List[str] = field(default_factory=list)
    deleted: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def failed(self) -> int:
        return len(self.errors)


async def collect_referenced_keys(session: AsyncSession) -> Set[str]:
    """Every storage key stored in any key column of any table."""
    keys: Set[str] = set()
    for column in REFERENCED_KEY_COLUMNS:
        result = await session.execute(select(column).where(column.is_not(None)))
        keys.update(key for key in result.scalars().all() if key)
    logger.info(f"Found {len(keys)} referenced storage keys")
    return keys


async def cleanup_orphaned_files(
    session: AsyncSession,
    storage: S3StorageService,
    older_than_hours: int = 24,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> CleanupReport:
    """
    Delete unreferenced bucket objects older than `older_than_hours`.

    Args:
        session: Database session used to read the referenced keys
        storage: Bucket to clean
        older_than_hours: Grace period for fresh uploads
        dry_run: Report what would be deleted without deleting
        now: Reference time (defaults to the current UTC time)
    """
    report = CleanupReport(dry_run=dry_run)
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(hours=older_than_hours)

    referenced = await collect_referenced_keys(session)
    objects = await storage.list_objects()
    report.total_objects = len(objects)

    for obj in objects:
        if obj.key in referenced:
            report.referenced += 1
            continue
        last_modified = obj.last_modified
        if last_modified is not None and last_modified.tzinfo is None:
            last_modified = last_modified.replace(tzinfo=timezone.utc)
        if last_modified is not None and last_modified > cutoff:
            report.too_recent += 1
            continue
        report.orphaned.append(obj.key)

    logger.info(
        f"Bucket has {report.total_objects} objects: {report.referenced} referenced, "
        f"{report.too_recent} newer than {older_than_hours}h, {len(report.orphaned)} orphaned"
    )

    if dry_run or not report.orphaned:
        return report

    result = await storage.delete_objects(report.orphaned)
    report.deleted = result.deleted
    report.errors = result.errors
    logger.info(f"Deleted {report.deleted} orphaned objects ({report.failed} failed)")
    return report
