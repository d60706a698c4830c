#!/usr/bin/env python3
"""
Upload images stored on local disk to S3 and rewrite their database URLs.

Usage:
    python migrate_local_images_to_s3.py --uploads-dir uploads --dry-run
    python migrate_local_images_to_s3.py --uploads-dir public
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from app.config import settings
from app.database import AsyncSessionLocal, close_db
from app.maintenance.local_migration import migrate_local_images
from app.services.s3_storage_service import create_s3_storage_service


async def run(uploads_dir: Path, dry_run: bool) -> int:
    storage = create_s3_storage_service(settings)
    if not storage.is_configured:
        print("❌ AWS_S3_BUCKET and AWS_REGION must be set")
        return 1
    if not uploads_dir.is_dir():
        print(f"❌ Uploads directory not found: {uploads_dir}")
        return 1

    try:
        async with AsyncSessionLocal() as session:
            results = await migrate_local_images(session, storage, uploads_dir, dry_run)
    finally:
        await close_db()

    failed = 0
    print("=" * 60)
    for label, counts in results.items():
        if dry_run:
            print(f"{label}: {len(counts.planned)} to migrate, {counts.skipped} skipped, {counts.missing} missing")
        else:
            print(f"{label}: {counts.migrated} migrated, {counts.skipped} skipped, "
                  f"{counts.missing} missing, {counts.failed} failed")
        failed += counts.failed

    if dry_run:
        print("\nDry run: nothing was uploaded")
    return 1 if failed else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Migrate locally stored images to S3")
    parser.add_argument("--uploads-dir", default=settings.LOCAL_UPLOAD_DIR, help="Directory holding the local files")
    parser.add_argument("--dry-run", action="store_true", help="Report what would be migrated")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    return asyncio.run(run(Path(args.uploads_dir), args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
