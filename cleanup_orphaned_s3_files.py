#!/usr/bin/env python3
"""
Delete S3 objects that no CMS record references.

Usage:
    python cleanup_orphaned_s3_files.py --dry-run
    python cleanup_orphaned_s3_files.py --older-than-hours 48
"""
import argparse
import asyncio
import logging
import sys

from app.config import settings
from app.database import AsyncSessionLocal, close_db
from app.maintenance.orphan_cleanup import cleanup_orphaned_files
from app.services.s3_storage_service import create_s3_storage_service


async def run(older_than_hours: int, dry_run: bool) -> int:
    storage = create_s3_storage_service(settings)
    if not storage.is_configured:
        print("❌ AWS_S3_BUCKET and AWS_REGION must be set")
        return 1

    try:
        async with AsyncSessionLocal() as session:
            report = await cleanup_orphaned_files(session, storage, older_than_hours, dry_run)
    finally:
        await close_db()

    print("=" * 60)
    print(f"Bucket: {settings.AWS_S3_BUCKET}")
    print(f"Objects in bucket:     {report.total_objects}")
    print(f"Referenced:            {report.referenced}")
    print(f"Newer than {older_than_hours}h:        {report.too_recent}")
    print(f"Orphaned:              {len(report.orphaned)}")

    if dry_run:
        for key in report.orphaned:
            print(f"  would delete: {key}")
        print("\nDry run: nothing was deleted")
        return 0

    print(f"Deleted:               {report.deleted}")
    for error in report.errors:
        print(f"  ❌ {error.get('key')}: {error.get('error')}")
    return 1 if report.errors else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Remove unreferenced objects from the S3 bucket")
    parser.add_argument("--older-than-hours", type=int, default=24, help="Grace period for fresh uploads (default 24)")
    parser.add_argument("--dry-run", action="store_true", help="List orphaned objects without deleting them")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    return asyncio.run(run(args.older_than_hours, args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
