#!/usr/bin/env python3
"""
Apply the bucket settings the CMS relies on.

--cors    lets browsers PUT directly to presigned upload URLs
--public  makes uploaded objects readable by anyone (public site images)

Usage:
    python configure_s3_bucket.py --cors --public
"""
import argparse
import asyncio
import sys

from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.services.s3_storage_service import create_s3_storage_service


async def run(cors: bool, public: bool) -> int:
    storage = create_s3_storage_service(settings)
    if not storage.is_configured:
        print("❌ AWS_S3_BUCKET and AWS_REGION must be set")
        return 1

    print(f"Configuring bucket {storage.bucket} ({storage.region})")
    try:
        if cors:
            await storage.put_cors_configuration()
            print("✅ CORS configuration applied")
        if public:
            await storage.put_public_read_policy()
            print("✅ Public read policy applied")
    except (ClientError, BotoCoreError) as e:
        print(f"❌ Failed to configure bucket: {str(e)}")
        return 1
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Configure the CMS S3 bucket")
    parser.add_argument("--cors", action="store_true", help="Apply the browser upload CORS rules")
    parser.add_argument("--public", action="store_true", help="Allow anonymous reads of bucket objects")
    args = parser.parse_args()

    if not (args.cors or args.public):
        parser.error("choose at least one of --cors / --public")
    return asyncio.run(run(args.cors, args.public))


if __name__ == "__main__":
    sys.exit(main())
