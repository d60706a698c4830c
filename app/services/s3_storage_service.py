"""
S3 storage service for presigned uploads, direct writes and deletions.
Provides the object-storage side of every image-bearing resource.
"""
import asyncio
import json
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.exceptions import StorageNotConfiguredError
from app.utils.s3_validation import S3UrlParts, validate_and_parse_s3_url

logger = logging.getLogger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_SIZE = 1000

EXTENSION_BY_MIME = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "image/x-icon": ".ico",
    "image/vnd.microsoft.icon": ".ico",
    "image/avif": ".avif",
}

# Browser PUT uploads against presigned URLs need this rule on the bucket
BUCKET_CORS_RULES = [
    {
        "AllowedHeaders": ["*"],
        "AllowedMethods": ["GET", "PUT", "POST", "DELETE", "HEAD"],
        "AllowedOrigins": ["*"],
        "ExposeHeaders": ["ETag"],
        "MaxAgeSeconds": 3000,
    }
]


@dataclass
class PresignedUpload:
    upload_url: str
    file_key: str
    public_url: str


@dataclass
class StoredObject:
    key: str
    size: int
    last_modified: Any


@dataclass
class BatchDeleteResult:
    deleted: int
    errors: List[Dict[str, str]]


class S3StorageService:
    """
    Thin wrapper around a boto3 S3 client bound to one bucket.

    The client is created lazily so the service can be constructed without
    credentials (e.g. when the local storage backend is in use).
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        public_domain: Optional[str] = None,
        max_retries: int = 3,
    ):
        self.bucket = bucket
        self.region = region
        self.public_domain = public_domain.strip().rstrip("/") if public_domain else None
        self.max_retries = max_retries
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.bucket and self.region)

    def _require_config(self) -> None:
        if not self.is_configured:
            raise StorageNotConfiguredError()

    def _get_client(self):
        """Lazy initialization of the S3 client"""
        if self._client is None:
            self._require_config()
            client_kwargs = {
                "region_name": self.region,
                "config": Config(signature_version="s3v4"),
            }
            if self._access_key_id and self._secret_access_key:
                client_kwargs["aws_access_key_id"] = self._access_key_id
                client_kwargs["aws_secret_access_key"] = self._secret_access_key
            else:
                # Fall back to the default credential chain (env, profile, IAM role)
                logger.info("S3 client using default credential chain")
            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    async def _run(self, func, *args, **kwargs):
        # boto3 is blocking; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    # --- URLs ---

    def get_public_url(self, key: str) -> str:
        if self.public_domain:
            return f"https://{self.public_domain}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def parse_trusted_url(self, url: str) -> Optional[S3UrlParts]:
        """Validate a client-supplied URL against this bucket; None if untrusted."""
        return validate_and_parse_s3_url(url, self.bucket, self.region, self.public_domain)

    @staticmethod
    def extension_for(file_type: str) -> str:
        return EXTENSION_BY_MIME.get(file_type.lower()) or mimetypes.guess_extension(file_type) or ".jpg"

    def generate_presigned_upload_url(
        self,
        file_type: str,
        folder: str = "uploads",
        expires_in: int = 300,
    ) -> PresignedUpload:
        """
        Issue a presigned PUT URL for a browser-direct upload.

        Args:
            file_type: MIME type the client will upload (Content-Type must match)
            folder: Key prefix
            expires_in: URL lifetime in seconds

        Returns:
            PresignedUpload with the signed URL, the object key and its public URL
        """
        client = self._get_client()
        file_key = f"{folder}/{uuid.uuid4()}{self.extension_for(file_type)}"

        upload_url = client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.bucket,
                "Key": file_key,
                "ContentType": file_type,
                "ACL": "public-read",
            },
            ExpiresIn=expires_in,
        )
        logger.info(f"Issued presigned upload URL for {file_key} (expires in {expires_in}s)")

        return PresignedUpload(
            upload_url=upload_url,
            file_key=file_key,
            public_url=self.get_public_url(file_key),
        )

    def generate_presigned_download_url(self, key: str, expires_in: int = 3600) -> str:
        client = self._get_client()
        return client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    # --- Objects ---

    async def upload_bytes(self, key: str, data: bytes, content_type: str) -> str:
        """
        Write an object with public-read ACL, retrying transient failures.

        Returns:
            str: Public URL of the stored object

        Raises:
            ClientError: If the upload fails after all retries
        """
        client = self._get_client()

        for attempt in range(self.max_retries):
            try:
                await self._run(
                    client.put_object,
                    Bucket=self.bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                    ACL="public-read",
                )
                logger.info(f"Uploaded {len(data):,} bytes to s3://{self.bucket}/{key}")
                return self.get_public_url(key)

            except (ClientError, BotoCoreError) as e:
                logger.warning(f"S3 upload error (attempt {attempt + 1}/{self.max_retries}) for {key}: {str(e)}")

                if attempt < self.max_retries - 1:
                    await asyncio.sleep(2 ** attempt)  # 1s, 2s, 4s backoff
                    continue

                logger.error(f"S3 upload failed after {self.max_retries} attempts for {key}: {str(e)}")
                raise

    async def delete_file(self, key: str) -> None:
        """
        Delete a single object.

        Raises:
            ClientError: If S3 rejects the request
        """
        client = self._get_client()
        await self._run(client.delete_object, Bucket=self.bucket, Key=key)
        logger.info(f"Deleted s3://{self.bucket}/{key}")

    async def list_objects(self, prefix: str = "") -> List[StoredObject]:
        """List every object in the bucket (optionally under a prefix)."""
        client = self._get_client()

        def _list() -> List[StoredObject]:
            objects = []
            paginator = client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    objects.append(
                        StoredObject(key=obj["Key"], size=obj.get("Size", 0), last_modified=obj.get("LastModified"))
                    )
            return objects

        return await self._run(_list)

    async def delete_objects(self, keys: List[str]) -> BatchDeleteResult:
        """Delete many objects in batches; per-key failures are collected, not raised."""
        client = self._get_client()
        deleted = 0
        errors: List[Dict[str, str]] = []

        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            try:
                response = await self._run(
                    client.delete_objects,
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": False},
                )
            except (ClientError, BotoCoreError) as e:
                logger.error(f"Batch delete failed for {len(batch)} objects: {str(e)}", exc_info=True)
                errors.extend({"key": key, "error": str(e)} for key in batch)
                continue

            deleted += len(response.get("Deleted", []))
            for err in response.get("Errors", []):
                errors.append({"key": err.get("Key", ""), "error": err.get("Message", "Unknown error")})

        return BatchDeleteResult(deleted=deleted, errors=errors)

    # --- Bucket configuration ---

    async def put_cors_configuration(self) -> None:
        client = self._get_client()
        await self._run(
            client.put_bucket_cors,
            Bucket=self.bucket,
            CORSConfiguration={"CORSRules": BUCKET_CORS_RULES},
        )
        logger.info(f"Applied CORS configuration to bucket {self.bucket}")

    async def put_public_read_policy(self) -> None:
        """Disable the public access block and allow anonymous GetObject."""
        client = self._get_client()
        await self._run(
            client.put_public_access_block,
            Bucket=self.bucket,
            PublicAccessBlockConfiguration={
                "BlockPublicAcls": False,
                "IgnorePublicAcls": False,
                "BlockPublicPolicy": False,
                "RestrictPublicBuckets": False,
            },
        )
        policy = {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Sid": "PublicReadGetObject",
                    "Effect": "Allow",
                    "Principal": "*",
                    "Action": "s3:GetObject",
                    "Resource": f"arn:aws:s3:::{self.bucket}/*",
                }
            ],
        }
        await self._run(client.put_bucket_policy, Bucket=self.bucket, Policy=json.dumps(policy))
        logger.info(f"Applied public-read policy to bucket {self.bucket}")

    async def check_connection(self) -> Dict[str, Any]:
        """Used by the storage health endpoint."""
        client = self._get_client()
        await self._run(client.head_bucket, Bucket=self.bucket)
        return {"bucket": self.bucket, "region": self.region}


def create_s3_storage_service(settings) -> S3StorageService:
    return S3StorageService(
        bucket=settings.AWS_S3_BUCKET,
        region=settings.AWS_REGION,
        access_key_id=settings.AWS_ACCESS_KEY_ID,
        secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        public_domain=settings.CLOUDFRONT_DOMAIN,
    )
