"""
S3 URL validation utilities.
Client-supplied image URLs are only trusted when they point at the
configured bucket and region (or the configured CDN domain in front of it).
"""
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlsplit

from app.exceptions import StorageNotConfiguredError

VIRTUAL_HOSTED_PATTERN = re.compile(r"^([^.]+)\.s3\.([^.]+)\.amazonaws\.com$")
PATH_STYLE_PATTERN = re.compile(r"^s3\.([^.]+)\.amazonaws\.com$")


@dataclass(frozen=True)
class S3UrlParts:
    bucket: str
    region: str
    key: str
    is_valid: bool = True


def _is_safe_key(key: Optional[str]) -> bool:
    return bool(key) and ".." not in key and not key.startswith("/")


def validate_and_parse_s3_url(
    url: str,
    bucket: str,
    region: str,
    public_domain: Optional[str] = None,
) -> Optional[S3UrlParts]:
    """
    Validate an S3 URL and extract its object key.

    Accepts virtual-hosted style (https://bucket.s3.region.amazonaws.com/key),
    path style (https://s3.region.amazonaws.com/bucket/key) and, when
    public_domain is set, https://public_domain/key.

    Args:
        url: URL supplied by the client
        bucket: Configured bucket name
        region: Configured AWS region
        public_domain: Optional CDN host serving the bucket

    Returns:
        S3UrlParts when the URL is trusted, None otherwise

    Raises:
        StorageNotConfiguredError: If bucket or region is not configured
    """
    if not bucket or not region:
        raise StorageNotConfiguredError("AWS S3 configuration is missing (AWS_S3_BUCKET or AWS_REGION)")

    if not url or not isinstance(url, str):
        return None

    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return None

    if parsed.scheme != "https" or not parsed.hostname:
        return None

    hostname = parsed.hostname.lower()
    path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path

    extracted_bucket = None
    extracted_region = None
    key = None

    virtual_match = VIRTUAL_HOSTED_PATTERN.match(hostname)
    path_match = PATH_STYLE_PATTERN.match(hostname)
    if virtual_match:
        extracted_bucket, extracted_region = virtual_match.group(1), virtual_match.group(2)
        key = path
    elif path_match:
        extracted_region = path_match.group(1)
        extracted_bucket, _, key = path.partition("/")
    elif public_domain and hostname == public_domain.lower():
        extracted_bucket, extracted_region = bucket, region
        key = path
    else:
        return None

    if extracted_bucket != bucket or extracted_region != region:
        return None

    key = unquote(key or "")
    if not _is_safe_key(key):
        return None

    return S3UrlParts(bucket=extracted_bucket, region=extracted_region, key=key, is_valid=True)
