import pytest

from app.exceptions import StorageNotConfiguredError
from app.utils.s3_validation import validate_and_parse_s3_url

BUCKET = "banderas-media"
REGION = "us-east-1"


def key_of(url, public_domain=None):
    parts = validate_and_parse_s3_url(url, BUCKET, REGION, public_domain)
    return parts.key if parts else None


def test_virtual_hosted_url_is_trusted():
    parts = validate_and_parse_s3_url(
        "https://banderas-media.s3.us-east-1.amazonaws.com/shields/escudo.jpg", BUCKET, REGION
    )

    assert parts is not None
    assert parts.bucket == BUCKET
    assert parts.region == REGION
    assert parts.key == "shields/escudo.jpg"


def test_path_style_url_is_trusted():
    key = key_of("https://s3.us-east-1.amazonaws.com/banderas-media/gallery/a.png")

    assert key == "gallery/a.png"


def test_cdn_url_is_trusted_only_when_configured():
    url = "https://cdn.example.org/leadership/2024.jpg"

    assert key_of(url) is None
    assert key_of(url, public_domain="cdn.example.org") == "leadership/2024.jpg"


def test_percent_encoded_key_is_decoded():
    key = key_of("https://banderas-media.s3.us-east-1.amazonaws.com/gallery/desfile%20patrio.jpg")

    assert key == "gallery/desfile patrio.jpg"


@pytest.mark.parametrize(
    "url",
    [
        "http://banderas-media.s3.us-east-1.amazonaws.com/shields/a.jpg",  # not https
        "https://other-bucket.s3.us-east-1.amazonaws.com/shields/a.jpg",  # wrong bucket
        "https://banderas-media.s3.eu-west-1.amazonaws.com/shields/a.jpg",  # wrong region
        "https://s3.us-east-1.amazonaws.com/other-bucket/a.jpg",  # wrong bucket, path style
        "https://evil.example.com/banderas-media/a.jpg",  # foreign host
        "https://banderas-media.s3.us-east-1.amazonaws.com/",  # empty key
        "https://banderas-media.s3.us-east-1.amazonaws.com/shields/../secrets.txt",  # traversal
        "https://banderas-media.s3.us-east-1.amazonaws.com/%2Fetc/passwd",  # leading slash after decoding
        "/public/local.jpg",  # relative path
        "",
    ],
)
def test_untrusted_urls_are_rejected(url):
    assert validate_and_parse_s3_url(url, BUCKET, REGION) is None


def test_missing_configuration_raises():
    with pytest.raises(StorageNotConfiguredError):
        validate_and_parse_s3_url("https://banderas-media.s3.us-east-1.amazonaws.com/a.jpg", "", REGION)
