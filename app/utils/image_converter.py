"""
Image conversion utility.
Re-encodes uploads as progressive JPEG and builds cover-cropped thumbnails
before they are written to storage.
"""
import io
import logging
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_WIDTH = 1920
MAX_HEIGHT = 1080
DEFAULT_JPEG_QUALITY = 85
THUMBNAIL_SIZE = (300, 300)
THUMBNAIL_QUALITY = 80
# Upper bound on decoded size; checked from the header before pixel data is read
MAX_IMAGE_PIXELS = 40_000_000


class InvalidImageError(ValueError):
    """Bytes could not be decoded as an image"""


def _open(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(image_bytes))
    except Image.DecompressionBombError as e:
        raise InvalidImageError(f"Image dimensions too large: {str(e)}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError(f"Cannot identify image format: {str(e)}") from e

    width, height = image.size
    if width * height > MAX_IMAGE_PIXELS:
        raise InvalidImageError(
            f"Image dimensions too large: {width}x{height} exceeds {MAX_IMAGE_PIXELS:,} pixels"
        )

    try:
        image.load()
    except OSError as e:
        raise InvalidImageError(f"Cannot decode image: {str(e)}") from e

    # Respect camera orientation before resizing
    image = ImageOps.exif_transpose(image)

    # JPEG has no alpha channel; flatten transparency onto white
    if image.mode in ("RGBA", "LA", "P"):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def _save_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, progressive=True, optimize=True)
    return buffer.getvalue()


async def optimize_image(
    image_bytes: bytes,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Fit an image inside max_width x max_height (never enlarging) and
    re-encode it as progressive JPEG.

    Args:
        image_bytes: Original file bytes
        max_width: Maximum output width
        max_height: Maximum output height
        quality: JPEG quality (0-100)

    Returns:
        bytes: JPEG bytes

    Raises:
        InvalidImageError: If the bytes are not a decodable image
    """
    image = _open(image_bytes)
    width, height = image.size

    if width > max_width or height > max_height:
        image.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
        logger.info(f"Downscaled image from {width}x{height} to {image.size[0]}x{image.size[1]}")

    optimized = _save_jpeg(image, quality)
    logger.info(
        f"Optimized image: {len(image_bytes):,} bytes -> {len(optimized):,} bytes (quality={quality})"
    )
    return optimized


async def create_thumbnail(
    image_bytes: bytes,
    size: Tuple[int, int] = THUMBNAIL_SIZE,
    quality: int = THUMBNAIL_QUALITY,
) -> bytes:
    """Center-crop to cover `size` exactly and encode as JPEG."""
    image = _open(image_bytes)
    thumbnail = ImageOps.fit(image, size, Image.Resampling.LANCZOS)
    return _save_jpeg(thumbnail, quality)
