"""
Image conversion utility for converting uploads to WebP format.
Reduces file size before sending images to the remote image host.
"""
import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_WEBP_QUALITY = 85
DEFAULT_WEBP_METHOD = 6    # 0-6, higher = better compression but slower
MAX_DIMENSION = 2560       # Longest side allowed before downscaling


def convert_to_webp(
    image_bytes: bytes,
    quality: int = DEFAULT_WEBP_QUALITY,
    max_dimension: Optional[int] = MAX_DIMENSION,
) -> Tuple[bytes, bool]:
    """
    Convert image bytes to WebP.

    Args:
        image_bytes: Original image file bytes
        quality: WebP quality (0-100)
        max_dimension: Longest side after downscaling (None to disable)

    Returns:
        Tuple[bytes, bool]:
            - WebP bytes, or the original bytes if skipped/failed
            - True if the returned bytes are WebP
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))

        if image.format == "WEBP":
            return image_bytes, True

        if image.mode == "P":
            image = image.convert("RGBA")
        elif image.mode not in ("RGB", "RGBA", "LA"):
            image = image.convert("RGB")

        if max_dimension:
            width, height = image.size
            if width > max_dimension or height > max_dimension:
                image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
                logger.info(f"Downscaled image from {width}x{height} to {image.size[0]}x{image.size[1]}")

        buffer = io.BytesIO()
        image.save(buffer, format="WEBP", quality=quality, method=DEFAULT_WEBP_METHOD)
        webp_bytes = buffer.getvalue()

        logger.info(
            f"Converted image to WebP: {len(image_bytes):,} bytes -> {len(webp_bytes):,} bytes"
        )
        return webp_bytes, True

    except UnidentifiedImageError as e:
        logger.warning(f"Cannot identify image format: {str(e)}")
        return image_bytes, False

    except Exception as e:
        logger.error(f"Error converting image to WebP: {str(e)}", exc_info=True)
        return image_bytes, False
