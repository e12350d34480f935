"""
Cloudinary service: the remote image host behind the upload endpoint.
Uploads are retried with exponential backoff on Cloudinary errors.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from transfer_site.config import settings

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True
)


class RemoteUploadError(Exception):
    """Raised when the remote image host cannot store the file."""


async def upload_image(
    file: Any,
    folder: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    tags: Optional[str] = None,
    max_retries: int = 3
) -> Dict[str, Any]:
    """
    Upload an image to Cloudinary.

    Args:
        file: Bytes, file object or path
        folder: Cloudinary folder (mirrors the local upload folder)
        title: Optional caption stored as context metadata
        description: Optional alt text stored as context metadata
        tags: Optional comma separated tags
        max_retries: Attempts before giving up

    Returns:
        dict: url, public_id, format, width, height, bytes

    Raises:
        RemoteUploadError: If Cloudinary is not configured or all attempts fail
    """
    if not validate_cloudinary_config():
        raise RemoteUploadError("Cloudinary credentials are not configured")

    context = {}
    if title:
        context["caption"] = title
    if description:
        context["alt"] = description

    for attempt in range(max_retries):
        try:
            # The SDK is blocking; keep it off the event loop
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                file,
                folder=folder,
                context=context or None,
                tags=tags.split(",") if tags else None,
                fetch_format="auto",
                quality="auto",
                transformation=[{"width": 1920, "height": 1080, "crop": "limit"}],
            )

            logger.info(f"Successfully uploaded image: {result['public_id']}")

            return {
                "url": result["secure_url"],
                "public_id": result["public_id"],
                "format": result.get("format"),
                "width": result.get("width"),
                "height": result.get("height"),
                "bytes": result.get("bytes"),
            }

        except CloudinaryError as e:
            logger.warning(f"Cloudinary upload error (attempt {attempt + 1}/{max_retries}): {str(e)}")

            if attempt < max_retries - 1:
                await asyncio.sleep(2 ** attempt)  # 1s, 2s backoff
                continue

            raise RemoteUploadError(f"Cloudinary upload failed after {max_retries} attempts: {str(e)}") from e


def validate_cloudinary_config() -> bool:
    """
    Validate that Cloudinary is properly configured.

    Returns:
        bool: True if all credentials are present
    """
    for name in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
        if not getattr(settings, name):
            logger.warning(f"{name} not configured")
            return False
    return True
