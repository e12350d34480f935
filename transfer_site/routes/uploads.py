"""
File upload route.
Images can be pushed to the remote image host (Cloudinary); anything else, or
any remote failure, lands on local disk under the requested upload folder.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from transfer_site.routes.common import bad_request, server_error
from transfer_site.schemas import RemoteUrlUploadRequest, UploadResponse
from transfer_site.services.cloudinary_service import RemoteUploadError, upload_image
from transfer_site.services.storage import InvalidFolderError, normalize_folder, save_file
from transfer_site.utils.image_converter import convert_to_webp
from transfer_site.utils.rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_UPLOAD_BYTES = 20 * 1024 * 1024
ALLOWED_CONTENT_PREFIXES = ("image/", "video/")

REMOTE_URL_DEFAULTS = {
    "title": "Изображение из RoyalTransfer",
    "description": "Загружено через RoyalTransfer API",
    "tags": ["royaltransfer"],
}


async def _upload_remote(
    content: bytes,
    folder: str,
    title: Optional[str],
    description: Optional[str],
    tags: Optional[str],
) -> str:
    converted, is_webp = await asyncio.to_thread(convert_to_webp, content)
    if is_webp and len(converted) < len(content):
        content = converted
    result = await upload_image(content, folder=folder, title=title, description=description, tags=tags)
    return result["url"]


@router.post("/uploads", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["upload"])
async def upload_file(
    request: Request,
    file: UploadFile = File(...),
    folder: Optional[str] = Form(None),
    use_remote: bool = Form(False, alias="usePostImage"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
):
    """
    Store an uploaded file.

    Args:
        file: The file (image or video)
        folder: One of uploads/reviews, uploads/blog, uploads/gallery (default uploads/reviews)
        use_remote: Send images to the remote image host first (form field usePostImage)
        title, description, tags: Metadata passed to the remote host

    Returns:
        UploadResponse: Public URL and where the file was stored

    Raises:
        HTTPException: 400 for a bad folder, type or size; 500 if local storage fails
    """
    try:
        target_folder = normalize_folder(folder)
    except InvalidFolderError as e:
        raise bad_request("Invalid folder", str(e))

    content_type = file.content_type or ""
    if not content_type.startswith(ALLOWED_CONTENT_PREFIXES):
        raise bad_request("Invalid file type", f"File '{file.filename}' is not an image or video")

    content = await file.read()
    if not content:
        raise bad_request("Empty file", f"File '{file.filename}' is empty")
    if len(content) > MAX_UPLOAD_BYTES:
        raise bad_request("File too large", f"Maximum upload size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB")

    if use_remote and content_type.startswith("image/"):
        try:
            url = await _upload_remote(content, target_folder, title, description, tags)
            logger.info(f"Uploaded {file.filename} to remote host: {url}")
            return UploadResponse(url=url, storage="remote")
        except RemoteUploadError as e:
            logger.warning(f"Remote upload failed for {file.filename}, storing locally: {str(e)}")

    try:
        url = await asyncio.to_thread(save_file, content, file.filename, target_folder)
    except OSError as e:
        logger.error(f"Error saving upload {file.filename}: {str(e)}", exc_info=True)
        raise server_error("Failed to save file", e)

    return UploadResponse(url=url, storage="local")


@router.post("/uploads/remote-url", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["upload"])
async def upload_from_url(request: Request, payload: RemoteUrlUploadRequest):
    """
    Copy an image that already lives at a public URL to the remote image host.

    There is no local fallback: the image is never downloaded here.

    Raises:
        HTTPException: 400 for a missing or invalid imageUrl or folder; 500 if the remote host fails
    """
    try:
        target_folder = normalize_folder(payload.folder)
    except InvalidFolderError as e:
        raise bad_request("Invalid folder", str(e))

    tags = payload.tags or REMOTE_URL_DEFAULTS["tags"]
    try:
        result = await upload_image(
            payload.image_url,
            folder=target_folder,
            title=payload.title or REMOTE_URL_DEFAULTS["title"],
            description=payload.description or REMOTE_URL_DEFAULTS["description"],
            tags=",".join(tags),
        )
    except RemoteUploadError as e:
        logger.error(f"Remote upload from {payload.image_url} failed: {str(e)}")
        raise server_error("Failed to upload image from URL", e)

    logger.info(f"Uploaded {payload.image_url} to remote host: {result['url']}")
    return UploadResponse(url=result["url"], storage="remote")
