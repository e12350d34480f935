"""
Local disk storage for uploaded files.
Files land in <UPLOAD_ROOT>/<folder>/<uuid>.<ext> and are referenced by their
site-relative path.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

from transfer_site.config import settings

logger = logging.getLogger(__name__)

ALLOWED_FOLDERS = ("uploads/reviews", "uploads/blog", "uploads/gallery")
DEFAULT_FOLDER = "uploads/reviews"


class InvalidFolderError(ValueError):
    def __init__(self, folder: str):
        self.folder = folder
        super().__init__(
            f"Upload folder not allowed: {folder}. Allowed folders: {', '.join(ALLOWED_FOLDERS)}"
        )


def normalize_folder(folder: Optional[str]) -> str:
    """
    Resolve the requested folder against the allow-list.

    Raises:
        InvalidFolderError: If the folder is not one of ALLOWED_FOLDERS
    """
    cleaned = (folder or "").strip().strip("/")
    if not cleaned:
        return DEFAULT_FOLDER
    if cleaned not in ALLOWED_FOLDERS:
        raise InvalidFolderError(cleaned)
    return cleaned


def _extension(filename: Optional[str]) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext.isalnum():
            return ext
    return "jpg"


def save_file(content: bytes, filename: Optional[str], folder: str) -> str:
    """
    Write bytes to local storage under a fresh UUID name.

    Args:
        content: File bytes
        filename: Original filename (only its extension is kept)
        folder: Allowed folder (see normalize_folder)

    Returns:
        str: Public path, e.g. "/uploads/blog/<uuid>.jpg"
    """
    name = f"{uuid.uuid4()}.{_extension(filename)}"
    target_dir = Path(settings.UPLOAD_ROOT) / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / name).write_bytes(content)

    logger.info(f"Saved upload to {target_dir / name}")
    return f"/{folder}/{name}"
