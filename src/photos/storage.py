"""Local disk storage for uploaded photos.

Files live flat in ``settings.upload_dir`` under a random ``<uuid><ext>`` name and
are served back from ``/uploads``.
"""

import asyncio
import logging
import mimetypes
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from src.config.settings import settings
from src.photos.dtos import InvalidPhotoError, StoredFileDTO

logger = logging.getLogger(__name__)


def upload_path() -> Path:
    path = Path(settings.upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _extension(original_filename: str, content_type: str) -> str:
    suffix = Path(original_filename).suffix.lower()
    if suffix:
        return suffix
    return mimetypes.guess_extension(content_type) or ""


def _write_file(file_path: Path, content: bytes) -> None:
    with open(file_path, "wb") as f:
        f.write(content)


async def save_upload(file: UploadFile) -> StoredFileDTO:
    """
    Validate and write an uploaded image to the upload directory.

    Raises InvalidPhotoError for a disallowed content type, an empty file
    or one larger than ``max_upload_bytes``.
    """
    content_type = (file.content_type or "").lower()
    if content_type not in settings.allowed_image_types:
        raise InvalidPhotoError(
            f"Unsupported file type '{content_type or 'unknown'}'. "
            f"Allowed types: {', '.join(settings.allowed_image_types)}"
        )

    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise InvalidPhotoError(
            f"File too large. Maximum size is {settings.max_upload_bytes // (1024 * 1024)} MB"
        )
    if not content:
        raise InvalidPhotoError("Uploaded file is empty")

    original_filename = Path(file.filename or "photo").name
    filename = f"{uuid4()}{_extension(original_filename, content_type)}"
    file_path = upload_path() / filename
    await asyncio.to_thread(_write_file, file_path, content)

    logger.info("Stored upload %s (%d bytes)", filename, len(content))
    return StoredFileDTO(
        filename=filename,
        original_filename=original_filename,
        file_path=str(file_path),
        file_size=len(content),
        mime_type=content_type,
    )


def delete_stored_file(filename: str) -> None:
    file_path = Path(settings.upload_dir) / Path(filename).name
    try:
        file_path.unlink(missing_ok=True)
    except OSError:
        logger.exception("Could not remove uploaded file %s", file_path)
