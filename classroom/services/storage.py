"""Local disk storage for task and submission attachments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from classroom.config.settings import settings
from classroom.exceptions import UploadRejected

logger = logging.getLogger(__name__)

_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
    "application/zip": "zip",
    "application/x-zip-compressed": "zip",
}


class StorageError(RuntimeError):
    """Raised when an attachment cannot be written to disk."""


@dataclass(frozen=True, slots=True)
class StoredUpload:
    """Attachment persisted under a random name."""

    filename: str
    url: str
    size: int


def upload_directory() -> Path:
    return Path(settings.uploads.directory)


def public_url(filename: str) -> str:
    return f"{settings.uploads.url_prefix.rstrip('/')}/{filename}"


def _max_size_label() -> str:
    return f"{settings.uploads.max_bytes // (1024 * 1024)}MB"


def resolve_extension(filename: str, content_type: Optional[str]) -> str:
    """Return the stored extension, accepting either the name or the MIME type."""

    allowed = {ext.lower() for ext in settings.uploads.allowed_extensions}
    suffix = Path(filename).suffix.lstrip(".").lower()
    if suffix in allowed:
        return suffix

    mime_extension = _MIME_EXTENSIONS.get((content_type or "").lower())
    if mime_extension in allowed:
        return mime_extension

    raise UploadRejected("Invalid file type")


async def save_upload(upload: Optional[UploadFile]) -> Optional[StoredUpload]:
    """Validate and buffer an upload to disk; ``None`` when no file was sent.

    The client-supplied filename only contributes its extension, so it can
    neither collide with nor escape the upload directory.
    """

    if upload is None or not upload.filename:
        return None

    limit = settings.uploads.max_bytes
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise UploadRejected(f"File size exceeds {_max_size_label()} limit")
    if not data:
        raise UploadRejected("Uploaded file is empty")

    extension = resolve_extension(upload.filename, upload.content_type)
    stored_name = f"{uuid4().hex}.{extension}"
    directory = upload_directory()
    try:
        await run_in_threadpool(directory.mkdir, parents=True, exist_ok=True)
        await run_in_threadpool((directory / stored_name).write_bytes, data)
    except OSError as exc:
        raise StorageError(f"Failed to store attachment: {exc}") from exc

    logger.info("Stored attachment %s (%d bytes)", stored_name, len(data))
    return StoredUpload(filename=stored_name, url=public_url(stored_name), size=len(data))


async def delete_upload(url: Optional[str]) -> None:
    """Remove a stored attachment referenced by its public URL."""

    if not url:
        return

    prefix = settings.uploads.url_prefix.rstrip("/") + "/"
    if not url.startswith(prefix):
        return

    name = Path(url[len(prefix):]).name
    target = upload_directory() / name
    try:
        await run_in_threadpool(target.unlink, missing_ok=True)
    except OSError:
        logger.warning("Could not remove attachment %s", target, exc_info=True)


__all__ = [
    "StorageError",
    "StoredUpload",
    "delete_upload",
    "public_url",
    "resolve_extension",
    "save_upload",
    "upload_directory",
]
