"""
Public file storage for uploaded images.

Files live under `STORAGE_ROOT` (default `storage/public`) and are served by
the app at `/storage/<path>`. Rows only store the relative path, e.g.
`categories/Xy3...q.png`.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Iterable

import aiofiles
from fastapi import UploadFile

from . import config
from .errors import ValidationFailed

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})

# Leading bytes of each accepted format, mapped to the extensions it may carry.
IMAGE_SIGNATURES: tuple[tuple[bytes, frozenset[str]], ...] = (
    (b"\x89PNG\r\n\x1a\n", frozenset({".png"})),
    (b"\xff\xd8\xff", frozenset({".jpg", ".jpeg"})),
    (b"GIF87a", frozenset({".gif"})),
    (b"GIF89a", frozenset({".gif"})),
    (b"BM", frozenset({".bmp"})),
)

PUBLIC_PREFIX = "/storage"

logger = logging.getLogger(__name__)


def has_upload(file: UploadFile | None) -> bool:
    return file is not None and bool(file.filename)


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def sniff_image(data: bytes) -> frozenset[str]:
    """
    Extensions matching the file's actual content; empty when it is not an
    accepted image format.
    """
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return frozenset({".webp"})
    for signature, extensions in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return extensions
    return frozenset()


def check_image_content(
    data: bytes,
    *,
    allowed_extensions: Iterable[str] = IMAGE_EXTENSIONS,
    field: str = "image",
) -> None:
    allowed = frozenset(allowed_extensions)
    detected = sniff_image(data)
    if not detected:
        raise ValidationFailed.single(field, f"The {field} must be an image.")
    if not detected & allowed:
        names = ", ".join(sorted(e.lstrip(".") for e in allowed))
        raise ValidationFailed.single(field, f"The {field} must be a file of type: {names}.")


def validate_image(
    file: UploadFile,
    *,
    allowed_extensions: Iterable[str] = IMAGE_EXTENSIONS,
    field: str = "image",
) -> str:
    """
    Return the normalized extension if the upload looks like an accepted image.
    """
    allowed = frozenset(allowed_extensions)
    ext = _file_ext(file.filename or "")
    content_type = (file.content_type or "").lower()

    if content_type and not content_type.startswith("image/"):
        raise ValidationFailed.single(field, f"The {field} must be an image.")

    if ext not in allowed:
        names = ", ".join(sorted(e.lstrip(".") for e in allowed))
        raise ValidationFailed.single(field, f"The {field} must be a file of type: {names}.")

    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int, *, field: str = "image") -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 256 * 1024
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            limit_kb = max_bytes // 1024
            raise ValidationFailed.single(
                field,
                f"The {field} must not be greater than {limit_kb} kilobytes.",
            )

    if not buf:
        raise ValidationFailed.single(field, f"The {field} failed to upload.")

    return bytes(buf)


def resolve(path: str) -> Path:
    root = config.storage_root().resolve()
    target = (root / path).resolve()
    if root != target and root not in target.parents:
        raise ValueError(f"Path escapes storage root: {path}")
    return target


async def store_image(
    file: UploadFile,
    folder: str,
    *,
    allowed_extensions: Iterable[str] = IMAGE_EXTENSIONS,
    field: str = "image",
) -> str:
    """
    Validate, size-check and persist an uploaded image.

    Returns the stored path relative to the storage root.
    """
    ext = validate_image(file, allowed_extensions=allowed_extensions, field=field)
    data = await read_upload_bytes(file, config.max_image_bytes(), field=field)
    check_image_content(data, allowed_extensions=allowed_extensions, field=field)

    relative = f"{folder}/{secrets.token_urlsafe(30)}{ext}"
    target = resolve(relative)
    target.parent.mkdir(parents=True, exist_ok=True)

    async with aiofiles.open(target, mode="wb") as f:
        await f.write(data)

    logger.info("image_stored path=%s bytes=%s", relative, len(data))
    return relative


def delete_file(path: str | None) -> bool:
    """
    Remove a stored file. Missing files are not an error.
    """
    if not path:
        return False
    try:
        target = resolve(path)
    except ValueError:
        logger.warning("image_delete_rejected path=%s", path)
        return False
    if not target.is_file():
        return False
    target.unlink()
    logger.info("image_deleted path=%s", path)
    return True


def delete_files(paths: Iterable[str | None]) -> int:
    removed = 0
    for path in paths:
        try:
            if delete_file(path):
                removed += 1
        except OSError:
            # The rows are already gone; a leftover file is logged, not raised.
            logger.exception("image_delete_failed path=%s", path)
    return removed


def public_url(path: str) -> str:
    return f"{config.app_url()}{PUBLIC_PREFIX}/{path.lstrip('/')}"
