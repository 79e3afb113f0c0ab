from __future__ import annotations

import logging
import re
import secrets
import time
import unicodedata
from pathlib import Path

import anyio
from fastapi import UploadFile

from app.core.config import settings
from app.core.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
PUBLIC_PREFIX = "/uploads/"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_SAFE_EXT = re.compile(r"^\.[a-z0-9]{1,10}$")


def uploads_path() -> Path:
    path = Path(settings.uploads_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def build_filename(original: str | None) -> str:
    """``Mi Foto.JPG`` -> ``mi-foto-1700000000000-123456789.jpg`` style names."""

    name = Path(original or "").name
    ext = Path(name).suffix.lower()
    if not _SAFE_EXT.match(ext):
        ext = ""

    stem = unicodedata.normalize("NFD", Path(name).stem)
    stem = "".join(ch for ch in stem if not unicodedata.combining(ch))
    stem = _UNSAFE_CHARS.sub("", stem.replace(" ", "-")).lower()

    unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{stem or 'photo'}-{unique}{ext}"


async def save_image(upload: UploadFile) -> str:
    """Store an uploaded image and return its public URL."""

    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed", field="photo")

    data = await upload.read(MAX_UPLOAD_BYTES + 1)
    if not data:
        raise ValidationError("The uploaded file is empty", field="photo")
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError("The uploaded file exceeds 5 MB", field="photo")

    filename = build_filename(upload.filename)
    await anyio.to_thread.run_sync((uploads_path() / filename).write_bytes, data)
    logger.info("Stored upload %s (%s bytes)", filename, len(data))
    return f"{PUBLIC_PREFIX}{filename}"


def remove_stored_file(url: str | None) -> bool:
    """Delete the local file behind a public URL; returns whether a file was removed."""

    if not url or not url.startswith(PUBLIC_PREFIX):
        return False

    path = uploads_path() / Path(url).name
    try:
        if path.exists():
            path.unlink()
            return True
    except OSError:
        logger.exception("Could not delete stored file %s", path)
    return False
