"""
Image upload handling.

Uploads are read into memory with a size limit, checked by extension and
written to a staging directory before any database work starts. Once the
owning row exists the CRUD layer moves each staged file into its folder under
`UPLOAD_DIR` and stores the public relative path (`uploads/<folder>/<name>`).
"""

from __future__ import annotations

import logging
import secrets
import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile

from . import config

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

PROFILE_PICTURES = "profile_pictures"
PRODUCT_IMAGES = "product_images"
SHOP_IMAGES = "shop_images"

PUBLIC_PREFIX = "uploads"


@dataclass
class StagedFile:
    path: Path
    original_name: str
    size_bytes: int

    @property
    def extension(self) -> str:
        return Path(self.original_name).suffix.lower()

    def discard(self) -> None:
        self.path.unlink(missing_ok=True)


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_image(file: UploadFile) -> str:
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing filename.")

    ext = _file_ext(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported image type '{ext}'. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
        )

    content_type = (file.content_type or "").lower()
    if content_type and not content_type.startswith("image/") and content_type != "application/octet-stream":
        raise HTTPException(status_code=400, detail=f"'{file.filename}' is not an image.")
    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    chunk_size = 64 * 1024
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"'{file.filename}' is too large. Max is {max_bytes} bytes.",
            )

    return bytes(buf)


def _staging_dir() -> Path:
    path = Path(tempfile.gettempdir()) / "artisan-registry-uploads"
    path.mkdir(parents=True, exist_ok=True)
    return path


async def stage_upload(file: UploadFile, *, max_bytes: int | None = None) -> StagedFile:
    ext = validate_image(file)
    limit = max_bytes if max_bytes is not None else config.max_upload_bytes()
    data = await read_upload_bytes(file, max_bytes=limit)

    path = _staging_dir() / f"{secrets.token_hex(16)}{ext}"
    path.write_bytes(data)
    return StagedFile(path=path, original_name=file.filename or path.name, size_bytes=len(data))


async def stage_uploads(files: list[UploadFile] | None) -> list[StagedFile]:
    """
    Stage every upload, discarding the ones already written if one fails.
    """
    staged: list[StagedFile] = []
    try:
        for file in files or []:
            if not file.filename:
                continue
            staged.append(await stage_upload(file))
    except BaseException:
        discard_all(staged)
        raise
    return staged


def discard_all(files: list[StagedFile | None]) -> None:
    for staged in files:
        if staged is not None:
            staged.discard()


def _unique_name(prefix: str, ext: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def move_into_place(staged: StagedFile, folder: str, *, prefix: str) -> str:
    """
    Move a staged file into `UPLOAD_DIR/<folder>` and return its public path.
    """
    target_dir = Path(config.upload_dir()) / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = _unique_name(prefix, staged.extension)
    shutil.move(str(staged.path), str(target_dir / filename))
    logger.debug("Stored upload %s as %s/%s", staged.original_name, folder, filename)
    return f"{PUBLIC_PREFIX}/{folder}/{filename}"
