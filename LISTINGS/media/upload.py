# file: LISTINGS/media/upload.py
import logging
import os
import time
import uuid
from typing import Optional

import aiofiles
from starlette.datastructures import UploadFile

from LISTINGS.core.config import UPLOAD_DIR, UPLOAD_URL_PREFIX

logger = logging.getLogger("media.upload")


def has_file(file: Optional[UploadFile]) -> bool:
    # browsers send an empty part when the file input is left blank
    return file is not None and bool(file.filename)


def is_image(file: UploadFile) -> bool:
    return (file.content_type or "").startswith("image/")


def stored_filename(original: str) -> str:
    """
    Build a collision-free name like 1718000000000-1a2b3c4d-my_photo.jpg
    """
    clean_filename = os.path.basename(original).replace(" ", "_")
    millis = int(time.time() * 1000)
    return f"{millis}-{uuid.uuid4().hex[:8]}-{clean_filename}"


async def save_upload(file: UploadFile, upload_dir: str = UPLOAD_DIR) -> str:
    """
    Write an uploaded file under the public upload directory and return
    the relative path stored on the listing, e.g. "uploads/<name>".
    """
    filename = stored_filename(file.filename)
    os.makedirs(upload_dir, exist_ok=True)

    file_path = os.path.join(upload_dir, filename)
    async with aiofiles.open(file_path, "wb") as out_file:
        while True:
            chunk = await file.read(1024 * 1024)
            if not chunk:
                break
            await out_file.write(chunk)

    logger.info("Saved upload %s (%s)", file_path, file.content_type)
    return f"{UPLOAD_URL_PREFIX}/{filename}"


def discard_upload(image_path: str, upload_dir: str = UPLOAD_DIR) -> None:
    """Remove a file written by save_upload whose listing was rejected."""
    file_path = os.path.join(upload_dir, os.path.basename(image_path))
    try:
        os.remove(file_path)
    except FileNotFoundError:
        logger.warning("Upload already gone: %s", file_path)
