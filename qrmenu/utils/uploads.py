# qrmenu/utils/uploads.py

import os
import uuid
from typing import Optional

from fastapi import UploadFile

from qrmenu.core.constants import ALLOWED_IMAGE_EXTS, ALLOWED_IMAGE_TYPES, MAX_UPLOAD_SIZE
from qrmenu.core.exceptions import InvalidUpload


def generate_safe_filename(original_filename: str) -> str:
    ext = os.path.splitext(original_filename or "")[1].lower()
    return f"{uuid.uuid4()}{ext}"


async def validate_and_read_image(file: UploadFile) -> bytes:
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTS or (file.content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise InvalidUpload("Only images allowed (jpeg, jpg, png, gif, webp).")

    contents = await file.read()
    if len(contents) > MAX_UPLOAD_SIZE:
        raise InvalidUpload("File too large (5MB max).")
    return contents


async def save_image(file: Optional[UploadFile], upload_root: str, kind: str) -> Optional[str]:
    """
    Validate and store an uploaded image under ``<upload_root>/<kind>/``.

    Returns the public path (``/uploads/<kind>/<file>``), or ``None`` when no
    file was sent.
    """
    if file is None or not file.filename:
        return None

    contents = await validate_and_read_image(file)
    target_dir = os.path.join(upload_root, kind)
    os.makedirs(target_dir, exist_ok=True)

    filename = generate_safe_filename(file.filename)
    with open(os.path.join(target_dir, filename), "wb") as f:
        f.write(contents)
    return f"/uploads/{kind}/{filename}"
