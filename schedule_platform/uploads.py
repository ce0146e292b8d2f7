"""Image upload storage on local disk.

Images are written under the configured upload directory with a generated
unique name and referenced from the database by their public URL,
``/uploads/<filename>``.
"""

import os
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from schedule_platform.errors import ValidationError
from schedule_platform.logging import logger

ALLOWED_EXTENSIONS = {"jpeg", "jpg", "png", "gif"}
ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}
URL_PREFIX = "/uploads/"


class ImageStore:
    """Saves and removes uploaded images.

    Args:
        upload_dir: Directory images are written to
        max_bytes: Largest accepted file size
    """

    def __init__(self, upload_dir: Path, max_bytes: int = 5 * 1024 * 1024):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def validate(self, image: UploadFile) -> str:
        """Check type of an upload and return its normalized extension."""
        filename = image.filename or ""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in ALLOWED_EXTENSIONS or (image.content_type or "").lower() not in ALLOWED_MIME_TYPES:
            raise ValidationError("Only image files (jpeg, jpg, png, gif) can be uploaded")
        return ext

    async def save(self, image: UploadFile) -> str:
        """Store an upload and return its public URL.

        Raises:
            ValidationError: If the file is not an allowed image or is too large
        """
        ext = self.validate(image)
        data = await image.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise ValidationError(f"Image must be {self.max_bytes // (1024 * 1024)}MB or smaller")

        filename = f"{uuid.uuid4().hex}.{ext}"
        with open(self.upload_dir / filename, "wb") as f:
            f.write(data)

        logger.info("Stored upload {} ({} bytes)", filename, len(data))
        return URL_PREFIX + filename

    def path_for(self, image_url: str) -> Optional[Path]:
        """Map a stored ``/uploads/...`` URL back to a file inside the upload dir."""
        if not image_url or not image_url.startswith(URL_PREFIX):
            return None
        name = os.path.basename(image_url[len(URL_PREFIX):])
        if not name:
            return None
        return self.upload_dir / name

    def delete(self, image_url: Optional[str]) -> bool:
        """Remove a stored image; a missing file is not an error."""
        path = self.path_for(image_url) if image_url else None
        if path is None or not path.exists():
            return False
        path.unlink()
        logger.info("Removed upload {}", path.name)
        return True
