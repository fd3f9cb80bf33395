import os
import re
import time
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
import structlog

from storefront.core.config import settings
from storefront.core.exceptions import UploadRejectedError

logger = structlog.get_logger()

IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif")

IMAGES_ONLY = "Error: Images Only!"
FILE_TOO_LARGE = "File too large"


def check_file_type(filename: str, content_type: Optional[str]) -> bool:
    """Both the lower-cased extension and the declared MIME type must name an image type."""
    extension = os.path.splitext(filename or "")[1].lower()
    return bool(IMAGE_TYPES.search(extension)) and bool(IMAGE_TYPES.search(content_type or ""))


class ImageStore:
    """Writes uploaded product images to a directory served as static files."""

    def __init__(self, directory: str, field_name: str, max_bytes: int):
        self.directory = directory
        self.field_name = field_name
        self.max_bytes = max_bytes

    def generate_name(self, original_filename: str) -> str:
        extension = os.path.splitext(original_filename)[1]
        return f"{self.field_name}-{int(time.time() * 1000)}{extension}"

    async def save(self, upload: UploadFile) -> str:
        """Check and persist an upload, returning the generated file name."""
        if not check_file_type(upload.filename, upload.content_type):
            logger.warning("Rejected upload type", filename=upload.filename, content_type=upload.content_type)
            raise UploadRejectedError(self.field_name, IMAGES_ONLY, upload.filename)

        data = await upload.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            logger.warning("Rejected oversized upload", filename=upload.filename, limit=self.max_bytes)
            raise UploadRejectedError(self.field_name, FILE_TOO_LARGE, upload.filename)

        name = self.generate_name(upload.filename)
        await run_in_threadpool(self._write, name, data)
        logger.info("Stored product image", img_name=name, size=len(data))
        return name

    async def discard(self, name: str) -> None:
        await run_in_threadpool(self._remove, name)
        logger.info("Discarded product image", img_name=name)

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, name)

    def _write(self, name: str, data: bytes) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(self.path_for(name), "wb") as f:
            f.write(data)

    def _remove(self, name: str) -> None:
        try:
            os.remove(self.path_for(name))
        except FileNotFoundError:
            pass


def get_image_store() -> ImageStore:
    """FastAPI dependency for the configured image store"""
    return ImageStore(
        directory=settings.upload_dir,
        field_name=settings.upload_field_name,
        max_bytes=settings.max_upload_bytes,
    )
