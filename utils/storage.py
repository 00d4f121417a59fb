import logging
import os
from pathlib import Path
from uuid import uuid4

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

MEDIA_ROOT = os.getenv("MEDIA_ROOT", "./media")
MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "/media")


def build_object_name(filename: str, folder: str = "menu") -> str:
    ext = (filename.rsplit(".", 1)[-1] if "." in filename else "bin").lower()
    return f"{folder}/{uuid4().hex}.{ext}"


class FileStorage:
    """Public file storage rooted at a local directory served under ``base_url``."""

    def __init__(self, root: str = MEDIA_ROOT, base_url: str = MEDIA_BASE_URL):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def upload(self, path: str, data: bytes) -> str:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise ValueError(f"Invalid storage path: {path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"Stored {len(data)} bytes at {path}")
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


def get_storage() -> FileStorage:
    return FileStorage()
