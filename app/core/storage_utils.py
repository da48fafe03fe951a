# app/core/storage_utils.py
import logging
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when a storage backend fails to write or remove an object."""


class MediaStorage(Protocol):
    """
    Minimal object storage interface used by the media service.

    Paths are relative object keys such as
    "products/12/images/<uuid>.png".
    """

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> str:
        """Store bytes at `path` and return the public URL."""
        ...

    def delete(self, path: str) -> None:
        """Remove the object at `path`. Missing objects are ignored."""
        ...


class LocalStorage:
    """
    Filesystem storage rooted at MEDIA_ROOT.

    Files are served by the app itself (StaticFiles mounted at MEDIA_URL),
    so the public URL is just MEDIA_URL + path.
    """

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Refusing to touch path outside media root: {path}")
        return target

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file_bytes)
        except OSError as exc:
            raise StorageError(f"Could not write {path}") from exc
        return f"{self.base_url}/{path}"

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {path}") from exc


class SupabaseStorage:
    """
    Supabase Storage bucket accessed with the service-role client.

    If a file already exists at a path, it is overwritten thanks to the
    'upsert' option.
    """

    def __init__(self, bucket: str):
        self.bucket = bucket

    @property
    def _bucket(self):
        # Imported lazily so the local backend never needs Supabase settings.
        from app.core.supabase_client import supabase_admin

        return supabase_admin().storage.from_(self.bucket)

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> str:
        try:
            self._bucket.upload(
                path,
                file_bytes,
                {"upsert": "true", "content-type": content_type},
            )
        except Exception as exc:
            raise StorageError(f"Upload to bucket {self.bucket} failed: {path}") from exc
        return self._bucket.get_public_url(path)

    def delete(self, path: str) -> None:
        # Supabase Python client expects a list of paths.
        try:
            self._bucket.remove([path])
        except Exception as exc:
            raise StorageError(f"Removal from bucket {self.bucket} failed: {path}") from exc


@lru_cache
def get_storage() -> MediaStorage:
    """
    Storage backend selected by STORAGE_BACKEND ("local" or "supabase").
    """
    settings = get_settings()
    if settings.STORAGE_BACKEND == "supabase":
        logger.info("Using Supabase storage bucket %r", settings.STORAGE_BUCKET)
        return SupabaseStorage(settings.STORAGE_BUCKET)
    logger.info("Using local media storage at %s", settings.MEDIA_ROOT)
    return LocalStorage(settings.MEDIA_ROOT, settings.MEDIA_URL)


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"
