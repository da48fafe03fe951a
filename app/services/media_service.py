# app/services/media_service.py
import logging

from sqlmodel import Session

from app.core.storage_utils import MediaStorage, generate_filename
from app.models.media import Media
from app.models.product import Product
from app.repositories.media_repo import MediaRepository
from app.schemas.product import UploadedFile
from app.services.validation import IMAGE_CONTENT_TYPES, guess_image_type

logger = logging.getLogger(__name__)

IMAGES_COLLECTION = "images"


class MediaService:
    """
    Attach uploaded files to products.

    Responsibilities:
      - write file bytes to the storage backend
      - keep one Media row per stored file
      - clear a named collection (files + rows)
    """

    def __init__(self, storage: MediaStorage, repo: MediaRepository | None = None):
        self.storage = storage
        self.repo = repo or MediaRepository()

    @staticmethod
    def _object_path(product_id: int, collection: str, ext: str) -> str:
        """
        Path pattern:
            products/<product_id>/<collection>/<uuid>.<ext>
        """
        return f"products/{product_id}/{collection}/{generate_filename(ext)}"

    def attach(
        self,
        session: Session,
        product: Product,
        upload: UploadedFile,
        collection: str = IMAGES_COLLECTION,
    ) -> Media:
        ext = guess_image_type(upload.content) or upload.filename.rsplit(".", 1)[-1].lower()
        content_type = IMAGE_CONTENT_TYPES.get(ext, upload.content_type)
        path = self._object_path(product.id, collection, ext)

        url = self.storage.upload(path, upload.content, content_type)

        media = Media(
            product_id=product.id,
            collection_name=collection,
            file_name=upload.filename,
            mime_type=content_type,
            size=upload.size,
            path=path,
            url=url,
        )
        try:
            created = self.repo.create(session, media)
        except Exception:
            session.rollback()
            self.storage.delete(path)
            raise
        logger.info("Attached %s to product %s (%s)", path, product.id, collection)
        return created

    def clear_collection(
        self,
        session: Session,
        product: Product,
        collection: str = IMAGES_COLLECTION,
    ) -> int:
        """
        Remove every file of `collection` on the product.

        Returns the number of media items removed.
        """
        items = self.repo.list_for_product(session, product.id, collection)
        for item in items:
            self.storage.delete(item.path)
            self.repo.delete(session, item)
        if items:
            logger.info(
                "Cleared %d item(s) from %s on product %s",
                len(items),
                collection,
                product.id,
            )
        return len(items)

    def delete_all(self, session: Session, product: Product) -> None:
        """Remove every media item of the product, whatever its collection."""
        for item in self.repo.list_for_product(session, product.id):
            self.storage.delete(item.path)
            self.repo.delete(session, item)

    def list_items(
        self,
        session: Session,
        product: Product,
        collection: str = IMAGES_COLLECTION,
    ) -> list[Media]:
        return self.repo.list_for_product(session, product.id, collection)

    def first_url(
        self,
        session: Session,
        product: Product,
        collection: str = IMAGES_COLLECTION,
    ) -> str | None:
        items = self.list_items(session, product, collection)
        return items[0].url if items else None
