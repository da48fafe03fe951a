# app/services/product_service.py
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from sqlmodel import Session

from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductDetail, ProductPage, ProductRead, UploadedFile
from app.services.media_service import IMAGES_COLLECTION, MediaService
from app.services.outcomes import NotFound, ValidationFailed
from app.services.validation import (
    CREATE_RULES,
    UPDATE_RULES,
    ValidationContext,
    to_payload,
    validate,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 9


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - slug generation & uniqueness
      - validation of submitted form fields (rule tables)
      - persistence through ProductRepository
      - image attach / replace through MediaService

    Expected failures come back as ValidationFailed / NotFound values.
    Database and storage errors are left to propagate.
    """

    def __init__(
        self,
        repo: ProductRepository,
        media: MediaService,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.repo = repo
        self.media = media
        self.page_size = page_size

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while self.repo.get_by_slug(session, slug) is not None:
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    def _name_taken(self, session: Session, exclude_id: int | None = None) -> ValidationContext:
        def is_taken(field: str, value: Any) -> bool:
            return self.repo.name_exists(session, value, exclude_id=exclude_id)

        return ValidationContext(is_taken)

    def to_detail(self, session: Session, product: Product) -> ProductDetail:
        detail = ProductDetail.model_validate(product)
        return detail.model_copy(
            update={"image": self.media.first_url(session, product, IMAGES_COLLECTION)}
        )

    # ----- Listing -----

    def list_products(self, session: Session) -> list[ProductRead]:
        return [ProductRead.model_validate(p) for p in self.repo.list_all(session)]

    def paginate_published(self, session: Session, page: int = 1, path: str = "") -> ProductPage:
        """
        Published products only, `page_size` per page, ordered by id.

        Pages past the end are valid and simply empty.
        """
        page = max(page, 1)
        total = self.repo.count_published(session)
        skip = (page - 1) * self.page_size
        items = self.repo.list_published(session, skip=skip, limit=self.page_size)
        last_page = max(math.ceil(total / self.page_size), 1)

        return ProductPage(
            current_page=page,
            data=[ProductRead.model_validate(p) for p in items],
            per_page=self.page_size,
            total=total,
            last_page=last_page,
            from_=skip + 1 if items else None,
            to=skip + len(items) if items else None,
            path=path,
            next_page_url=f"{path}?page={page + 1}" if page < last_page else None,
            prev_page_url=f"{path}?page={page - 1}" if page > 1 else None,
        )

    # ----- CRUD -----

    def get_product(self, session: Session, slug_or_id: str) -> Product | NotFound:
        product = self.repo.find_by_slug_or_id(session, slug_or_id)
        if product is None:
            return NotFound()
        return product

    def create_product(
        self,
        session: Session,
        fields: Mapping[str, Any],
    ) -> Product | ValidationFailed:
        """
        Validate → insert row with derived slug → attach image to "images".

        If storing the image fails the freshly inserted row is removed
        again before the error propagates.
        """
        errors = validate(fields, CREATE_RULES, self._name_taken(session))
        if errors:
            return ValidationFailed(errors)

        payload = to_payload(fields)
        product = Product(
            **payload.model_dump(),
            slug=self._ensure_unique_slug(session, self._slugify(payload.name)),
        )
        product = self.repo.create(session, product)

        upload: UploadedFile = fields["image"]
        try:
            self.media.attach(session, product, upload, IMAGES_COLLECTION)
        except Exception:
            logger.warning("Image upload failed, removing product %s", product.id)
            session.rollback()
            self.repo.delete(session, product)
            raise

        logger.info("Created product %s (%s)", product.id, product.slug)
        return product

    def update_product(
        self,
        session: Session,
        slug_or_id: str,
        fields: Mapping[str, Any],
    ) -> Product | NotFound | ValidationFailed:
        """
        Full-field update. When a new image is submitted the "images"
        collection is cleared first, so exactly one image remains.

        The row update and the image swap are separate commits.
        """
        product = self.repo.find_by_slug_or_id(session, slug_or_id)
        if product is None:
            return NotFound()

        errors = validate(fields, UPDATE_RULES, self._name_taken(session, exclude_id=product.id))
        if errors:
            return ValidationFailed(errors)

        payload = to_payload(fields)
        for key, value in payload.model_dump().items():
            setattr(product, key, value)
        product = self.repo.update(session, product)

        upload = fields.get("image")
        if isinstance(upload, UploadedFile) and upload.content:
            self.media.clear_collection(session, product, IMAGES_COLLECTION)
            self.media.attach(session, product, upload, IMAGES_COLLECTION)

        logger.info("Updated product %s (%s)", product.id, product.slug)
        return product

    def delete_product(self, session: Session, slug_or_id: str) -> str | NotFound:
        """
        Delete a product and its media. Returns the deleted product's name.
        """
        product = self.repo.find_by_slug_or_id(session, slug_or_id)
        if product is None:
            return NotFound()

        name = product.name
        product_id = product.id
        self.media.delete_all(session, product)
        self.repo.delete(session, product)

        logger.info("Deleted product %s (%s)", product_id, name)
        return name
