# app/deps.py
"""FastAPI dependencies – service instances."""

from fastapi import Depends

from app.core.config import get_settings
from app.core.storage_utils import MediaStorage, get_storage
from app.repositories.media_repo import MediaRepository
from app.repositories.product_repo import ProductRepository
from app.services.media_service import MediaService
from app.services.product_service import ProductService


def get_media_service(storage: MediaStorage = Depends(get_storage)) -> MediaService:
    return MediaService(storage, MediaRepository())


def get_product_service(media: MediaService = Depends(get_media_service)) -> ProductService:
    """
    ProductService wired with its collaborators.

    Tests override `get_storage` (or this dependency) to swap the storage
    backend without touching the router.
    """
    return ProductService(
        ProductRepository(),
        media,
        page_size=get_settings().PAGE_SIZE,
    )
