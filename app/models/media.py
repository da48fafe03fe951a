# app/models/media.py
from datetime import datetime

from sqlmodel import SQLModel, Field

from app.models.product import utcnow


class Media(SQLModel, table=True):
    """
    A stored file attached to a product.

    Files are grouped per product by `collection_name` (e.g. "images").
    `path` is the object path inside the storage backend and is what
    gets removed when the media item is cleared; `url` is what clients
    receive.
    """

    __tablename__ = "media"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    collection_name: str = Field(
        max_length=100,
        index=True,
        description="Named grouping of files on the product",
    )

    file_name: str = Field(
        max_length=255,
        description="Original client-side filename",
    )

    mime_type: str = Field(max_length=100)

    size: int = Field(
        ge=0,
        description="File size in bytes",
    )

    path: str = Field(
        max_length=500,
        description="Object path inside the storage backend",
    )

    url: str = Field(
        description="Public URL of the stored file",
    )

    created_at: datetime = Field(default_factory=utcnow)
