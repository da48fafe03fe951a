# app/models/product.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Columns:
      - id, name, slug, description, price, status,
        created_at, updated_at

    The product image is not a column: it lives in the `media` table
    under the "images" collection (see app/models/media.py).
    """

    __tablename__ = "products"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        max_length=191,
        unique=True,
        index=True,
        description="Display name (unique)",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique), derived from name",
    )

    description: str = Field(
        description="Long description shown on the product page",
    )

    price: float = Field(
        description="Unit price",
    )

    status: bool = Field(
        default=False,
        index=True,
        description="Published (true) or unpublished (false)",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp (UTC)",
    )
