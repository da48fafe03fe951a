# app/schemas/product.py
from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlmodel import SQLModel, Field


class UploadedFile(NamedTuple):
    """
    An uploaded file as read from the multipart request.

    The router reads the bytes once; services and validation never touch
    FastAPI's UploadFile.
    """

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class ProductPayload(SQLModel):
    """
    Validated, coerced field set written to the products table.

    Built only after the rule table in app/services/validation.py passed,
    so the types here are already guaranteed.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=191)
    description: str
    price: float
    status: bool


class ProductRead(SQLModel):
    """
    Product representation used by the list endpoints.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str
    price: float
    status: bool
    created_at: datetime
    updated_at: datetime


class ProductDetail(ProductRead):
    """
    Single product representation, with the resolved image URL.
    """

    image: str | None = None


class ProductPage(BaseModel):
    """
    One page of published products.

    Keys mirror the usual length-aware paginator JSON so existing
    storefront clients keep working.
    """

    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    data: list[ProductRead]
    per_page: int
    total: int
    last_page: int
    from_: int | None = PydanticField(default=None, alias="from")
    to: int | None = None
    path: str
    next_page_url: str | None = None
    prev_page_url: str | None = None
