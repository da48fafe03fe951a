# app/routers/products.py
import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse
from sqlmodel import Session

from app.database import get_session
from app.deps import get_product_service
from app.schemas.envelope import Envelope
from app.schemas.product import UploadedFile
from app.services.outcomes import NotFound, ValidationFailed
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

SERVER_ERROR = "Server error"


def respond(envelope: Envelope, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=envelope.model_dump(mode="json"), status_code=status_code)


def respond_outcome(outcome: ValidationFailed | NotFound) -> JSONResponse:
    """
    Map an expected failure to its envelope and status code.
    """
    if isinstance(outcome, ValidationFailed):
        return respond(
            Envelope.error(outcome.message, data=outcome.errors),
            status.HTTP_400_BAD_REQUEST,
        )
    return respond(Envelope.error(outcome.message), status.HTTP_404_NOT_FOUND)


def server_error(session: Session, action: str) -> JSONResponse:
    """
    Log the active exception with its traceback and answer with an
    opaque 500 envelope.
    """
    logger.exception("Unexpected failure while trying to %s", action)
    session.rollback()
    return respond(Envelope.error(SERVER_ERROR), status.HTTP_500_INTERNAL_SERVER_ERROR)


def read_upload(image: UploadFile | None) -> UploadedFile | None:
    if image is None:
        return None
    return UploadedFile(
        filename=image.filename or "",
        content_type=image.content_type or "application/octet-stream",
        content=image.file.read(),
    )


def form_fields(
    name: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    status_value: str | None = Form(None, alias="status"),
    image: UploadFile | None = File(None),
) -> dict[str, Any]:
    """
    Collect the product form as a plain mapping.

    Every field is optional here on purpose: presence and type checks
    belong to the rule tables, which report them in the envelope.
    """
    return {
        "name": name,
        "description": description,
        "price": price,
        "status": status_value,
        "image": read_upload(image),
    }


# -------- Listing --------


@router.get("")
def list_products(
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    List every product, published or not, without pagination.
    """
    products = service.list_products(session)
    return respond(
        Envelope.success(products=[p.model_dump(mode="json") for p in products])
    )


@router.get("/paginate")
def paginate_products(
    request: Request,
    page: int = 1,
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    List published products, paginated (fixed page size).
    """
    path = str(request.url.replace(query=""))
    result = service.paginate_published(session, page=page, path=path)
    return respond(
        Envelope.success(products=result.model_dump(mode="json", by_alias=True))
    )


# -------- CRUD --------


@router.post("")
def create_product(
    fields: dict[str, Any] = Depends(form_fields),
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Create a product from a multipart form and attach its image.
    """
    try:
        outcome = service.create_product(session, fields)
        if isinstance(outcome, ValidationFailed):
            return respond_outcome(outcome)

        detail = service.to_detail(session, outcome)
        return respond(
            Envelope.success(
                f"The product {detail.name} has been created",
                product=detail.model_dump(mode="json"),
            )
        )
    except Exception:
        return server_error(session, "create a product")


@router.get("/{slug_or_id}")
def get_product(
    slug_or_id: str,
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Get a single product by slug or id.
    """
    try:
        outcome = service.get_product(session, slug_or_id)
        if isinstance(outcome, NotFound):
            return respond_outcome(outcome)

        detail = service.to_detail(session, outcome)
        return respond(Envelope.success(product=detail.model_dump(mode="json")))
    except Exception:
        return server_error(session, "show a product")


@router.api_route("/{slug_or_id}", methods=["PUT", "PATCH"])
def update_product(
    slug_or_id: str,
    fields: dict[str, Any] = Depends(form_fields),
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Replace every field of a product; swap its image when one is sent.
    """
    try:
        outcome = service.update_product(session, slug_or_id, fields)
        if isinstance(outcome, (NotFound, ValidationFailed)):
            return respond_outcome(outcome)

        detail = service.to_detail(session, outcome)
        return respond(
            Envelope.success(
                f"The product {detail.name} has been updated",
                product=detail.model_dump(mode="json"),
            )
        )
    except Exception:
        return server_error(session, "update a product")


@router.delete("/{slug_or_id}")
def delete_product(
    slug_or_id: str,
    session: Session = Depends(get_session),
    service: ProductService = Depends(get_product_service),
):
    """
    Delete a product together with its stored images.
    """
    try:
        outcome = service.delete_product(session, slug_or_id)
        if isinstance(outcome, NotFound):
            return respond_outcome(outcome)

        return respond(Envelope.success(f"The product {outcome} has been deleted"))
    except Exception:
        return server_error(session, "delete a product")
