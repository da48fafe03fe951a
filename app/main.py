# app/main.py
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.database import create_db_and_tables
from app.schemas.envelope import Envelope

# Import models so SQLModel metadata is populated before create_all()
from app.models import product as _product_models  # noqa: F401
from app.models import media as _media_models  # noqa: F401

# Routers
from app.routers.products import router as products_router

settings = get_settings()

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Make sure the local media directory exists.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise

    if settings.STORAGE_BACKEND == "local":
        Path(settings.MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
        logger.info(f"Startup: serving media from {settings.MEDIA_ROOT}")
    yield
    logger.info("Shutdown complete.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    Malformed requests (wrong part types, bad query params) use the same
    envelope as field validation failures.
    """
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = str(err["loc"][-1]) if err.get("loc") else "request"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    first = next(iter(errors.values()))[0] if errors else "The given data was invalid."
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=Envelope.error(first, data=errors).model_dump(mode="json"),
    )


app.include_router(products_router, prefix=settings.API_PREFIX)

if settings.STORAGE_BACKEND == "local":
    app.mount(
        settings.MEDIA_URL,
        StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
        name="media",
    )


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "product-catalog"}
