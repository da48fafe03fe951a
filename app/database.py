# app/database.py
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()


def build_database_url(url: str) -> str:
    """
    Normalize the configured database URL.

    Postgres connections must use SSL when running in the cloud, so
    sslmode=require is appended if it is not already present. Other
    backends are returned untouched.
    """
    if not url.startswith("postgres"):
        return url
    if "sslmode=" in url:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}sslmode=require"


def make_engine(url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    - SQLite   : allow use across threads (FastAPI runs sync endpoints
                 in a threadpool).
    - Postgres : small pool with pre-ping, the hosted pooler limits the
                 number of clients per project.
    """
    url = build_database_url(url)
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = make_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
