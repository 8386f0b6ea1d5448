"""Database engine, session factory and declarative base."""

from contextlib import contextmanager
from typing import Generator, Iterator

import structlog
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stocksence.config import get_settings
from stocksence.core.exceptions import StoreException

settings = get_settings()
logger = structlog.get_logger(__name__)


def build_engine(url: str):
    """Create an engine; SQLite gets a single shared connection."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency — one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(target, action: str) -> Iterator[None]:
    """Turn driver/ORM failures into StoreException after rolling back.

    ``target`` is a Session or a repository; either can roll back.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Store operation failed", action=action, error=str(exc))
        target.rollback()
        raise StoreException(f"Could not {action}. Please try again.") from exc
