"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI

from stocksence.config import get_settings
from stocksence.infrastructure.database import engine, Base
from stocksence.core.logging import configure_logging
from stocksence.core.middleware import setup_middleware
from stocksence.core.exceptions import AppError, global_exception_handler
from stocksence.application.services.auth_service import SessionChange, on_session_change

# Import all models so SQLAlchemy knows about them
from stocksence.domain.models.auth_session import AuthSession  # noqa: F401
from stocksence.domain.models.product import Product  # noqa: F401
from stocksence.domain.models.sale import Sale  # noqa: F401
from stocksence.domain.models.user import User  # noqa: F401

# Import routers
from stocksence.interfaces.api.auth import router as auth_router
from stocksence.interfaces.api.products import router as products_router
from stocksence.interfaces.api.inventory import router as inventory_router
from stocksence.interfaces.api.sales import router as sales_router
from stocksence.interfaces.api.dashboard import router as dashboard_router
from stocksence.interfaces.api.reports import router as reports_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


def _log_session_change(change: SessionChange) -> None:
    logger.info("Session changed", session_event=change.event, user_id=change.user_id)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting StockSence...", env=settings.ENVIRONMENT)

    # Create DB tables (use migrations for anything beyond a fresh database)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    unsubscribe = on_session_change(_log_session_change)

    yield

    unsubscribe()
    logger.info("StockSence stopped")


app = FastAPI(
    title="StockSence",
    description="Inventory management API — products, stock, sales and reports",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(auth_router)
app.include_router(products_router)
app.include_router(inventory_router)
app.include_router(sales_router)
app.include_router(dashboard_router)
app.include_router(reports_router)


@app.get("/")
def root():
    return {
        "name": "StockSence",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
