"""
Pytest fixtures for StockSence tests.

Provides an in-memory database, repositories, a signed-in user and an
API test client that shares the test's database session.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from stocksence.application.services import auth_service
from stocksence.domain.models.product import Product
from stocksence.domain.models.sale import Sale
from stocksence.infrastructure.database import Base, engine, get_db
from stocksence.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from stocksence.infrastructure.repositories.sale_repository import SQLAlchemySaleRepository
from stocksence.main import app

TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

PASSWORD = "secret123"


@pytest.fixture
def db_session():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def product_repo(db_session):
    return SQLAlchemyProductRepository(db_session, Product)


@pytest.fixture
def sale_repo(db_session):
    return SQLAlchemySaleRepository(db_session, Sale)


@pytest.fixture
def user(db_session):
    return auth_service.sign_up(db_session, "owner@shop.test", PASSWORD, "Shop Owner")


@pytest.fixture
def make_product(product_repo):
    """Insert a product straight through the repository."""
    def _make(**overrides):
        data = {
            "name": "Desk Lamp",
            "description": "LED lamp",
            "price": 10.0,
            "cost": 4.0,
            "quantity": 20,
            "min_quantity": 5,
            "category": "Home Goods",
        }
        data.update(overrides)
        return product_repo.create(data)
    return _make


@pytest.fixture
def session_events():
    """Collect session change events for the duration of a test."""
    events = []
    unsubscribe = auth_service.on_session_change(events.append)
    yield events
    unsubscribe()


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    client.post(
        "/api/auth/register",
        json={"email": "clerk@shop.test", "password": PASSWORD, "fullName": "Shop Clerk"},
    )
    response = client.post("/api/auth/login", json={"email": "clerk@shop.test", "password": PASSWORD})
    token = response.json()["accessToken"]
    return {"Authorization": f"Bearer {token}"}
