"""
Shared test fixtures.

Provides: in-memory SQLite engine/session, fakeredis cache, a mocked GHN
client, a TestClient wired to all three and a logged-in client.
"""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("GHN_TOKEN_API", "test-token")
os.environ.setdefault("GHN_SHOP_ID", "123456")
os.environ.setdefault("GHN_END_POINT", "https://ghn.test/shiip/public-api")

from unittest.mock import MagicMock

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from bookstore import models  # noqa: F401
from bookstore.cache import get_redis
from bookstore.database import get_session
from bookstore.main import app
from bookstore.models.book import Book
from bookstore.services.ghn_client import GHNClient, get_ghn_client

CLOUDINARY_IMAGE = "https://res.cloudinary.com/demo/image/upload/v1/books/cover.jpg"

PROVINCES = [{"id": 202, "name": "Hồ Chí Minh"}, {"id": 201, "name": "Hà Nội"}]
DISTRICTS = [{"id": 1442, "name": "Quận 1"}]
WARDS = [{"code": "20101", "name": "Phường Bến Nghé"}]

ORDER_FORM = {
    "name": "Nguyễn Văn An",
    "phone": "0971443356",
    "email": "an@example.com",
    "address": "12 Lê Lợi",
    "province": 202,
    "district": 1442,
    "ward": "20101",
    "note": "Giao giờ hành chính",
    "payment": "COD",
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def ghn():
    """GHNClient double serving one province/district/ward."""
    client = MagicMock(spec=GHNClient)
    client.get_provinces.return_value = PROVINCES
    client.get_districts.return_value = DISTRICTS
    client.get_wards.return_value = WARDS
    client.preview_order.return_value = {
        "shipping_fee": 22000,
        "shipping_time": "2026-10-22T16:59:59Z",
    }
    client.create_order.return_value = "LBK6QN"
    return client


@pytest.fixture
def client(engine, redis_client, ghn):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_redis] = lambda: redis_client
    app.dependency_overrides[get_ghn_client] = lambda: ghn

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_book(session):
    def _make(**overrides):
        data = {
            "name": "Book",
            "image": CLOUDINARY_IMAGE,
            "original_price": 100000,
            "category": "Tiểu thuyết",
            "author": "Nguyễn Nhật Ánh",
            "publication_year": 2020,
        }
        data.update(overrides)
        book = Book(**data)
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    return _make


def register_and_login(client, email="reader@example.com", password="secret123", name="Reader"):
    client.post(
        "/users/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "confirm_password": password,
        },
    )
    response = client.post("/users/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_client(client):
    """TestClient carrying a valid session cookie."""
    register_and_login(client)
    return client
