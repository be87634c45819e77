"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time, so the environment has to be ready first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import date
from typing import Any, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from carshop_api.api import dependencies
from carshop_api.db.session import get_async_db
from carshop_api.main import app
from carshop_api.models import Base, Customer, User


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
async def users(session_factory) -> Dict[str, User]:
    """Two staff members: the seller (id 7) and the manager (id 8)."""
    seller = User(
        id=7, username="seller", email="seller@example.com",
        hashed_password="not-a-real-hash", role="admin", is_active=True,
    )
    manager = User(
        id=8, username="manager", email="manager@example.com",
        hashed_password="not-a-real-hash", role="admin", is_active=True,
    )
    async with session_factory() as db:
        db.add_all([seller, manager])
        await db.commit()
    return {"seller": seller, "manager": manager}


@pytest.fixture
async def customer(session_factory) -> Customer:
    customer = Customer(
        id=3, name="Maria Souza", ident_document="123.456.789-00",
        birth_date=date(1990, 5, 17), email="maria@example.com", phone="+55 11 91234-5678",
    )
    async with session_factory() as db:
        db.add(customer)
        await db.commit()
    return customer


@pytest.fixture
def override_db(session_factory):
    async def override_get_async_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_get_async_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def act_as(users, override_db):
    """Switches the authenticated user for the following requests."""
    def _act_as(username: str) -> User:
        user = users[username]
        app.dependency_overrides[dependencies.get_current_active_user] = lambda: user
        return user

    _act_as("seller")
    return _act_as


@pytest.fixture
async def client(act_as):
    """Client authenticated as the seller."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def anonymous_client(override_db):
    """Client that goes through the real bearer token authentication."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def car_payload() -> Dict[str, Any]:
    return {
        "brand": "Toyota",
        "model": "Corolla",
        "color": "Silver",
        "year_manufacture": 2021,
        "imported": False,
        "plates": "ABC-1D23",
        "selling_date": "2024-01-15",
        "selling_price": 98500.00,
    }
