"""
Pytest fixtures - test DB, client, auth.
Challenge: Isolated tests; in-memory SQLite instead of PostgreSQL, and a fake
identity verifier instead of Firebase.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("FIREBASE_PROJECT_ID", "krishi-setu-test")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from krishisetu.core.dependencies import get_token_verifier
from krishisetu.core.exceptions import Unauthenticated
from krishisetu.db.base import Base
from krishisetu.db.session import get_db
from krishisetu.main import app
from krishisetu.schemas.auth import Principal

# One shared in-memory SQLite connection per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"

SELLER = Principal(uid="seller-uid", email="seller@example.com", name="Ravi Seller")
BUYER_A = Principal(uid="buyer-a-uid", email="a@example.com", name="Asha Buyer")
BUYER_B = Principal(uid="buyer-b-uid", email="b@example.com", name="Bilal Buyer")

TOKENS = {
    "seller-token": SELLER,
    "buyer-a-token": BUYER_A,
    "buyer-b-token": BUYER_B,
}


class FakeTokenVerifier:
    """Maps fixed tokens to principals; everything else is rejected."""

    async def verify(self, token: str) -> Principal:
        try:
            return TOKENS[token]
        except KeyError:
            raise Unauthenticated("Invalid token") from None


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def crop_payload(owner: Principal = SELLER, **overrides) -> dict:
    payload = {
        "name": "Basmati Rice",
        "type": "Grain",
        "pricePerUnit": 5,
        "unit": "kg",
        "quantity": 10,
        "description": "Fresh harvest",
        "location": "Rajshahi",
        "image": "https://img.example.com/rice.jpg",
        "owner": {"ownerEmail": owner.email, "ownerName": owner.name},
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def client(session_maker):
    # A fresh session per request, like get_db in production
    async def override_get_db():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_verifier] = FakeTokenVerifier
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def seller_headers() -> dict:
    return bearer("seller-token")


@pytest.fixture
def buyer_a_headers() -> dict:
    return bearer("buyer-a-token")


@pytest.fixture
def buyer_b_headers() -> dict:
    return bearer("buyer-b-token")


@pytest_asyncio.fixture
async def crop_id(client: AsyncClient, seller_headers: dict) -> str:
    """A listing of 10 kg at 5 per kg owned by SELLER."""
    response = await client.post("/api/crops", headers=seller_headers, json=crop_payload())
    assert response.status_code == 201
    return response.json()["insertedId"]
