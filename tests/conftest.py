"""Shared fixtures: SQLite database, fake storage/broker, signed tokens."""

import asyncio
import copy
import json
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any

import jwt
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from catalog_service.api.auth import TokenVerifier, get_token_verifier
from catalog_service.catalog.models import Category, Product
from catalog_service.domain.exceptions import UpstreamFailure
from catalog_service.infrastructure.broker import MessageProducer
from catalog_service.infrastructure.database import Base, get_session
from catalog_service.infrastructure.storage import FileStorage, build_public_url
from catalog_service.main import app

BUCKET = "catalog-images"
REGION = "us-east-1"


# ============================================================================
# Fakes
# ============================================================================


class InMemoryStorage(FileStorage):
    """Object store keeping images in a dict."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.fail_upload = False
        self.fail_delete = False

    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        if self.fail_upload:
            raise UpstreamFailure("Failed to upload image", details={"key": key})
        self.objects[key] = data

    async def delete(self, key: str) -> None:
        if self.fail_delete:
            raise UpstreamFailure("Failed to delete image", details={"key": key})
        self.objects.pop(key, None)

    def resolve(self, key: str) -> str:
        return build_public_url(key, BUCKET, REGION)


class RecordingProducer(MessageProducer):
    """Producer recording every message it is asked to send."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, dict[str, Any]]] = []
        self.connected = False
        self.fail = False

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def send_message(self, topic: str, message: str) -> None:
        if self.fail:
            raise UpstreamFailure("Failed to publish message", details={"topic": topic})
        self.messages.append((topic, json.loads(message)))

    def event_types(self) -> list[str]:
        return [message["event_type"] for _, message in self.messages]


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create an empty in-memory image store."""
    return InMemoryStorage()


@pytest.fixture
def producer() -> RecordingProducer:
    """Create a connected recording producer."""
    producer = RecordingProducer()
    producer.connected = True
    return producer


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def engine(tmp_path: Path) -> Generator[AsyncEngine, None, None]:
    """Create a SQLite database with the catalog tables.

    NullPool keeps no connection open between event loops, so the same
    engine serves async tests and the TestClient.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        poolclass=NullPool,
    )

    async def create_tables() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session on the test database."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Tokens
# ============================================================================


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    """Generate a throwaway RSA key for signing access tokens."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def make_token(signing_key: rsa.RSAPrivateKey) -> Callable[..., str]:
    """Build a signed access token for a role and tenant."""

    def _make(role: str, tenant: str | None = None, sub: str = "1", **claims: Any) -> str:
        payload: dict[str, Any] = {"sub": sub, "role": role, **claims}
        if tenant is not None:
            payload["tenant"] = tenant
        return jwt.encode(payload, signing_key, algorithm="RS256")

    return _make


# ============================================================================
# Client
# ============================================================================


@pytest.fixture
def client(
    session_factory: async_sessionmaker[AsyncSession],
    storage: InMemoryStorage,
    producer: RecordingProducer,
    signing_key: rsa.RSAPrivateKey,
) -> Generator[TestClient, None, None]:
    """Create test client wired to the test database and fakes."""

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    verifier = TokenVerifier(key=signing_key.public_key())
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    app.state.storage = storage
    app.state.producer = producer

    yield TestClient(app)

    app.dependency_overrides.clear()
    del app.state.storage
    del app.state.producer


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> Callable[..., dict[str, str]]:
    """Build authorization headers for a role and tenant."""

    def _headers(role: str, tenant: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(role, tenant)}"}

    return _headers


# ============================================================================
# Sample Data
# ============================================================================


PIZZA_PRICE_CONFIGURATION = {
    "size": {"priceType": "base", "availableOptions": ["S", "M", "L"]},
    "crust": {"priceType": "additional", "availableOptions": ["thin", "thick"]},
}

PIZZA_ATTRIBUTES = [
    {
        "name": "isHit",
        "widgetType": "switch",
        "defaultValue": "No",
        "availableOptions": ["Yes", "No"],
    },
    {
        "name": "spiciness",
        "widgetType": "radio",
        "defaultValue": "Medium",
        "availableOptions": ["Less", "Medium", "Hot"],
    },
]


def make_category(**overrides: Any) -> Category:
    """Build a Pizza category model."""
    values: dict[str, Any] = {
        "name": "Pizza",
        "price_configuration": copy.deepcopy(PIZZA_PRICE_CONFIGURATION),
        "attributes": copy.deepcopy(PIZZA_ATTRIBUTES),
    }
    values.update(overrides)
    return Category(**values)


def make_product(category_id: str, **overrides: Any) -> Product:
    """Build a product model referencing ``category_id``."""
    values: dict[str, Any] = {
        "name": "Margherita",
        "description": "Tomato and mozzarella",
        "tenant_id": "7",
        "category_id": category_id,
        "image": "margherita-key",
        "price_configuration": {
            "size": {"priceType": "base", "availableOptions": {"S": 100, "M": 150, "L": 200}},
        },
        "attributes": [{"name": "isHit", "value": "Yes"}],
        "is_publish": True,
    }
    values.update(overrides)
    return Product(**values)


@pytest.fixture
def category_factory() -> Callable[..., Category]:
    """Get the Pizza category builder."""
    return make_category


@pytest.fixture
def product_factory() -> Callable[..., Product]:
    """Get the product builder."""
    return make_product


@pytest.fixture
def pizza_category_payload() -> dict[str, Any]:
    """Get a valid category request body."""
    return {
        "name": "Pizza",
        "priceConfiguration": copy.deepcopy(PIZZA_PRICE_CONFIGURATION),
        "attributes": copy.deepcopy(PIZZA_ATTRIBUTES),
    }
