import os

# Settings are read at import time; tests never reach a real Postgres, Redis or Stripe
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-session-tokens")
os.environ.setdefault("PAYMENT_SECRET_KEY", "sk_test_dummy")

from collections.abc import AsyncGenerator  # noqa: E402
from decimal import Decimal  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from app.core.redis_client import CacheManager  # noqa: E402
from app.core.security import issue_session_token  # noqa: E402
from app.database import get_db  # noqa: E402
from app.dependencies import get_cache_manager, get_payment_service  # noqa: E402
from app.main import app  # noqa: E402
from app.models import metadata  # noqa: E402
from app.models.listings import listings  # noqa: E402
from app.models.users import users  # noqa: E402
from app.services.payment_service import (  # noqa: E402
    AUTHORIZED_STATUSES,
    PaymentAuthorization,
    PaymentService,
    to_minor_units,
)


class FakePaymentService(PaymentService):
    """In-memory stand-in for the Stripe-backed payment service."""

    def __init__(self):
        super().__init__(api_key="sk_test_dummy", currency="usd")
        self.intents: dict[str, dict] = {}
        self.voided: list[str] = []

    async def authorize(self, amount):
        amount_minor = to_minor_units(amount)
        intent_id = f"pi_{uuid4().hex}"
        self.intents[intent_id] = {"amount": amount_minor, "status": "requires_payment_method"}
        return PaymentAuthorization(
            client_secret=f"{intent_id}_secret_test",
            payment_intent_id=intent_id,
            amount_minor=amount_minor,
            currency=self.currency,
        )

    def confirm(self, intent_id: str, status: str = "requires_capture") -> None:
        """What the client does with the secret."""
        self.intents[intent_id]["status"] = status

    async def is_authorized(self, payment_intent_id, amount_minor):
        intent = self.intents.get(payment_intent_id)
        return (
            intent is not None
            and intent["status"] in AUTHORIZED_STATUSES
            and intent["amount"] == amount_minor
        )

    async def void(self, payment_intent_id):
        self.voided.append(payment_intent_id)
        if payment_intent_id in self.intents:
            self.intents[payment_intent_id]["status"] = "canceled"


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a fresh file database; each session gets its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def redis_mock() -> MagicMock:
    """Redis client that always misses."""
    mock_redis = MagicMock()
    mock_redis.get.return_value = None
    return mock_redis


@pytest.fixture
def payments() -> FakePaymentService:
    return FakePaymentService()


@pytest_asyncio.fixture
async def client(
    session_factory,
    redis_mock: MagicMock,
    payments: FakePaymentService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client. Every request gets its own database session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_manager] = lambda: CacheManager(redis_client=redis_mock)
    app.dependency_overrides[get_payment_service] = lambda: payments

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _insert_user(db: AsyncSession, email: str, role: str = "user", name: str = "") -> dict:
    result = await db.execute(
        users.insert()
        .values(email=email, name=name or email.split("@")[0], role=role)
        .returning(users)
    )
    await db.commit()
    return dict(result.mappings().one())


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict:
    """Create a regular user in the database."""
    return await _insert_user(db_session, "patient@example.com", name="Test Patient")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> dict:
    """Create an admin user in the database."""
    return await _insert_user(db_session, "admin@example.com", role="admin", name="Admin")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> dict:
    """Create a second regular user."""
    return await _insert_user(db_session, "other@example.com", name="Other Patient")


def bearer(email: str) -> dict:
    """Authorization headers carrying a session token for an email."""
    return {"Authorization": f"Bearer {issue_session_token(email)}"}


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    return bearer(test_user["email"])


@pytest.fixture
def admin_headers(admin_user: dict) -> dict:
    return bearer(admin_user["email"])


@pytest.fixture
def other_headers(other_user: dict) -> dict:
    return bearer(other_user["email"])


@pytest.fixture
def make_listing(db_session: AsyncSession):
    """Factory inserting a listing with given capacity."""

    async def _make(slots: int = 1, price: str = "20.00", title: str = "Complete Blood Count"):
        result = await db_session.execute(
            listings.insert()
            .values(title=title, price=Decimal(price), slots=slots, booked=0)
            .returning(listings)
        )
        await db_session.commit()
        return dict(result.mappings().one())

    return _make


@pytest.fixture
def session_headers():
    """Factory for headers of an arbitrary identity."""
    return bearer
