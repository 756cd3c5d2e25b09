import os

# Must be set before the app (and its settings) are imported
TEST_DB_URL = "sqlite+aiosqlite://"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["BCRYPT_SALT_ROUNDS"] = "4"  # cheapest bcrypt cost, keeps tests fast
os.environ.pop("CORS_ORIGINS", None)

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core import db as db_module
from app.core.security import hash_password
from app.main import app
from app.models.user import User


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    await db_module.init_db(TEST_DB_URL)
    await db_module.init_schema()


@pytest_asyncio.fixture
async def database():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield db_module
    await db_module.close_db()


@pytest_asyncio.fixture
async def session(database):
    async with database.SessionLocal() as s:
        yield s


@pytest_asyncio.fixture
async def client(database):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    The app lifespan is not run; the database fixture performs the startup phase.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def bare_client():
    """
    Client with no database at all. Anything that reaches persistence fails with 500.
    """
    await db_module.close_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(database):
    """
    Factory fixture to create users directly, bypassing the HTTP layer.
    """

    async def _create_user(password: str = "UserPass!23", username: str | None = None) -> tuple[User, str]:
        user = User(
            username=username or f"user_{uuid.uuid4().hex[:6]}",
            password_hash=hash_password(password),
        )
        async with database.SessionLocal() as s:
            s.add(user)
            await s.commit()
            await s.refresh(user)
        return user, password

    return _create_user


@pytest.fixture
def unique_username():
    return f"user_{uuid.uuid4().hex[:6]}"
