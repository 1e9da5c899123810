"""
Test configuration and fixtures.
Uses an in-memory SQLite database (aiosqlite) in place of PostgreSQL, and the
real boto3 signer with dummy credentials (presigning never touches the network).
"""
import os

# Set test environment before any imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-signing-secret-0123456789abcdef0123456789abcdef0123456789ab"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["R2_ENDPOINT"] = "https://test-account.r2.cloudflarestorage.com"
os.environ["R2_BUCKET"] = "vaultix-test"
os.environ["R2_ACCESS_KEY"] = "test-access-key"
os.environ["R2_SECRET_KEY"] = "test-secret-key"

import pytest
from typing import AsyncGenerator

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.passwords import hash_password
from app.auth.tokens import TokenCodec
from app.config import Settings, get_settings
from app.models.base import Base
from app.models.file_record import FileRecord
from app.models.folder import Folder
from app.models.user import User
from app.storage.gateway import ObjectStorageGateway

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def token_codec(settings: Settings) -> TokenCodec:
    return TokenCodec.from_settings(settings)


@pytest.fixture
def storage_gateway(settings: Settings) -> ObjectStorageGateway:
    return ObjectStorageGateway(settings)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh in-memory database and session for one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session

    await engine.dispose()


async def _create_user_with_root(db: AsyncSession, email: str) -> User:
    user = User(
        email=email,
        password_hash=await hash_password(TEST_PASSWORD, 4),
        name="Test User",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    db.add(Folder(user_id=user.id, name="root", is_root=True, parent_id=None))
    await db.commit()
    return user


@pytest.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user with a root folder."""
    return await _create_user_with_root(db_session, "test@example.com")


@pytest.fixture(scope="function")
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user with a root folder."""
    return await _create_user_with_root(db_session, "other@example.com")


async def root_folder_of(db: AsyncSession, user: User) -> Folder:
    result = await db.execute(
        select(Folder).where(Folder.user_id == user.id, Folder.is_root.is_(True))
    )
    return result.scalar_one()


async def count_file_records(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(FileRecord))
    return result.scalar_one()


@pytest.fixture(scope="function")
async def test_root_folder(db_session: AsyncSession, test_user: User) -> Folder:
    return await root_folder_of(db_session, test_user)


@pytest.fixture(scope="function")
async def other_root_folder(db_session: AsyncSession, other_user: User) -> Folder:
    return await root_folder_of(db_session, other_user)


def get_test_app(db_session: AsyncSession, settings: Settings) -> FastAPI:
    """Create a test FastAPI app that uses the test database session."""
    from app.main import create_app
    from app.database import get_db

    app = create_app(settings)

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
def test_app(db_session: AsyncSession, settings: Settings) -> FastAPI:
    app = get_test_app(db_session, settings)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with no credentials attached."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(test_user: User, token_codec: TokenCodec) -> dict:
    """Authorization header carrying a valid token for test_user."""
    return {"Authorization": f"Bearer {token_codec.issue(test_user.id, test_user.email)}"}


@pytest.fixture
def test_password() -> str:
    """Plain-text password of test_user and other_user."""
    return TEST_PASSWORD


@pytest.fixture
def file_record_count(db_session: AsyncSession):
    """Async callable returning the number of file records in the database."""
    async def _count() -> int:
        return await count_file_records(db_session)
    return _count
