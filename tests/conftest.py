import os
from typing import AsyncGenerator, Dict
from uuid import uuid4

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")

os.environ["DATABASE_URI"] = TEST_DATABASE_URL
os.environ["ENABLE_TRACING"] = "false"
os.environ["JSON_LOGS"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

import catalog.db.models  # noqa: E402,F401
from catalog.api.dependencies import get_db_session  # noqa: E402
from catalog.core.security import create_access_token, get_password_hash  # noqa: E402
from catalog.db.models.user import User  # noqa: E402
from catalog.db.repositories.category import CategoryRepository  # noqa: E402
from catalog.db.session import Base  # noqa: E402
from catalog.main import app  # noqa: E402
from catalog.services.categories import CategoryService  # noqa: E402

TEST_PASSWORD = "secret123"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    test_async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    # Create tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with test_async_session() as session:
        yield session
    # Drop all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def category_repository(db_session: AsyncSession) -> CategoryRepository:
    return CategoryRepository(db_session)


@pytest_asyncio.fixture(scope="function")
async def category_service(category_repository: CategoryRepository) -> CategoryService:
    return CategoryService(category_repository)


@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    user = User(
        id=str(uuid4()),
        name="Test User",
        email="tester@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def auth_headers(test_user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject=test_user.id)}"}


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


@pytest.fixture
def user_password() -> str:
    return TEST_PASSWORD
