from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from corporate_advisor.ai.gemini import GeminiClient
from corporate_advisor.core.database import create_all
from corporate_advisor.core.database.entities import User
from corporate_advisor.core.models.enums import UserRole
from corporate_advisor.core.models.io.auth import RegisterRequest
from corporate_advisor.server.core.security import create_access_token
from corporate_advisor.services.notifications import TelegramNotifier
from corporate_advisor.services.storage import LocalStorage
from corporate_advisor.services.users import UserService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(test_engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "uploads")


@pytest.fixture
def gemini() -> MagicMock:
    """Gemini client double; tests set the return values they need."""
    client = MagicMock(spec=GeminiClient)
    client.upload_file = AsyncMock()
    client.generate_text = AsyncMock(return_value="분석 결과")
    client.generate_image = AsyncMock(return_value=None)
    client.chat = AsyncMock(return_value="답변")
    return client


@pytest.fixture
def notifier() -> MagicMock:
    telegram = MagicMock(spec=TelegramNotifier)
    telegram.send = AsyncMock(return_value=True)
    telegram.notify_customer_inquiry = AsyncMock(return_value=True)
    telegram.notify_visual_report_order = AsyncMock(return_value=True)
    return telegram


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, storage: LocalStorage, gemini: MagicMock, notifier: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from corporate_advisor.ai.gemini import get_gemini_client
    from corporate_advisor.core.database import get_session
    from corporate_advisor.server.main import app
    from corporate_advisor.services.notifications import get_notifier
    from corporate_advisor.services.storage import get_storage

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_gemini_client] = lambda: gemini
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_notifier] = lambda: notifier

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("corporate_advisor.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


async def _register(session: AsyncSession, email: str, name: str, role: str = UserRole.USER.value) -> User:
    user = await UserService(session).register(RegisterRequest(email=email, password="secret123", name=name))
    if role != UserRole.USER.value:
        user.role = role
        session.add(user)
        await session.commit()
    return user


@pytest_asyncio.fixture
async def user(session: AsyncSession) -> User:
    return await _register(session, "user@example.com", "홍길동")


@pytest_asyncio.fixture
async def other_user(session: AsyncSession) -> User:
    return await _register(session, "other@example.com", "김철수")


@pytest_asyncio.fixture
async def admin(session: AsyncSession) -> User:
    return await _register(session, "admin@example.com", "관리자", role=UserRole.ADMIN.value)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def user_headers(user: User) -> dict:
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return auth_headers(admin)
