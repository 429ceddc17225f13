"""Общие фикстуры: in-memory SQLite, сервисы и HTTP-клиент"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import chirper.db.models  # noqa: F401
from chirper.core.config import Settings, get_settings
from chirper.core.db import Base, get_db
from chirper.domains.follows.services import FollowService
from chirper.domains.identity.entities import User
from chirper.domains.identity.services import UserService
from chirper.domains.images.services import ImageService
from chirper.domains.likes.services import LikeService
from chirper.domains.oauth.services import OAuthService, OAuthSignIn
from chirper.domains.tweets.entities import Tweet
from chirper.domains.tweets.services import TweetService
from chirper.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "password1"

# Минимальные валидные заголовки изображений
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x00" * 64


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=TEST_DATABASE_URL,
        pepper="test-pepper",
        hmac_key="test-hmac-key",
        images_dir=str(tmp_path / "images"),
        github_client_id="client-id",
        github_client_secret="client-secret",
    )


@pytest.fixture
async def engine():
    """Новая база на каждый тест"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def images(settings) -> ImageService:
    return ImageService(settings.images_dir)


@pytest.fixture
def user_service(db_session, settings, images) -> UserService:
    return UserService(db_session, pepper=settings.pepper, hmac_key=settings.hmac_key, images=images)


@pytest.fixture
def tweet_service(db_session, images) -> TweetService:
    return TweetService(db_session, images)


@pytest.fixture
def follow_service(db_session) -> FollowService:
    return FollowService(db_session)


@pytest.fixture
def like_service(db_session) -> LikeService:
    return LikeService(db_session)


@pytest.fixture
def oauth_service(db_session) -> OAuthService:
    return OAuthService(db_session)


@pytest.fixture
def oauth_sign_in(user_service, oauth_service) -> OAuthSignIn:
    return OAuthSignIn(user_service, oauth_service)


@pytest.fixture
def make_user(user_service):
    """Фабрика зарегистрированных пользователей"""
    async def _make_user(email: str = "alice@example.com", name: str = "Alice", handle: str = "alice") -> User:
        user = User(email=email, name=name, handle=handle, password=TEST_PASSWORD)
        return await user_service.register_user(user)
    return _make_user


@pytest.fixture
async def alice(make_user) -> User:
    return await make_user()


@pytest.fixture
async def bob(make_user) -> User:
    return await make_user(email="bob@example.com", name="Bob", handle="bob")


@pytest.fixture
def make_tweet(tweet_service):
    async def _make_tweet(user: User, content: str = "hello world", **kwargs) -> Tweet:
        return await tweet_service.create_tweet(Tweet(user_id=user.id, content=content, **kwargs))
    return _make_tweet


@pytest.fixture
async def client(session_factory, settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP-клиент приложения с тестовой базой и настройками"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Регистрация через API; cookie сохраняется в клиенте"""
    async def _register(email: str = "alice@example.com", name: str = "Alice", handle: str = "alice"):
        response = await client.post(
            "/api/register",
            json={"email": email, "password": TEST_PASSWORD, "name": name, "handle": handle},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _register
