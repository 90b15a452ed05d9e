"""Test configuration and fixtures."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from restify.authorization import Gate, PolicyRegistry
from restify.config.settings import Settings
from restify.dependencies.database import get_db
from restify.main import create_app
from restify.models.base import Base
from restify.repositories import RepositoryRegistry
from tests.fixtures.models import Book, Post, Principal, User
from tests.fixtures.policies import PostPolicy, UserPolicy
from tests.fixtures.repositories import BookRepository, PostRepository, UserRepository

PRINCIPAL_HEADER = "X-Principal-Id"
ADMIN_HEADER = "X-Principal-Admin"


def resolve_principal(request):
    """Build the principal from test headers."""
    principal_id = request.headers.get(PRINCIPAL_HEADER)
    if principal_id is None:
        return None
    return Principal(
        id=int(principal_id),
        is_admin=request.headers.get(ADMIN_HEADER) == "1",
    )


def principal_headers(principal_id: int, is_admin: bool = False) -> dict[str, str]:
    """Headers authenticating a test principal."""
    headers = {PRINCIPAL_HEADER: str(principal_id)}
    if is_admin:
        headers[ADMIN_HEADER] = "1"
    return headers


# Authorization
@pytest.fixture
def policies() -> PolicyRegistry:
    """Policy registry with Post and User policies; Book stays open."""
    registry = PolicyRegistry()
    registry.register(Post, PostPolicy)
    registry.register(User, UserPolicy)
    return registry


@pytest.fixture
def gate(policies) -> Gate:
    """Gate bound to the fixture policies."""
    return Gate(policies)


@pytest.fixture
def bound_models(gate, monkeypatch):
    """Point the fixture models at the fixture gate."""
    for model in (Post, User, Book):
        monkeypatch.setattr(model, "authorization_gate", gate)
    return gate


@pytest.fixture
def repositories() -> RepositoryRegistry:
    """Repository registry with the fixture repositories."""
    registry = RepositoryRegistry()
    registry.register(PostRepository, UserRepository, BookRepository)
    return registry


# Database
@pytest_asyncio.fixture
async def engine():
    """In-memory database with the fixture tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_local(engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_local) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for testing."""
    async with session_local() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db_session):
    """Two users, a draft and a published post owned by user 1, and a book."""
    alice = User(id=1, name="Alice", email="alice@example.com")
    bob = User(id=2, name="Bob", email="bob@example.com")
    db_session.add_all([alice, bob])
    await db_session.flush()

    draft = Post(id=5, user_id=1, title="Draft", body="Work in progress", is_published=False)
    published = Post(id=6, user_id=1, title="Published", body="Hello", is_published=True)
    book = Book(id=1, title="Dune")
    db_session.add_all([draft, published, book])
    await db_session.commit()

    return {"alice": alice, "bob": bob, "draft": draft, "published": published, "book": book}


# Application
@pytest.fixture
def test_settings() -> Settings:
    """Test settings configuration."""
    return Settings(_env_file=None, ENVIRONMENT="development", LOG_LEVEL="DEBUG")


@pytest.fixture
def app(repositories, gate, session_local, test_settings):
    """Application serving the fixture repositories."""
    app = create_app(
        repositories=repositories,
        gate=gate,
        principal_resolver=resolve_principal,
        app_settings=test_settings,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_local() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
