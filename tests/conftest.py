"""Shared fixtures: local cache, in-memory table store and the API client."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from storefront.infra.local_cache import LocalCacheStore
from storefront.schemas.auth import AdminUser
from storefront.services.auth import LoginRateLimiter, TokenService
from tests.fakes import FakeTableStore

TEST_SECRET = "test-secret"


@pytest.fixture
def cache(tmp_path) -> LocalCacheStore:
    return LocalCacheStore(tmp_path / "cache")


@pytest.fixture
def table_store() -> FakeTableStore:
    return FakeTableStore()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET, max_age=60)


@pytest.fixture
def admin_token(token_service: TokenService) -> str:
    return token_service.issue(AdminUser(id="admin-1", username="admin", name="Administrador"))


@pytest.fixture
def auth_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def rate_limiter() -> LoginRateLimiter:
    return LoginRateLimiter(max_attempts=5, window_seconds=900, enabled=False)


@pytest_asyncio.fixture
async def client(
    table_store: FakeTableStore,
    token_service: TokenService,
    rate_limiter: LoginRateLimiter,
) -> AsyncGenerator[AsyncClient, None]:
    """API client wired to the in-memory table store."""
    from storefront.api.deps import get_table_store
    from storefront.main import app
    from storefront.services.auth import get_login_rate_limiter, get_token_service

    app.dependency_overrides[get_table_store] = lambda: table_store
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_login_rate_limiter] = lambda: rate_limiter

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
