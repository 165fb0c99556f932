"""Client-side admin session: login, logout and the bearer header."""

from storefront.infra.local_cache import LocalCacheError, LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.schemas.auth import AdminUser
from storefront.services.backend_client import BackendClient

logger = get_logger(__name__)

TOKEN_KEY = "admin_token"
USER_KEY = "admin_user"


class AdminSession:
    """Holds the admin bearer token, restored from the cache on start."""

    def __init__(self, client: BackendClient, cache: LocalCacheStore) -> None:
        self._client = client
        self._cache = cache
        self._token: str | None = None
        self._user: AdminUser | None = None
        self._restore()

    def _restore(self) -> None:
        token = self._cache.get(TOKEN_KEY)
        user = self._cache.get(USER_KEY)
        if not token or not user:
            return

        try:
            self._user = AdminUser.model_validate(user)
            self._token = str(token)
        except ValueError as e:
            logger.warning("Discarding unreadable admin session", error=str(e))
            self._forget()

    def _forget(self) -> None:
        self._token = None
        self._user = None
        try:
            self._cache.remove(TOKEN_KEY)
            self._cache.remove(USER_KEY)
        except LocalCacheError as e:
            logger.error("Failed to clear admin session", error=str(e))

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> AdminUser | None:
        return self._user

    async def login(self, username: str, password: str) -> bool:
        data = await self._client.login(username, password)
        if data is None:
            return False

        try:
            user = AdminUser.model_validate(data["user"])
        except ValueError as e:
            logger.error("Invalid user in login response", error=str(e))
            return False

        self._token = data["token"]
        self._user = user
        try:
            self._cache.set(TOKEN_KEY, self._token)
            self._cache.set(USER_KEY, user.model_dump())
        except LocalCacheError as e:
            # The session still works for this process
            logger.error("Failed to persist admin session", error=str(e))

        logger.info("Admin logged in", username=user.username)
        return True

    def logout(self) -> None:
        self._forget()
        logger.info("Admin logged out")

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}
