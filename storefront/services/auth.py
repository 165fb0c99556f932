"""Admin authentication: password check, signed bearer tokens, login rate limit.

Tokens are itsdangerous timed signatures over `{id, username, name}`. There
is no refresh; a token is valid for `settings.token_ttl_seconds`.
"""

import time
from collections import deque
from collections.abc import Callable
from functools import lru_cache

import bcrypt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from storefront.config import settings
from storefront.infra.logging import get_logger
from storefront.schemas.auth import AdminUser

logger = get_logger(__name__)

TOKEN_SALT = "storefront-admin-v1"
ADMIN_ID = "admin-1"

# Development-only fallbacks, never used outside `dev`
DEV_TOKEN_SECRET = "dev-secret-key-change-in-production"
DEV_ADMIN_PASSWORD = "admin123"


class AuthConfigError(RuntimeError):
    """Raised when authentication settings are missing outside development."""


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, tampered with or expired."""


def hash_password(password: str) -> str:
    """bcrypt hash suitable for `ADMIN_PASSWORD_HASH`."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


@lru_cache
def _dev_password_hash() -> str:
    return hash_password(DEV_ADMIN_PASSWORD)


def resolve_token_secret() -> str:
    """Token signing secret from settings.

    Raises:
        AuthConfigError: If no secret is configured outside development
    """
    if settings.token_secret:
        return settings.token_secret
    if settings.environment != "dev":
        raise AuthConfigError("TOKEN_SECRET is required outside development")
    logger.warning("TOKEN_SECRET not set, using development secret")
    return DEV_TOKEN_SECRET


def _admin_password_hash() -> str | None:
    if settings.admin_password_hash:
        return settings.admin_password_hash
    if settings.environment != "dev":
        logger.error("ADMIN_PASSWORD_HASH not set, refusing admin login")
        return None
    logger.warning("ADMIN_PASSWORD_HASH not set, accepting development password")
    return _dev_password_hash()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        # Malformed hash in configuration
        logger.error("Cannot verify password", error=str(e))
        return False


def authenticate(username: str, password: str) -> AdminUser | None:
    """Check admin credentials.

    Returns:
        The admin user, or None if the credentials are wrong
    """
    expected_hash = _admin_password_hash()
    if expected_hash is None:
        return None

    # Always run bcrypt so a wrong username costs the same as a wrong password
    password_ok = verify_password(password, expected_hash)
    if username != settings.admin_username or not password_ok:
        logger.info("Admin login rejected", username=username)
        return None

    return AdminUser(id=ADMIN_ID, username=username, name=settings.admin_name)


class TokenService:
    """Issues and verifies admin bearer tokens."""

    def __init__(self, secret: str | None = None, max_age: int | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret or resolve_token_secret(), salt=TOKEN_SALT)
        self.max_age = max_age if max_age is not None else settings.token_ttl_seconds

    def issue(self, user: AdminUser) -> str:
        return self._serializer.dumps(user.model_dump())

    def verify(self, token: str) -> AdminUser:
        """Decode a bearer token.

        Raises:
            InvalidTokenError: If the token is expired or its signature is bad
        """
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except SignatureExpired as e:
            raise InvalidTokenError("Token expired") from e
        except BadSignature as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            return AdminUser.model_validate(payload)
        except ValueError as e:
            raise InvalidTokenError("Invalid token payload") from e


_token_service: TokenService | None = None


def get_token_service() -> TokenService:
    """Get token service singleton."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service


class LoginRateLimiter:
    """Sliding-window limit on login attempts per client key."""

    def __init__(
        self,
        max_attempts: int | None = None,
        window_seconds: float | None = None,
        enabled: bool | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max_attempts or settings.login_rate_limit_attempts
        self.window_seconds = window_seconds or settings.login_rate_limit_window_seconds
        self.enabled = enabled if enabled is not None else settings.environment != "dev"
        self._clock = clock
        self._attempts: dict[str, deque[float]] = {}

    def hit(self, key: str) -> bool:
        """Record an attempt.

        Returns:
            False if the key is over the limit (the attempt is not recorded)
        """
        if not self.enabled:
            return True

        now = self._clock()
        self._prune(now)
        attempts = self._attempts.setdefault(key, deque())

        if len(attempts) >= self.max_attempts:
            logger.warning("Login rate limit exceeded", client=key, attempts=len(attempts))
            return False

        attempts.append(now)
        return True

    def _prune(self, now: float) -> None:
        """Drop expired attempts and forget clients with none left."""
        for key in list(self._attempts):
            attempts = self._attempts[key]
            while attempts and now - attempts[0] >= self.window_seconds:
                attempts.popleft()
            if not attempts:
                del self._attempts[key]

    def retry_after(self, key: str) -> int:
        """Seconds until the oldest attempt leaves the window."""
        attempts = self._attempts.get(key)
        if not attempts:
            return 0
        return max(0, int(attempts[0] + self.window_seconds - self._clock()) + 1)

    def reset(self) -> None:
        self._attempts.clear()


_rate_limiter: LoginRateLimiter | None = None


def get_login_rate_limiter() -> LoginRateLimiter:
    """Get login rate limiter singleton."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = LoginRateLimiter()
    return _rate_limiter
