"""Business logic services."""

from storefront.services.auth import (
    LoginRateLimiter,
    TokenService,
    authenticate,
    get_login_rate_limiter,
    get_token_service,
)
from storefront.services.backend_client import (
    BackendAuthError,
    BackendClient,
    BackendError,
    get_backend_client,
)
from storefront.services.errors import (
    CategoryInUseError,
    EntityExistsError,
    InvalidStatusTransition,
    ServiceError,
)

__all__ = [
    "LoginRateLimiter",
    "TokenService",
    "authenticate",
    "get_login_rate_limiter",
    "get_token_service",
    "BackendAuthError",
    "BackendClient",
    "BackendError",
    "get_backend_client",
    "CategoryInUseError",
    "EntityExistsError",
    "InvalidStatusTransition",
    "ServiceError",
]
