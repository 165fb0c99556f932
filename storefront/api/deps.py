"""FastAPI dependencies for dependency injection.

Provides:
- Table store and the services built on it
- Bearer token authentication for admin routes
- Login rate limiting
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from storefront.infra.logging import get_logger
from storefront.infra.table_store import RemoteTableStore
from storefront.schemas.auth import AdminUser
from storefront.services.auth import (
    InvalidTokenError,
    LoginRateLimiter,
    TokenService,
    get_login_rate_limiter,
    get_token_service,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService

logger = get_logger(__name__)

_table_store: RemoteTableStore | None = None


def get_table_store() -> RemoteTableStore:
    """Get table store singleton."""
    global _table_store
    if _table_store is None:
        _table_store = RemoteTableStore()
    return _table_store


Store = Annotated[RemoteTableStore, Depends(get_table_store)]


async def get_catalog_service(store: Store) -> CatalogService:
    return CatalogService(store)


async def get_order_service(store: Store) -> OrderService:
    return OrderService(store)


Catalog = Annotated[CatalogService, Depends(get_catalog_service)]
Orders = Annotated[OrderService, Depends(get_order_service)]
Tokens = Annotated[TokenService, Depends(get_token_service)]


async def get_current_admin(
    tokens: Tokens,
    authorization: Annotated[str | None, Header()] = None,
) -> AdminUser:
    """Authenticate an admin request from its bearer token.

    Raises:
        HTTPException: 401 if no token is sent, 403 if it is invalid or expired
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
        )

    try:
        return tokens.verify(token.strip())
    except InvalidTokenError as e:
        logger.info("Rejected bearer token", reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        ) from e


CurrentAdmin = Annotated[AdminUser, Depends(get_current_admin)]


def enforce_login_rate_limit(
    request: Request,
    limiter: Annotated[LoginRateLimiter, Depends(get_login_rate_limiter)],
) -> None:
    """Count a login attempt for the calling client.

    Raises:
        HTTPException: 429 when the client exceeded its attempts
    """
    client = request.client.host if request.client else "unknown"
    if not limiter.hit(client):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts, please try again later",
            headers={"Retry-After": str(limiter.retry_after(client))},
        )


LoginRateLimit = Annotated[None, Depends(enforce_login_rate_limit)]
