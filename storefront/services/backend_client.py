"""Backend Client - HTTP client for the storefront Backend Aggregation Service.

Catalog calls raise BackendError / BackendAuthError so the Data Access
Layer can decide whether to fall through to the next tier. Checkout and
login follow the fire-and-report style and return None on failure.
"""

from typing import Any

import httpx

from storefront.config import settings
from storefront.infra.logging import get_logger

logger = get_logger(__name__)

# Collections exposed by the backend (public listing + admin CRUD)
COLLECTIONS = ("products", "categories")


class BackendError(Exception):
    """Raised when the backend is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendAuthError(BackendError):
    """Raised on 401/403: missing, invalid or expired bearer token."""


class BackendRejectedError(BackendError):
    """Raised on other 4xx answers (404 aside): the backend refused the request,
    e.g. a 409 business-rule conflict or a 400 validation error."""


class BackendClient:
    """HTTP client for the storefront backend API."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize backend client.

        Args:
            base_url: Backend base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        self.base_url = base_url or settings.backend_url
        self.timeout = timeout if timeout is not None else settings.backend_timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and decode the JSON body.

        Raises:
            BackendAuthError: On 401/403
            BackendError: On any other error status or transport failure
        """
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        try:
            response = await client.request(method, path, json=json, headers=headers)
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning(
                "Backend returned error",
                method=method,
                path=path,
                status_code=status_code,
                response_text=e.response.text[:500],
            )
            if status_code in (401, 403):
                raise BackendAuthError(f"{method} {path} rejected", status_code) from e
            if 400 <= status_code < 500 and status_code != 404:
                raise BackendRejectedError(f"{method} {path} refused", status_code) from e
            raise BackendError(f"{method} {path} failed", status_code) from e

        except httpx.HTTPError as e:
            logger.warning(
                "Backend request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise BackendError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            # e.g. an HTML page served for an unknown route
            logger.warning(
                "Backend returned a non-JSON body",
                method=method,
                path=path,
                content_type=response.headers.get("content-type"),
            )
            raise BackendError(f"{method} {path} returned invalid JSON", response.status_code) from e

    @staticmethod
    def _collection_path(collection: str, admin: bool) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return f"/api/admin/{collection}" if admin else f"/api/{collection}"

    # =========================================================================
    # Catalog
    # =========================================================================

    async def list_collection(self, collection: str, token: str | None = None) -> list[dict[str, Any]]:
        """List a collection: admin view with a token, public (active only) without."""
        data = await self._request("GET", self._collection_path(collection, admin=token is not None), token=token)
        if data is None:
            return []
        if not isinstance(data, list):
            raise BackendError(f"Expected a list of {collection}, got {type(data).__name__}")
        return data

    async def create_entity(self, collection: str, payload: dict[str, Any], token: str | None) -> dict[str, Any]:
        """Create an entity through the admin API."""
        return await self._request(
            "POST", self._collection_path(collection, admin=True), token=token, json=payload
        )

    async def update_entity(
        self,
        collection: str,
        entity_id: str,
        payload: dict[str, Any],
        token: str | None,
    ) -> dict[str, Any] | None:
        """Update an entity. Returns None when the backend does not know it."""
        path = f"{self._collection_path(collection, admin=True)}/{entity_id}"
        try:
            return await self._request("PUT", path, token=token, json=payload)
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

    async def delete_entity(self, collection: str, entity_id: str, token: str | None) -> bool:
        """Delete an entity. Returns False when the backend does not know it."""
        path = f"{self._collection_path(collection, admin=True)}/{entity_id}"
        try:
            await self._request("DELETE", path, token=token)
        except BackendError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        """Fetch one product from the public API."""
        try:
            return await self._request("GET", f"/api/products/{product_id}")
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

    async def set_featured_product(self, product_id: str, token: str | None) -> dict[str, Any] | None:
        """Make one product the only featured product."""
        try:
            return await self._request("POST", f"/api/admin/products/{product_id}/feature", token=token)
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

    # =========================================================================
    # Checkout and admin
    # =========================================================================

    async def submit_order(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        """Submit a checkout order.

        Returns:
            The stored order, or None if the backend could not be reached
        """
        try:
            order = await self._request("POST", "/api/orders", json=payload)
            logger.info("Order submitted to backend", order_id=payload.get("id"))
            return order
        except BackendError as e:
            logger.error(
                "Failed to submit order to backend",
                order_id=payload.get("id"),
                status_code=e.status_code,
                error=str(e),
            )
            return None

    async def login(self, username: str, password: str) -> dict[str, Any] | None:
        """Exchange credentials for a bearer token.

        Returns:
            `{"token": ..., "user": {...}}`, or None on any failure
        """
        try:
            data = await self._request(
                "POST",
                "/api/admin/login",
                json={"username": username, "password": password},
            )
        except BackendError as e:
            logger.warning("Admin login failed", username=username, status_code=e.status_code)
            return None

        if not isinstance(data, dict) or not data.get("token") or not data.get("user"):
            logger.error("Invalid login response", username=username)
            return None
        return data

    async def get_dashboard(self, token: str | None) -> dict[str, Any]:
        return await self._request("GET", "/api/admin/dashboard", token=token)

    async def update_sales(self, amount: float, notes: str | None, token: str | None) -> dict[str, Any]:
        return await self._request(
            "PUT", "/api/admin/sales", token=token, json={"amount": amount, "notes": notes}
        )

    async def list_orders(self, token: str | None) -> list[dict[str, Any]]:
        return list(await self._request("GET", "/api/admin/orders", token=token) or [])

    async def update_order_status(
        self,
        order_id: str,
        token: str | None,
        status: str | None = None,
        notes: str | None = None,
    ) -> dict[str, Any] | None:
        payload: dict[str, Any] = {}
        if status is not None:
            payload["status"] = status
        if notes is not None:
            payload["notes"] = notes
        try:
            return await self._request("PATCH", f"/api/admin/orders/{order_id}", token=token, json=payload)
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

    async def health(self) -> bool:
        """Liveness probe of the backend."""
        try:
            await self._request("GET", "/api/health")
            return True
        except BackendError:
            return False


# Singleton instance
_backend_client: BackendClient | None = None


def get_backend_client() -> BackendClient:
    """Get backend client singleton."""
    global _backend_client
    if _backend_client is None:
        _backend_client = BackendClient()
    return _backend_client
