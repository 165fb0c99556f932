"""Tests for backend client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from storefront.services.backend_client import (
    BackendAuthError,
    BackendClient,
    BackendError,
    BackendRejectedError,
    get_backend_client,
)
from tests.fakes import mock_backend


def mock_response(status_code: int = 200, body=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = b"" if body is None else b"{}"
    response.json = MagicMock(return_value=body)
    response.text = "error body"
    if status_code >= 400:
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                "Error",
                request=MagicMock(),
                response=response,
            )
        )
    else:
        response.raise_for_status = MagicMock()
    return response


class TestBackendClient:
    """Tests for BackendClient."""

    @pytest.fixture
    def client(self) -> BackendClient:
        """Create a backend client instance."""
        return BackendClient(base_url="http://test-backend:3001", timeout=10.0)

    @pytest.mark.asyncio
    async def test_list_public_collection(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(body=[{"id": "a"}]))
            mock_get_client.return_value = mock_http_client

            rows = await client.list_collection("products")

            assert rows == [{"id": "a"}]
            call_args = mock_http_client.request.call_args
            assert call_args[0] == ("GET", "/api/products")
            assert call_args[1]["headers"] == {}

    @pytest.mark.asyncio
    async def test_list_admin_collection_sends_bearer(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(body=[]))
            mock_get_client.return_value = mock_http_client

            await client.list_collection("categories", token="tok")

            call_args = mock_http_client.request.call_args
            assert call_args[0] == ("GET", "/api/admin/categories")
            assert call_args[1]["headers"] == {"Authorization": "Bearer tok"}

    @pytest.mark.asyncio
    async def test_unknown_collection(self, client: BackendClient):
        with pytest.raises(ValueError):
            await client.list_collection("orders")

    @pytest.mark.asyncio
    async def test_create_entity_payload(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(201, {"id": "a"}))
            mock_get_client.return_value = mock_http_client

            await client.create_entity("products", {"id": "a", "name": "X"}, "tok")

            call_args = mock_http_client.request.call_args
            assert call_args[0] == ("POST", "/api/admin/products")
            assert call_args[1]["json"] == {"id": "a", "name": "X"}

    @pytest.mark.asyncio
    async def test_auth_error(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(403))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(BackendAuthError) as exc_info:
                await client.delete_entity("products", "a", "expired")

            assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_update_missing_entity_returns_none(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(404))
            mock_get_client.return_value = mock_http_client

            assert await client.update_entity("products", "a", {}, "tok") is None

    @pytest.mark.asyncio
    async def test_delete_no_content(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(204))
            mock_get_client.return_value = mock_http_client

            assert await client.delete_entity("products", "a", "tok") is True

    @pytest.mark.asyncio
    async def test_connection_error(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(BackendError) as exc_info:
                await client.list_collection("products")

            assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_set_featured_product(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(body={"id": "b"}))
            mock_get_client.return_value = mock_http_client

            result = await client.set_featured_product("b", "tok")

            assert result == {"id": "b"}
            assert mock_http_client.request.call_args[0] == ("POST", "/api/admin/products/b/feature")

    @pytest.mark.asyncio
    async def test_submit_order_failure_returns_none(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(500))
            mock_get_client.return_value = mock_http_client

            assert await client.submit_order({"id": "BOT-1234"}) is None

    @pytest.mark.asyncio
    async def test_login_success(self, client: BackendClient):
        body = {"token": "tok", "user": {"id": "admin-1", "username": "admin", "name": "Administrador"}}
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(body=body))
            mock_get_client.return_value = mock_http_client

            assert await client.login("admin", "secret") == body
            assert mock_http_client.request.call_args[1]["json"] == {
                "username": "admin",
                "password": "secret",
            }

    @pytest.mark.asyncio
    async def test_login_rejected(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(401))
            mock_get_client.return_value = mock_http_client

            assert await client.login("admin", "wrong") is None

    @pytest.mark.asyncio
    async def test_update_order_status_payload(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(return_value=mock_response(body={"id": "BOT-1"}))
            mock_get_client.return_value = mock_http_client

            await client.update_order_status("BOT-1", "tok", status="confirmed")

            call_args = mock_http_client.request.call_args
            assert call_args[0] == ("PATCH", "/api/admin/orders/BOT-1")
            assert call_args[1]["json"] == {"status": "confirmed"}

    @pytest.mark.asyncio
    async def test_health(self, client: BackendClient):
        with patch.object(client, '_get_client') as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(side_effect=httpx.ReadTimeout("timeout"))
            mock_get_client.return_value = mock_http_client

            assert await client.health() is False

    @pytest.mark.asyncio
    async def test_close(self, client: BackendClient):
        mock_http_client = AsyncMock()
        client._client = mock_http_client

        await client.close()

        mock_http_client.aclose.assert_called_once()
        assert client._client is None


class TestBackendClientResponses:
    """Tests for how BackendClient reads real HTTP responses."""

    @staticmethod
    def html_page(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>storefront</html>", headers={"content-type": "text/html"})

    @pytest.mark.asyncio
    async def test_non_json_list_is_backend_error(self):
        client = mock_backend(self.html_page)

        with pytest.raises(BackendError) as exc_info:
            await client.list_collection("products")

        assert exc_info.value.status_code == 200
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_order_submission_returns_none(self):
        client = mock_backend(self.html_page)

        assert await client.submit_order({"id": "BOT-1234"}) is None
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_login_returns_none(self):
        client = mock_backend(self.html_page)

        assert await client.login("admin", "secret") is None
        await client.close()

    @pytest.mark.asyncio
    async def test_object_instead_of_list(self):
        client = mock_backend(lambda request: httpx.Response(200, json={"error": "maintenance"}))

        with pytest.raises(BackendError):
            await client.list_collection("categories")
        await client.close()

    @pytest.mark.asyncio
    async def test_conflict_is_rejection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer tok"
            return httpx.Response(409, json={"error": "Category has products"})

        client = mock_backend(handler)

        with pytest.raises(BackendRejectedError) as exc_info:
            await client.delete_entity("categories", "cabelos", token="tok")

        assert exc_info.value.status_code == 409
        await client.close()

    @pytest.mark.asyncio
    async def test_not_found_is_not_rejection(self):
        client = mock_backend(lambda request: httpx.Response(404, json={"error": "Not found"}))

        assert await client.delete_entity("categories", "cabelos", token="tok") is False
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_is_plain_backend_error(self):
        client = mock_backend(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(BackendError) as exc_info:
            await client.list_collection("products")

        assert not isinstance(exc_info.value, BackendRejectedError)
        assert exc_info.value.status_code == 503
        await client.close()


class TestBackendClientSingleton:
    """Tests for get_backend_client singleton."""

    def test_returns_same_instance(self):
        assert get_backend_client() is get_backend_client()
