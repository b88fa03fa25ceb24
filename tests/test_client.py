"""
Tests for the Zuth Auth SDK transport

Bearer token injection and error normalization with mocked HTTP responses.
"""

import json

import httpx
import pytest
import respx

from zuth_auth import ZuthClient, ZuthConfig
from zuth_auth.errors import NetworkError, ZuthError, ZuthSDKError


BASE_URL = "https://api.zuth.test"


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def client() -> ZuthClient:
    """Transport with default configuration."""
    return ZuthClient(ZuthConfig(base_url=BASE_URL))


# =============================================================================
# Token Slot Tests
# =============================================================================

class TestTokenSlot:
    """Tests for the access token slot."""

    def test_initially_empty(self, client: ZuthClient):
        assert client.get_access_token() is None

    def test_set_and_clear(self, client: ZuthClient):
        client.set_access_token("token_123")
        assert client.get_access_token() == "token_123"

        client.clear_access_token()
        assert client.get_access_token() is None

    def test_set_none_clears(self, client: ZuthClient):
        client.set_access_token("token_123")
        client.set_access_token(None)
        assert client.get_access_token() is None

    def test_set_empty_string_clears(self, client: ZuthClient):
        """An empty token never counts as authenticated."""
        client.set_access_token("")
        assert client.get_access_token() is None

    def test_last_writer_wins(self, client: ZuthClient):
        client.set_access_token("first")
        client.set_access_token("second")
        assert client.get_access_token() == "second"


# =============================================================================
# Request Tests
# =============================================================================

class TestRequests:
    """Tests for request dispatch and decoding."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_bearer_header_attached(self, client: ZuthClient):
        """Token is sent as a bearer credential when set."""
        route = respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(200, json={"id": "user_123"})
        )
        client.set_access_token("token_123")

        await client.get("/auth/me")

        assert route.calls.last.request.headers["Authorization"] == "Bearer token_123"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_bearer_header_without_token(self, client: ZuthClient):
        route = respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(200, json={})
        )

        await client.get("/auth/me")

        assert "Authorization" not in route.calls.last.request.headers
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_token_read_at_dispatch(self, client: ZuthClient):
        """Each request sees the token current at the time it is sent."""
        route = respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(200, json={})
        )

        client.set_access_token("old")
        await client.get("/auth/me")
        client.set_access_token("new")
        await client.get("/auth/me")
        client.clear_access_token()
        await client.get("/auth/me")

        headers = [call.request.headers for call in route.calls]
        assert headers[0]["Authorization"] == "Bearer old"
        assert headers[1]["Authorization"] == "Bearer new"
        assert "Authorization" not in headers[2]
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_custom_headers_and_json_body(self):
        client = ZuthClient(ZuthConfig(base_url=BASE_URL, headers={"X-App": "demo"}))
        route = respx.post(f"{BASE_URL}/auth/login").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )

        result = await client.post("/auth/login", {"email": "a@b.co"})

        request = route.calls.last.request
        assert result == {"ok": True}
        assert request.headers["X-App"] == "demo"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"email": "a@b.co"}
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_query_params(self, client: ZuthClient):
        route = respx.get(f"{BASE_URL}/auth/sessions").mock(
            return_value=httpx.Response(200, json=[])
        )

        await client.get("/auth/sessions", params={"page": 2})

        assert route.calls.last.request.url.params["page"] == "2"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_body_decodes_to_none(self, client: ZuthClient):
        respx.post(f"{BASE_URL}/auth/logout").mock(return_value=httpx.Response(204))

        assert await client.post("/auth/logout") is None
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_text_body_returned_as_text(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/health").mock(
            return_value=httpx.Response(200, text="ok")
        )

        assert await client.get("/health") == "ok"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_retry(self, client: ZuthClient):
        """Failures are surfaced after exactly one attempt."""
        route = respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(503, json={"error": "ServiceUnavailable", "message": "down"})
        )

        with pytest.raises(ZuthSDKError):
            await client.get("/auth/me")

        assert route.call_count == 1
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_context_manager_closes(self):
        respx.get(f"{BASE_URL}/auth/me").mock(return_value=httpx.Response(200, json={}))

        async with ZuthClient(ZuthConfig(base_url=BASE_URL)) as client:
            await client.get("/auth/me")
            assert client._http_client is not None

        assert client._http_client is None


# =============================================================================
# Error Normalization Tests
# =============================================================================

class TestErrorNormalization:
    """Every failure reaches the caller as a ZuthSDKError."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_structured_error_payload(self, client: ZuthClient):
        respx.post(f"{BASE_URL}/auth/login").mock(
            return_value=httpx.Response(401, json={
                "error": "Unauthorized",
                "message": "Invalid email or password",
                "statusCode": 401,
                "details": {"attempts_left": 2},
            })
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.post("/auth/login", {"email": "a@b.co", "password": "x"})

        error = exc_info.value
        assert error.message == "Invalid email or password"
        assert error.status_code == 401
        assert error.error == "Unauthorized"
        assert error.code == "Unauthorized"
        assert error.details == {"attempts_left": 2}
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_payload_status_code_takes_precedence(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(400, json={"error": "Gone", "message": "m", "statusCode": 410})
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")
        assert exc_info.value.status_code == 410
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_boolean_status_code_ignored(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(403, json={"error": "Forbidden", "message": "m", "statusCode": True})
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")

        assert exc_info.value.status_code == 403
        assert exc_info.value.status_code is not True
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_partial_payload_defaults(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(403, json={"details": ["scope"]})
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")

        error = exc_info.value
        assert error.message == "An error occurred"
        assert error.status_code == 403
        assert error.error == "UnknownError"
        assert error.details == ["scope"]
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_with_malformed_body(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(
                500, content=b"<html>oops", headers={"content-type": "application/json"}
            )
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")

        error = exc_info.value
        assert type(error) is ZuthSDKError
        assert error.status_code == 500
        assert error.error == "UnknownError"
        assert error.message == "An error occurred"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_without_body(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(return_value=httpx.Response(502))

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")

        assert exc_info.value.status_code == 502
        assert exc_info.value.error == "UnknownError"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_object_json_body(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(500, json=["unexpected"])
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")
        assert exc_info.value.error == "UnknownError"
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exception", [
        httpx.ConnectError,
        httpx.ConnectTimeout,
        httpx.ReadTimeout,
        httpx.RemoteProtocolError,
    ])
    @respx.mock
    async def test_no_response_is_network_error(self, client: ZuthClient, exception):
        respx.get(f"{BASE_URL}/auth/me").mock(side_effect=exception)

        with pytest.raises(NetworkError) as exc_info:
            await client.get("/auth/me")

        error = exc_info.value
        assert isinstance(error, ZuthSDKError)
        assert not isinstance(error, httpx.HTTPError)
        assert error.status_code == 0
        assert error.error == "NetworkError"
        assert error.message == "Network error: Unable to reach the server"
        await client.close()

    @pytest.mark.asyncio
    async def test_unsendable_request_is_unknown_error(self, client: ZuthClient):
        """A body that cannot be encoded never reaches the network."""
        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(f"{BASE_URL}/auth/login")

            with pytest.raises(ZuthSDKError) as exc_info:
                await client.post("/auth/login", {"value": object()})

        error = exc_info.value
        assert not isinstance(error, NetworkError)
        assert error.status_code == 0
        assert error.error == "UnknownError"
        assert route.call_count == 0
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_success_with_invalid_json(self, client: ZuthClient):
        respx.get(f"{BASE_URL}/auth/me").mock(
            return_value=httpx.Response(
                200, content=b"{not json", headers={"content-type": "application/json"}
            )
        )

        with pytest.raises(ZuthSDKError) as exc_info:
            await client.get("/auth/me")

        assert exc_info.value.message == "Invalid JSON in response body"
        assert exc_info.value.status_code == 200
        await client.close()


# =============================================================================
# Error Class Tests
# =============================================================================

class TestErrors:
    """Tests for error classes."""

    def test_sdk_error_to_dict(self):
        error = ZuthSDKError("Bad input", 400, "BadRequest", {"field": "email"})

        error_dict = error.to_dict()

        assert error_dict["name"] == "ZuthSDKError"
        assert error_dict["code"] == "BadRequest"
        assert error_dict["message"] == "Bad input"
        assert error_dict["status_code"] == 400
        assert error_dict["details"]["field"] == "email"
        assert error_dict["timestamp"].endswith("Z")

    def test_network_error_shape(self):
        error = NetworkError()

        assert isinstance(error, ZuthError)
        assert error.status_code == 0
        assert error.error == "NetworkError"

    def test_from_api_response_with_garbage(self):
        error = ZuthSDKError.from_api_response("not a dict", 418)

        assert error.status_code == 418
        assert error.message == "An error occurred"
        assert error.error == "UnknownError"

    @pytest.mark.parametrize("reported", [True, False, "401", 0])
    def test_from_api_response_ignores_non_integer_status(self, reported):
        error = ZuthSDKError.from_api_response({"statusCode": reported}, 502)

        assert error.status_code == 502
        assert type(error.status_code) is int
