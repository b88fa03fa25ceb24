"""
Zuth Auth SDK Transport

Base HTTP client for the Zuth API. Owns the single bearer-token slot,
attaches it to every outgoing request and normalizes every failure into a
ZuthSDKError. No retries: callers decide their own retry policy.
"""

import logging
from typing import Any, Dict, Literal, Optional

import httpx

from .errors import NetworkError, ZuthSDKError
from .types import ZuthConfig


logger = logging.getLogger("zuth_auth")

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


class ZuthClient:
    """
    Async HTTP client for the Zuth API.

    The access token lives here and only here. Other components read and
    write it through set_access_token / get_access_token / clear_access_token.
    """

    def __init__(self, config: ZuthConfig) -> None:
        self._base_url = config.base_url
        self._timeout = config.timeout
        self._debug = config.debug
        self._custom_headers = dict(config.headers or {})

        # State
        self._access_token: Optional[str] = None

        # HTTP client (created lazily)
        self._http_client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def debug(self) -> bool:
        return self._debug

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug("[Zuth] " + message, *args)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    # =========================================================================
    # Token Slot
    # =========================================================================

    def set_access_token(self, token: Optional[str]) -> None:
        """Set the access token for authenticated requests (None clears it)."""
        self._access_token = token or None
        self._log("Access token %s", "set" if self._access_token else "cleared")

    def get_access_token(self) -> Optional[str]:
        """Get the current access token."""
        return self._access_token

    def clear_access_token(self) -> None:
        """Clear the access token."""
        self.set_access_token(None)

    # =========================================================================
    # Requests
    # =========================================================================

    async def request(
        self,
        method: HttpMethod,
        path: str,
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method
            path: Path relative to the base URL, starting with "/"
            body: JSON-serializable request body
            params: Query string parameters
            headers: Per-request headers, merged over the configured ones

        Returns:
            Decoded JSON body, response text for non-JSON bodies, or None
            for an empty body

        Raises:
            NetworkError: If the request was sent but no response arrived
            ZuthSDKError: For error responses and requests that could not be sent
        """
        url = f"{self._base_url}{path}"
        request_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            **self._custom_headers,
            **(headers or {}),
        }

        # Read at dispatch time
        access_token = self._access_token
        if access_token:
            request_headers["Authorization"] = f"Bearer {access_token}"

        self._log("%s %s", method, path)

        try:
            response = await self._get_client().request(
                method=method,
                url=url,
                headers=request_headers,
                json=body,
                params=params,
            )
        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as e:
            raise ZuthSDKError(str(e) or "An unexpected error occurred") from e
        except httpx.TransportError as e:
            self._log("Network failure: %s", type(e).__name__)
            raise NetworkError() from e
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            raise ZuthSDKError(str(e) or "An unexpected error occurred") from e
        except (TypeError, ValueError) as e:
            # Body could not be encoded
            raise ZuthSDKError(str(e) or "An unexpected error occurred") from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decode a successful response or convert an error response to ZuthSDKError."""
        if response.is_success:
            return self._decode_body(response)

        try:
            payload = response.json()
        except ValueError:
            payload = None

        error = ZuthSDKError.from_api_response(payload, response.status_code)
        self._log("Request failed: %s (%s)", error.error, error.status_code)
        raise error

    def _decode_body(self, response: httpx.Response) -> Any:
        if not response.content:
            return None

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            return response.text

        try:
            return response.json()
        except ValueError as e:
            raise ZuthSDKError(
                "Invalid JSON in response body", response.status_code, "UnknownError"
            ) from e

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Optional[Any] = None) -> Any:
        """Make a POST request."""
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: Optional[Any] = None) -> Any:
        """Make a PUT request."""
        return await self.request("PUT", path, body=body)

    async def patch(self, path: str, body: Optional[Any] = None) -> Any:
        """Make a PATCH request."""
        return await self.request("PATCH", path, body=body)

    async def delete(self, path: str) -> Any:
        """Make a DELETE request."""
        return await self.request("DELETE", path)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "ZuthClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
