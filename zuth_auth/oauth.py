"""
Zuth Auth SDK OAuth 2.0 / OIDC

Authorization code flow for the Zuth identity server:

    build_authorization_url / redirect_to_authorization
        -> user authorizes in the browser
        -> identity server redirects to the callback URL
    handle_callback
        -> error check, code check, CSRF state check
        -> exchange_code_for_token (token installed into the client)

The SDK keeps nothing across the browser redirect. The caller persists the
state returned by build_authorization_url and passes it back to
handle_callback as ``original_state``.
"""

import logging
import warnings
import webbrowser
from typing import Any, Dict, Iterable, Optional
from urllib.parse import parse_qs, urlencode, urlsplit

from .client import ZuthClient
from .errors import (
    BrowserEnvironmentError,
    ConfigurationError,
    CSRFError,
    OAuthError,
    StateNotValidatedWarning,
)
from .security import generate_oauth_state, get_origin, validate_oauth_state, validate_redirect_uri
from .types import (
    DEFAULT_SCOPE,
    AuthorizationCallback,
    AuthorizationUrl,
    OAuthAuthorizeParams,
    OAuthTokenRequest,
    OAuthTokenResponse,
)


logger = logging.getLogger("zuth_auth")

AUTHORIZE_PATH = "/oauth/authorize"
TOKEN_PATH = "/oauth/token"
OIDC_DISCOVERY_PATH = "/.well-known/openid-configuration"


class ZuthOAuth:
    """OAuth and OIDC methods for the Zuth SDK."""

    def __init__(
        self,
        client: ZuthClient,
        strict_state: bool = False,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
    ) -> None:
        self._client = client
        self._strict_state = strict_state
        # Defaults from ZuthConfig, used when a call omits them
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri

    def _log(self, message: str, *args: Any) -> None:
        if self._client.debug:
            logger.debug("[Zuth] " + message, *args)

    # =========================================================================
    # Authorization Request
    # =========================================================================

    def build_authorization_url(
        self,
        params: Optional[OAuthAuthorizeParams] = None,
        allowed_origins: Optional[Iterable[str]] = None,
    ) -> AuthorizationUrl:
        """
        Build the authorization URL for the identity server.

        Args:
            params: Authorization parameters. Defaults to the configured
                client_id and redirect_uri. A state is generated when
                params.state is empty.
            allowed_origins: If given, params.redirect_uri must belong to one
                of these origins

        Returns:
            AuthorizationUrl(url, state). Persist ``state`` until the callback.

        Raises:
            ConfigurationError: If params is omitted and client_id or
                redirect_uri is not configured
            RedirectError: If the redirect URI is not allow-listed
        """
        if params is None:
            params = self._default_authorize_params()

        if allowed_origins is not None:
            validate_redirect_uri(params.redirect_uri, allowed_origins)

        state = params.state or generate_oauth_state()
        query = urlencode([
            ("client_id", params.client_id),
            ("redirect_uri", params.redirect_uri),
            ("response_type", params.response_type or "code"),
            ("scope", params.scope or DEFAULT_SCOPE),
            ("state", state),
        ])

        self._log("Authorization URL built for client %s", params.client_id)
        return AuthorizationUrl(f"{self._client.base_url}{AUTHORIZE_PATH}?{query}", state)

    def redirect_to_authorization(
        self,
        params: Optional[OAuthAuthorizeParams] = None,
        allowed_origins: Optional[Iterable[str]] = None,
    ) -> str:
        """
        Open the authorization page in the user's web browser.

        Returns:
            The state to persist until the callback arrives

        Raises:
            BrowserEnvironmentError: If no web browser is available
            ConfigurationError: If params is omitted and client_id or
                redirect_uri is not configured
            RedirectError: If the redirect URI is not allow-listed
        """
        browser = self._get_browser()
        authorization = self.build_authorization_url(params, allowed_origins)

        if not browser.open(authorization.url):
            raise BrowserEnvironmentError("The web browser refused to open the authorization URL")

        self._log("Redirected to authorization page")
        return authorization.state

    def _default_authorize_params(self) -> OAuthAuthorizeParams:
        if not self._client_id or not self._redirect_uri:
            raise ConfigurationError(
                "client_id and redirect_uri must be configured to build an authorization URL"
            )
        return OAuthAuthorizeParams(client_id=self._client_id, redirect_uri=self._redirect_uri)

    @staticmethod
    def _get_browser() -> webbrowser.BaseBrowser:
        try:
            return webbrowser.get()
        except webbrowser.Error:
            raise BrowserEnvironmentError(
                "redirect_to_authorization can only be used where a web browser is available"
            ) from None

    # =========================================================================
    # Callback
    # =========================================================================

    def parse_callback(self, url: str) -> AuthorizationCallback:
        """
        Parse the query of a callback URL. No network call.

        Raises:
            OAuthError: If the URL cannot be parsed (code INVALID_CALLBACK_URL)
        """
        try:
            parts = urlsplit(url)
            query = parse_qs(parts.query, keep_blank_values=True)
        except (TypeError, ValueError) as e:
            raise OAuthError("Invalid callback URL", code="INVALID_CALLBACK_URL") from e

        def first(name: str) -> Optional[str]:
            values = query.get(name)
            return values[0] if values else None

        try:
            redirect_uri = get_origin(url) + parts.path
        except ValueError:
            redirect_uri = parts.path

        return AuthorizationCallback(
            code=first("code"),
            error=first("error"),
            error_description=first("error_description"),
            state=first("state"),
            redirect_uri=redirect_uri,
        )

    async def handle_callback(
        self,
        url: str,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        original_state: Optional[str] = None,
    ) -> OAuthTokenResponse:
        """
        Handle the OAuth callback and exchange the code for a token.

        Args:
            url: Callback URL the identity server redirected to
            client_id: Client ID. Defaults to the configured client_id.
            client_secret: Client secret (not recommended for public clients).
                Defaults to the configured client_secret.
            redirect_uri: Redirect URI used in authorization. Defaults to the
                configured redirect_uri, then to the callback URL without its
                query string.
            original_state: State returned by build_authorization_url. When
                omitted, a callback carrying a state triggers
                StateNotValidatedWarning (or CSRFError in strict mode).

        Returns:
            Token response. The access token is already installed.

        Raises:
            ConfigurationError: If no client_id is given or configured
            OAuthError: If the callback URL is malformed or carries an error or no code
            CSRFError: If the state is missing or does not match
            ZuthSDKError: If the exchange fails
        """
        client_id = self._require_client_id(client_id)
        callback = self.parse_callback(url)

        if callback.error:
            self._log("Authorization rejected: %s", callback.error)
            raise OAuthError(
                f"OAuth error: {callback.error}",
                code=callback.error,
                error_description=callback.error_description,
            )

        if not callback.code:
            raise OAuthError("Authorization code not found in callback URL", code="CODE_NOT_FOUND")

        if original_state is not None:
            validate_oauth_state(callback.state, original_state)
        elif self._strict_state:
            raise CSRFError(
                "No original state supplied to validate the callback against.",
                code="STATE_NOT_VALIDATED",
            )
        elif callback.state:
            message = (
                "OAuth callback carries a state but no original_state was supplied; "
                "the state was not validated. Pass original_state to enable CSRF protection."
            )
            logger.warning("[Zuth] %s", message)
            warnings.warn(message, StateNotValidatedWarning, stacklevel=2)

        return await self.exchange_code_for_token(OAuthTokenRequest(
            code=callback.code,
            client_id=client_id,
            client_secret=client_secret or self._client_secret,
            redirect_uri=redirect_uri or self._redirect_uri or callback.redirect_uri,
        ))

    # =========================================================================
    # Token Endpoint
    # =========================================================================

    async def exchange_code_for_token(self, data: OAuthTokenRequest) -> OAuthTokenResponse:
        """
        Exchange an authorization code for tokens.

        A non-empty access token in the response is installed into the client,
        so subsequent requests are authenticated without any caller step.
        """
        response = await self._client.post(TOKEN_PATH, data.to_dict())
        return self._install_tokens(response)

    async def refresh_token(
        self, refresh_token: str, client_id: Optional[str] = None
    ) -> OAuthTokenResponse:
        """
        Get a new access token using a refresh token.

        The new access token is installed into the client. client_id
        defaults to the configured one.
        """
        client_id = self._require_client_id(client_id)
        response = await self._client.post(TOKEN_PATH, {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": client_id,
        })
        return self._install_tokens(response)

    def _require_client_id(self, client_id: Optional[str]) -> str:
        client_id = client_id or self._client_id
        if not client_id:
            raise ConfigurationError("client_id is required: pass it or set it in ZuthConfig")
        return client_id

    def _install_tokens(self, payload: Any) -> OAuthTokenResponse:
        tokens = OAuthTokenResponse.from_dict(payload if isinstance(payload, dict) else {})
        if tokens.access_token:
            self._client.set_access_token(tokens.access_token)
            self._log("Token exchanged")
        return tokens

    async def get_oidc_configuration(self) -> Dict[str, Any]:
        """Fetch the OIDC discovery document, returned as-is."""
        return await self._client.get(OIDC_DISCOVERY_PATH)
