"""
Zuth Auth SDK Entry Point

Example:
    async with Zuth(ZuthConfig(base_url="https://api.zuth.example.com")) as zuth:
        await zuth.auth.login(LoginRequest(email="user@example.com", password="..."))
        user = await zuth.auth.get_current_user()
"""

import logging
from typing import Any, Optional

from .auth import ZuthAuth
from .client import ZuthClient
from .errors import ConfigurationError
from .oauth import ZuthOAuth
from .security import validate_secure_url
from .types import ZuthConfig


logger = logging.getLogger("zuth_auth")


class Zuth:
    """
    Main Zuth SDK class.

    Composes the HTTP client, authentication methods and OAuth flow. The
    access token is owned by ``client``; ``auth`` and ``oauth`` install it
    on login, code exchange and refresh.
    """

    def __init__(self, config: ZuthConfig) -> None:
        """
        Initialize the Zuth SDK.

        Raises:
            ConfigurationError: If base_url is missing
            InsecureUrlError: If require_https is set and base_url is not
                HTTPS (loopback hosts excepted)
        """
        if not config.base_url:
            raise ConfigurationError("base_url is required in Zuth configuration")

        base_url = config.base_url[:-1] if config.base_url.endswith("/") else config.base_url

        if config.require_https:
            validate_secure_url(base_url, allow_localhost=True)

        self._config = ZuthConfig(
            base_url=base_url,
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
            timeout=config.timeout,
            headers=config.headers,
            require_https=config.require_https,
            strict_state=config.strict_state,
            debug=config.debug,
        )

        self.client = ZuthClient(self._config)
        self.auth = ZuthAuth(self.client)
        self.oauth = ZuthOAuth(
            self.client,
            strict_state=config.strict_state,
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
        )

        if config.debug:
            logger.debug("[Zuth] SDK initialized for %s", base_url)

    @property
    def config(self) -> ZuthConfig:
        return self._config

    def set_access_token(self, token: Optional[str]) -> None:
        """
        Install an existing access token.

        Use this to restore a session persisted by the application.
        """
        self.client.set_access_token(token)

    def is_authenticated(self) -> bool:
        """Check if an access token is set."""
        return self.client.get_access_token() is not None

    def clear_auth(self) -> None:
        """Clear authentication state."""
        self.client.clear_access_token()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()

    async def __aenter__(self) -> "Zuth":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


def create_zuth(config: ZuthConfig) -> Zuth:
    """Create a new Zuth SDK instance."""
    return Zuth(config)
