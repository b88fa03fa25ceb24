"""
Security utilities for Zuth Auth SDK

- Cryptographically random OAuth state values
- Constant-time state comparison for CSRF protection
- Redirect URI allow-listing against open redirects
- HTTPS enforcement for API endpoints

The input helpers at the bottom (is_valid_email, is_valid_password,
sanitize_input) are best-effort client-side guards. They improve error
messages for honest users and are not a security boundary; the server
validates everything again.
"""

import hmac
import re
import secrets
from typing import Iterable, Optional
from urllib.parse import urlsplit

from .errors import CSRFError, InsecureUrlError, RedirectError


# 32 random bytes, rendered as 64 hex characters
STATE_BYTES = 32

DEFAULT_PORTS = {"http": 80, "https": 443}
LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})

EMAIL_REGEX = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
HTML_TAG_REGEX = re.compile(r"<[^>]*>")
UNSAFE_CHARS_REGEX = re.compile(r"[<>'\"]")


def generate_oauth_state() -> str:
    """Generate a random OAuth state value (64 hex characters) from the OS CSPRNG."""
    return secrets.token_hex(STATE_BYTES)


def safe_compare(a: str, b: str) -> bool:
    """Timing-safe string comparison. Exact: no case folding, no trimming."""
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def validate_oauth_state(received_state: Optional[str], original_state: str) -> None:
    """
    Validate the state returned by the authorization server.

    Args:
        received_state: State from the callback URL (None if absent)
        original_state: State sent with the authorization request

    Raises:
        CSRFError: If the state is missing or does not match exactly
    """
    if not received_state:
        raise CSRFError(
            "OAuth state parameter is missing. This may indicate a CSRF attack.",
            code="STATE_MISSING",
        )

    if not safe_compare(received_state, original_state):
        raise CSRFError(
            "OAuth state parameter mismatch. This may indicate a CSRF attack.",
            code="STATE_MISMATCH",
        )


def get_origin(url: str) -> str:
    """
    Compute the origin (scheme://host[:port]) of a URL.

    Scheme and host are lowercased and default ports are omitted, so
    ``https://App.test:443/cb`` has origin ``https://app.test``.

    Raises:
        ValueError: If the URL has no scheme or host, or an invalid port
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        raise ValueError(f"URL has no scheme or host: {url!r}")

    port = parts.port
    if ":" in host:
        host = f"[{host}]"

    origin = f"{scheme}://{host}"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        origin = f"{origin}:{port}"
    return origin


def validate_redirect_uri(redirect_uri: str, allowed_origins: Iterable[str]) -> None:
    """
    Validate a redirect URI against an origin allow-list.

    Malformed URIs fail with the same error as disallowed ones so callers
    only ever branch on RedirectError.

    Raises:
        RedirectError: If the URI is malformed or its origin is not allowed
    """
    allowed = set(allowed_origins)

    try:
        origin = get_origin(redirect_uri)
    except (ValueError, TypeError, AttributeError):
        raise RedirectError(
            f"Invalid redirect URI: {redirect_uri}", redirect_uri=redirect_uri
        ) from None

    if origin not in allowed:
        raise RedirectError(
            f"Redirect URI {redirect_uri} is not in the allowed origins list. "
            f"Allowed origins: {', '.join(sorted(allowed))}",
            redirect_uri=redirect_uri,
        )


def validate_secure_url(url: str, allow_localhost: bool = True) -> None:
    """
    Validate that a URL uses HTTPS.

    Args:
        url: URL to validate
        allow_localhost: Accept any scheme for loopback hosts (development)

    Raises:
        InsecureUrlError: If the URL is malformed or not HTTPS
    """
    try:
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        host = parts.hostname
    except (ValueError, TypeError, AttributeError):
        raise InsecureUrlError(f"Invalid URL: {url}", url=url) from None

    if not scheme or not host:
        raise InsecureUrlError(f"Invalid URL: {url}", url=url)

    if allow_localhost and host in LOOPBACK_HOSTS:
        return

    if scheme != "https":
        raise InsecureUrlError(
            "Insecure URL detected. HTTPS is required in production. "
            "Use https:// for your base_url in production environments.",
            url=url,
        )


def sanitize_input(value: str) -> str:
    """Strip HTML tags and quote/angle characters, then trim whitespace."""
    value = HTML_TAG_REGEX.sub("", value)
    value = UNSAFE_CHARS_REGEX.sub("", value)
    return value.strip()


def is_valid_email(email: str) -> bool:
    """Check basic email shape (local@domain.tld)."""
    return bool(EMAIL_REGEX.fullmatch(email))


def is_valid_password(password: str, min_length: int = 8) -> bool:
    """Check minimum password length."""
    return len(password) >= min_length
