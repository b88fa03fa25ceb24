"""
Zuth Auth SDK Error Classes

Every failure raised by the SDK is a ZuthError subclass. Transport and
server failures are normalized into ZuthSDKError; the remaining classes are
raised locally before any network call is made.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ZuthError(Exception):
    """Base error class for Zuth Auth SDK."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 0,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ZuthSDKError(ZuthError):
    """
    Normalized transport or server failure.

    ``error`` carries the error kind reported by the server (or
    ``"NetworkError"`` / ``"UnknownError"`` for local failures) and
    ``status_code`` is 0 whenever no HTTP response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        error: str = "UnknownError",
        details: Optional[Any] = None,
    ):
        super().__init__(error, message, status_code, details)
        self.error = error

    @classmethod
    def from_api_response(cls, payload: Any, status_code: int) -> "ZuthSDKError":
        """Create error from a server error body of shape {error, message, statusCode, details}."""
        body = payload if isinstance(payload, dict) else {}
        message = body.get("message")
        error = body.get("error")
        reported_status = body.get("statusCode")
        if isinstance(reported_status, bool):
            reported_status = None
        return cls(
            message=message if isinstance(message, str) and message else "An error occurred",
            status_code=reported_status if isinstance(reported_status, int) and reported_status else status_code,
            error=error if isinstance(error, str) and error else "UnknownError",
            details=body.get("details"),
        )


class NetworkError(ZuthSDKError):
    """Request was sent but no response arrived (connection issues, timeouts)."""

    def __init__(
        self,
        message: str = "Network error: Unable to reach the server",
        details: Optional[Any] = None,
    ):
        super().__init__(message, 0, "NetworkError", details)


class CSRFError(ZuthError):
    """OAuth state parameter missing or mismatched."""

    def __init__(self, message: str, code: str = "STATE_MISMATCH"):
        super().__init__(code, message)


class RedirectError(ZuthError):
    """Redirect URI is malformed or its origin is not allow-listed."""

    def __init__(self, message: str, redirect_uri: Optional[str] = None):
        super().__init__(
            "REDIRECT_NOT_ALLOWED",
            message,
            details={"redirect_uri": redirect_uri} if redirect_uri is not None else None,
        )
        self.redirect_uri = redirect_uri


class InsecureUrlError(ZuthError):
    """URL does not use HTTPS outside of a loopback host."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(
            "INSECURE_URL",
            message,
            details={"url": url} if url is not None else None,
        )
        self.url = url


class OAuthError(ZuthError):
    """
    OAuth callback rejected.

    ``code`` is the provider's error code (``access_denied``, ...) or
    ``CODE_NOT_FOUND`` when the callback carried neither error nor code, or
    ``INVALID_CALLBACK_URL`` when the callback URL could not be parsed.
    """

    def __init__(
        self,
        message: str,
        code: str = "OAUTH_ERROR",
        error_description: Optional[str] = None,
    ):
        super().__init__(
            code,
            message,
            details={"error_description": error_description} if error_description else None,
        )
        self.error_description = error_description


class BrowserEnvironmentError(ZuthError):
    """A browser-only operation was invoked where no browser is available."""

    def __init__(self, message: str):
        super().__init__("BROWSER_UNAVAILABLE", message)


class ConfigurationError(ZuthError):
    """Configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, 0, details)


class ValidationError(ZuthError):
    """Client-side input validation error (invalid email, short password)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code, message, 0, details)


class StateNotValidatedWarning(UserWarning):
    """Callback carried a state but the caller supplied nothing to check it against."""


def is_zuth_error(error: Any) -> bool:
    """Check if error is a ZuthError."""
    return isinstance(error, ZuthError)
