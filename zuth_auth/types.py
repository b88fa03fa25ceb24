"""
Zuth Auth SDK Type Definitions

Configuration plus typed views over the JSON payloads exchanged with the
Zuth API. Server payloads are parsed leniently: unknown keys are ignored and
missing optional keys fall back to defaults.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, NamedTuple, Optional

from .errors import ConfigurationError


DEFAULT_TIMEOUT = 30.0
DEFAULT_SCOPE = "openid profile email"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ZuthConfig:
    """SDK configuration options."""

    # Base URL of the Zuth API server (required)
    base_url: str
    # Client ID for OAuth applications
    client_id: Optional[str] = None
    # Client secret (not recommended for public clients)
    client_secret: Optional[str] = None
    # Default redirect URI for OAuth flows
    redirect_uri: Optional[str] = None
    # Request timeout in seconds (default: 30)
    timeout: float = DEFAULT_TIMEOUT
    # Custom headers to include in all requests
    headers: Optional[Dict[str, str]] = None
    # Reject non-HTTPS base URLs (loopback hosts excepted)
    require_https: bool = True
    # Treat an unchecked callback state as a CSRF failure instead of a warning
    strict_state: bool = False
    # Enable debug logging (default: False)
    debug: bool = False

    @classmethod
    def from_env(cls, prefix: str = "ZUTH_") -> "ZuthConfig":
        """
        Load configuration from environment variables.

        Required:
            ZUTH_BASE_URL

        Optional:
            ZUTH_CLIENT_ID, ZUTH_CLIENT_SECRET, ZUTH_REDIRECT_URI,
            ZUTH_TIMEOUT (seconds), ZUTH_DEBUG (1/true/yes/on)

        Raises:
            ConfigurationError: If ZUTH_BASE_URL is missing or ZUTH_TIMEOUT
                is not a number
        """
        base_url = os.environ.get(f"{prefix}BASE_URL")
        if not base_url:
            raise ConfigurationError(f"Missing Zuth configuration. Set {prefix}BASE_URL")

        raw_timeout = os.environ.get(f"{prefix}TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"{prefix}TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from None

        return cls(
            base_url=base_url,
            client_id=os.environ.get(f"{prefix}CLIENT_ID") or None,
            client_secret=os.environ.get(f"{prefix}CLIENT_SECRET") or None,
            redirect_uri=os.environ.get(f"{prefix}REDIRECT_URI") or None,
            timeout=timeout,
            debug=os.environ.get(f"{prefix}DEBUG", "").strip().lower() in _TRUTHY,
        )


@dataclass
class Organization:
    """Organization the user belongs to."""

    id: str
    name: str
    setup_completed: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Organization":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            setup_completed=data.get("setup_completed"),
        )


@dataclass
class User:
    """User data returned from API."""

    id: str
    email: str
    name: Optional[str] = None
    role: str = "user"
    organization: Optional[Organization] = None
    mfa_enabled: bool = False
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary."""
        org_data = data.get("organization")
        return cls(
            id=data.get("id", ""),
            email=data.get("email", ""),
            name=data.get("name"),
            role=data.get("role", "user"),
            organization=Organization.from_dict(org_data) if org_data else None,
            mfa_enabled=data.get("mfaEnabled", data.get("mfa_enabled", False)),
            created_at=data.get("createdAt", data.get("created_at", "")),
        )


@dataclass
class Device:
    """Device the login was performed from."""

    id: str
    fingerprint: str
    last_used_at: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        return cls(
            id=data.get("id", ""),
            fingerprint=data.get("fingerprint", ""),
            last_used_at=data.get("lastUsedAt", data.get("last_used_at", "")),
        )


@dataclass
class LoginResponse:
    """Login result containing the access token and user data."""

    access_token: str
    user: Optional[User] = None
    device: Optional[Device] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoginResponse":
        user_data = data.get("user")
        device_data = data.get("device")
        return cls(
            access_token=data.get("access_token") or "",
            user=User.from_dict(user_data) if user_data else None,
            device=Device.from_dict(device_data) if device_data else None,
        )


@dataclass
class RegisterRequest:
    """User registration data."""

    email: str
    password: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API requests."""
        result: Dict[str, Any] = {
            "email": self.email,
            "password": self.password,
        }
        if self.name is not None:
            result["name"] = self.name
        return result


@dataclass
class LoginRequest:
    """User login credentials."""

    email: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email, "password": self.password}


@dataclass
class Session:
    """An active login session."""

    id: str
    device: str = ""
    ip_address: str = ""
    last_used_at: str = ""
    is_current: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            id=data.get("id", ""),
            device=data.get("device", ""),
            ip_address=data.get("ipAddress", data.get("ip_address", "")),
            last_used_at=data.get("lastUsedAt", data.get("last_used_at", "")),
            is_current=bool(data.get("isCurrent", data.get("is_current", False))),
        )


@dataclass
class SessionCheck:
    """Outcome of a session check. An expired session is ``valid=False``, not an error."""

    valid: bool
    user: Optional[User] = None


@dataclass
class MfaSetupResponse:
    """MFA setup data with QR code and manual entry key."""

    qr_code: str
    manual_entry_key: str
    backup_codes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MfaSetupResponse":
        return cls(
            qr_code=data.get("qrCode", data.get("qr_code", "")),
            manual_entry_key=data.get("manualEntryKey", data.get("manual_entry_key", "")),
            backup_codes=data.get("backupCodes", data.get("backup_codes")) or [],
        )


@dataclass
class MfaVerifyRequest:
    """MFA verification data."""

    code: str
    factor_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"code": self.code}
        if self.factor_id is not None:
            result["factorId"] = self.factor_id
        return result


ResponseType = Literal["code", "token"]
GrantType = Literal["authorization_code", "refresh_token"]


@dataclass
class OAuthAuthorizeParams:
    """Parameters of one OAuth authorization request."""

    client_id: str
    redirect_uri: str
    response_type: ResponseType = "code"
    scope: str = DEFAULT_SCOPE
    state: Optional[str] = None


class AuthorizationUrl(NamedTuple):
    """Authorization URL together with the state the caller must persist."""

    url: str
    state: str


@dataclass
class AuthorizationCallback:
    """Parsed query of the URL the identity server redirected back to."""

    code: Optional[str] = None
    error: Optional[str] = None
    error_description: Optional[str] = None
    state: Optional[str] = None
    # Callback URL without its query, the default redirect_uri for the exchange
    redirect_uri: str = ""


@dataclass
class OAuthTokenRequest:
    """Authorization code exchange data."""

    code: str
    client_id: str
    redirect_uri: str
    client_secret: Optional[str] = None
    grant_type: GrantType = "authorization_code"

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "grant_type": self.grant_type,
            "code": self.code,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
        }
        if self.client_secret:
            result["client_secret"] = self.client_secret
        return result


@dataclass
class OAuthTokenResponse:
    """Token endpoint result from a code exchange or refresh."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    id_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OAuthTokenResponse":
        """Create from dictionary."""
        return cls(
            access_token=data.get("access_token") or "",
            token_type=data.get("token_type", "Bearer"),
            expires_in=data.get("expires_in", 0),
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
            id_token=data.get("id_token"),
        )
