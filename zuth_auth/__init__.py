"""
Zuth Auth Python SDK

Async Python SDK for the Zuth authentication service: password login and
registration, sessions, MFA and the OAuth 2.0 / OIDC authorization code
flow with CSRF state validation.

The SDK never persists tokens. Store the access token (and the OAuth state
across a browser redirect) yourself and restore it with set_access_token.
"""

from .sdk import Zuth, create_zuth
from .client import ZuthClient
from .auth import ZuthAuth, MFANamespace
from .oauth import ZuthOAuth
from .types import (
    ZuthConfig,
    User,
    Organization,
    Device,
    LoginResponse,
    RegisterRequest,
    LoginRequest,
    Session,
    SessionCheck,
    MfaSetupResponse,
    MfaVerifyRequest,
    OAuthAuthorizeParams,
    AuthorizationUrl,
    AuthorizationCallback,
    OAuthTokenRequest,
    OAuthTokenResponse,
)
from .errors import (
    ZuthError,
    ZuthSDKError,
    NetworkError,
    CSRFError,
    RedirectError,
    InsecureUrlError,
    OAuthError,
    BrowserEnvironmentError,
    ConfigurationError,
    ValidationError,
    StateNotValidatedWarning,
    is_zuth_error,
)
from .security import (
    generate_oauth_state,
    validate_oauth_state,
    validate_redirect_uri,
    validate_secure_url,
    get_origin,
    sanitize_input,
    is_valid_email,
    is_valid_password,
)

__version__ = "1.0.0"
__all__ = [
    # SDK
    "Zuth",
    "create_zuth",
    "ZuthClient",
    "ZuthAuth",
    "MFANamespace",
    "ZuthOAuth",
    # Types
    "ZuthConfig",
    "User",
    "Organization",
    "Device",
    "LoginResponse",
    "RegisterRequest",
    "LoginRequest",
    "Session",
    "SessionCheck",
    "MfaSetupResponse",
    "MfaVerifyRequest",
    "OAuthAuthorizeParams",
    "AuthorizationUrl",
    "AuthorizationCallback",
    "OAuthTokenRequest",
    "OAuthTokenResponse",
    # Errors
    "ZuthError",
    "ZuthSDKError",
    "NetworkError",
    "CSRFError",
    "RedirectError",
    "InsecureUrlError",
    "OAuthError",
    "BrowserEnvironmentError",
    "ConfigurationError",
    "ValidationError",
    "StateNotValidatedWarning",
    "is_zuth_error",
    # Security
    "generate_oauth_state",
    "validate_oauth_state",
    "validate_redirect_uri",
    "validate_secure_url",
    "get_origin",
    "sanitize_input",
    "is_valid_email",
    "is_valid_password",
]
