"""
Zuth Auth SDK Authentication Methods

Password login and registration, current user, sessions and MFA.
"""

import logging
from typing import Any, Dict, List
from urllib.parse import quote

from .client import ZuthClient
from .errors import ValidationError, ZuthSDKError
from .security import is_valid_email, is_valid_password, sanitize_input
from .types import (
    LoginRequest,
    LoginResponse,
    MfaSetupResponse,
    MfaVerifyRequest,
    RegisterRequest,
    Session,
    SessionCheck,
    User,
)


logger = logging.getLogger("zuth_auth")

MIN_PASSWORD_LENGTH = 8


def _expect_object(response: Any) -> Dict[str, Any]:
    """Return a decoded success body, raising if it is not a JSON object."""
    if not isinstance(response, dict):
        raise ZuthSDKError("Unexpected response body", 0, "UnknownError")
    return response


class MFANamespace:
    """MFA operations namespace."""

    def __init__(self, client: ZuthClient) -> None:
        self._client = client

    async def setup(self) -> MfaSetupResponse:
        """Setup TOTP MFA. Returns QR code and manual entry key."""
        response = await self._client.post("/auth/mfa/setup")
        return MfaSetupResponse.from_dict(_expect_object(response))

    async def verify(self, data: MfaVerifyRequest) -> None:
        """Verify an MFA code."""
        await self._client.post("/auth/mfa/verify", data.to_dict())

    async def setup_email(self) -> None:
        """Setup email MFA."""
        await self._client.post("/auth/mfa/setup/email")

    async def send_email_code(self) -> None:
        """Send an email MFA code."""
        await self._client.post("/auth/mfa/email/send-code")

    async def verify_email_code(self, code: str) -> None:
        """Verify an email MFA code."""
        await self._client.post("/auth/mfa/email/verify", {"code": code})


class ZuthAuth:
    """Authentication methods for the Zuth SDK."""

    def __init__(self, client: ZuthClient) -> None:
        self._client = client
        self.mfa = MFANamespace(client)

    def _log(self, message: str, *args: Any) -> None:
        if self._client.debug:
            logger.debug("[Zuth] " + message, *args)

    async def register(self, data: RegisterRequest) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: If the email is malformed or the password is too short
        """
        email = data.email.lower().strip()
        if not is_valid_email(email):
            raise ValidationError("Invalid email format", "INVALID_EMAIL")

        if not is_valid_password(data.password, MIN_PASSWORD_LENGTH):
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                "WEAK_PASSWORD",
            )

        sanitized = RegisterRequest(
            email=sanitize_input(email),
            # Passwords are sent verbatim
            password=data.password,
            name=sanitize_input(data.name.strip()) if data.name else None,
        )

        self._log("Register attempt")
        response = await self._client.post("/auth/register", sanitized.to_dict())
        return User.from_dict(_expect_object(response))

    async def login(self, data: LoginRequest) -> LoginResponse:
        """
        Login with email and password.

        The returned access token is installed into the client.

        Raises:
            ValidationError: If the email is malformed
        """
        email = data.email.lower().strip()
        if not is_valid_email(email):
            raise ValidationError("Invalid email format", "INVALID_EMAIL")

        sanitized = LoginRequest(
            email=sanitize_input(email),
            password=data.password,
        )

        self._log("Login attempt")
        response = await self._client.post("/auth/login", sanitized.to_dict())
        result = LoginResponse.from_dict(_expect_object(response))

        if result.access_token:
            self._client.set_access_token(result.access_token)
            self._log("Login successful")

        return result

    async def get_current_user(self) -> User:
        """Get the current authenticated user."""
        response = await self._client.get("/auth/me")
        return User.from_dict(_expect_object(response))

    async def check_session(self) -> SessionCheck:
        """
        Check whether the current session is valid.

        An expired or missing session (HTTP 401) is an expected outcome and
        is reported as ``SessionCheck(valid=False)``. Other failures raise.
        """
        try:
            user = await self.get_current_user()
        except ZuthSDKError as e:
            if e.status_code == 401:
                return SessionCheck(valid=False)
            raise
        return SessionCheck(valid=True, user=user)

    async def logout(self) -> None:
        """Logout the current user. The token is cleared even if the request fails."""
        self._log("Logout")
        try:
            await self._client.post("/auth/logout")
        finally:
            self._client.clear_access_token()

    async def get_active_sessions(self) -> List[Session]:
        """Get active sessions for the current user."""
        response = await self._client.get("/auth/sessions")
        sessions = _expect_object(response).get("sessions") or []
        return [Session.from_dict(s) for s in sessions]

    async def revoke_session(self, session_id: str) -> None:
        """Revoke a specific session."""
        await self._client.post(f"/auth/sessions/{quote(session_id, safe='')}/revoke")
