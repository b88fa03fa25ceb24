"""
Zuth Auth Python SDK - Basic Usage Example

This example demonstrates password login and the OAuth authorization code
flow with the Zuth Auth Python SDK.
"""

import asyncio
import logging

from zuth_auth import (
    CSRFError,
    LoginRequest,
    NetworkError,
    OAuthAuthorizeParams,
    OAuthError,
    Zuth,
    ZuthConfig,
    ZuthSDKError,
)


CONFIG = ZuthConfig(
    base_url="https://api.zuth.example.com",
    client_id="example-client",
    redirect_uri="https://app.example.com/callback",
    debug=True,
)


async def login_example():
    """Password login example."""
    print("=== Login Example ===\n")

    async with Zuth(CONFIG) as zuth:
        try:
            result = await zuth.auth.login(LoginRequest(
                email="user@example.com",
                password="SecurePassword123!",
            ))
            print(f"Logged in as: {result.user.email if result.user else '?'}")

            session = await zuth.auth.check_session()
            print(f"Session valid: {session.valid}")

            await zuth.auth.logout()
        except NetworkError as e:
            print(f"Server unreachable (expected without real API): {e.message}")
        except ZuthSDKError as e:
            print(f"Login failed [{e.status_code} {e.error}]: {e.message}")


async def oauth_example():
    """OAuth authorization code flow example."""
    print("\n=== OAuth Example ===\n")

    async with Zuth(CONFIG) as zuth:
        authorization = zuth.oauth.build_authorization_url(
            OAuthAuthorizeParams(client_id=CONFIG.client_id, redirect_uri=CONFIG.redirect_uri),
            allowed_origins=["https://app.example.com"],
        )
        print(f"Send the user to: {authorization.url}")

        # Persist authorization.state (e.g. in the user's server-side session)
        # and read it back when the identity server redirects to the callback.
        callback_url = f"{CONFIG.redirect_uri}?code=auth_code_123&state={authorization.state}"

        try:
            tokens = await zuth.oauth.handle_callback(
                callback_url,
                client_id=CONFIG.client_id,
                original_state=authorization.state,
            )
            print(f"Authenticated, token expires in {tokens.expires_in}s")
        except CSRFError as e:
            print(f"Rejected callback: {e.message}")
        except OAuthError as e:
            print(f"Authorization failed: {e.code}")
        except ZuthSDKError as e:
            print(f"Error (expected without real API): {e.error}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(login_example())
    asyncio.run(oauth_example())

    print("\nExamples completed!")
