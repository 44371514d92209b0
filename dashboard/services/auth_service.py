"""
Credentials sign-in.

Sign-in is delegated to Supabase Auth. Provider failures are normalised into
AuthenticationError carrying a discriminant (`type`), and authenticate()
turns that into the message shown on the login form:

- "CredentialsSignin" -> "Invalid credentials."
- any other type      -> "Something went wrong."

Errors that are not authentication errors are re-raised unchanged.
"""

import logging
from typing import Any, Dict, Optional

from supabase import AuthApiError, AuthError, Client, create_client

from dashboard.config import settings
from dashboard.schemas.auth import LoginResponse
from dashboard.utils.logging import mask_email

logger = logging.getLogger(__name__)

CREDENTIALS_SIGNIN = "CredentialsSignin"
CALLBACK_ROUTE_ERROR = "CallbackRouteError"

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."
GENERIC_SIGN_IN_MESSAGE = "Something went wrong."


class AuthenticationError(Exception):
    """
    Sign-in failure reported by the credentials provider.

    Attributes:
        type: Discriminant; CREDENTIALS_SIGNIN for rejected credentials,
              another value for every other provider failure.
    """

    def __init__(self, error_type: str, message: str = ""):
        super().__init__(message or error_type)
        self.type = error_type


def get_auth_client() -> Client:
    """Create a Supabase client for public auth calls (publishable key)."""
    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )


def _is_rejected_credentials(error: AuthError) -> bool:
    if isinstance(error, AuthApiError):
        code = getattr(error, "code", None)
        return code == "invalid_credentials" or "invalid login credentials" in str(error).lower()
    return False


def sign_in_with_credentials(email: str, password: str, client: Optional[Client] = None) -> Dict[str, Any]:
    """
    Sign in with email and password.

    Returns:
        Dict with access_token, refresh_token and user_id.

    Raises:
        AuthenticationError: If the provider rejects the sign-in.
    """
    auth_client = client or get_auth_client()

    try:
        response = auth_client.auth.sign_in_with_password({"email": email, "password": password})
    except AuthError as e:
        if _is_rejected_credentials(e):
            raise AuthenticationError(CREDENTIALS_SIGNIN, "Invalid login credentials") from e
        raise AuthenticationError(CALLBACK_ROUTE_ERROR, str(e)) from e

    session = response.session
    if session is None:
        raise AuthenticationError(CALLBACK_ROUTE_ERROR, "Sign-in returned no session")

    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "user_id": str(response.user.id) if response.user else None,
    }


def authenticate(email: str, password: str, client: Optional[Client] = None) -> LoginResponse:
    """
    Run the login form action.

    Returns:
        LoginResponse with the session on success, or with only a message
        when the provider rejected the sign-in.

    Raises:
        Exception: Any non-authentication error, unchanged.
    """
    try:
        session = sign_in_with_credentials(email, password, client)
    except AuthenticationError as e:
        if e.type == CREDENTIALS_SIGNIN:
            logger.info(f"Sign-in rejected for {mask_email(email)}: invalid credentials")
            return LoginResponse(message=INVALID_CREDENTIALS_MESSAGE)
        logger.warning(f"Sign-in failed for {mask_email(email)} ({e.type}): {e}")
        return LoginResponse(message=GENERIC_SIGN_IN_MESSAGE)

    logger.info(f"User {session['user_id']} signed in")
    return LoginResponse(**session)
