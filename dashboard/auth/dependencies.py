"""
FastAPI dependency functions for authentication.

Dashboard endpoints only require that a session is present: a Supabase Auth
access token that verifies against the project's JWT signing keys (ES256,
fetched from JWKS). No further authorization is applied.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict

from fastapi import Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from dashboard.config import settings

logger = logging.getLogger(__name__)

# Lazily created; PyJWKClient caches signing keys between requests
_jwks_client: PyJWKClient | None = None


@dataclass
class AuthenticatedUser:
    """
    Represents a signed-in dashboard user.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        email: The 'email' claim, when present
        access_token: The verified JWT access token
    """
    user_id: str
    email: str | None
    access_token: str


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def _extract_bearer_token(authorization: str | None) -> str:
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized("unauthorized", "Invalid Authorization header format")

    return parts[1]


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature, expiry, audience and issuer of a Supabase access token.

    Returns:
        The token claims.

    Raises:
        HTTPException: 401 for any verification failure
    """
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        issuer = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1"

        return decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=issuer,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except ValueError as e:
        logger.error(f"Token verification is not configured: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Require a signed-in session.

    Usage:
        @router.get("/dashboard/invoices")
        async def list_invoices(
            auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
        ):
            ...

    Raises:
        HTTPException: 401 if the token is missing, malformed, invalid or expired
    """
    token = _extract_bearer_token(authorization)
    payload = decode_access_token(token)

    user_id = payload.get("sub")
    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    email = payload.get("email")
    logger.debug(f"Token verified for user_id={user_id}")

    return AuthenticatedUser(
        user_id=str(user_id),
        email=str(email) if email is not None else None,
        access_token=token,
    )
