"""
Tests for credentials sign-in.

Covers:
- Successful sign-in returns the session tokens
- Rejected credentials -> "Invalid credentials."
- Any other provider failure -> "Something went wrong."
- Non-authentication errors propagate unchanged
"""

from unittest.mock import MagicMock, patch

import pytest
from supabase import AuthApiError

from dashboard.services.auth_service import (
    CALLBACK_ROUTE_ERROR,
    CREDENTIALS_SIGNIN,
    GENERIC_SIGN_IN_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    AuthenticationError,
    authenticate,
    sign_in_with_credentials,
)


@pytest.fixture
def auth_client():
    """Mock Supabase client whose sign-in succeeds."""
    client = MagicMock()
    response = client.auth.sign_in_with_password.return_value
    response.session.access_token = "access-token"
    response.session.refresh_token = "refresh-token"
    response.user.id = "user-uuid-123"
    return client


class TestSignInWithCredentials:
    """Tests for sign_in_with_credentials."""

    def test_success_returns_session(self, auth_client):
        session = sign_in_with_credentials("user@nextmail.com", "123456", client=auth_client)

        assert session == {
            "access_token": "access-token",
            "refresh_token": "refresh-token",
            "user_id": "user-uuid-123",
        }
        auth_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "user@nextmail.com", "password": "123456"}
        )

    def test_invalid_credentials_map_to_credentials_signin(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        with pytest.raises(AuthenticationError) as exc_info:
            sign_in_with_credentials("user@nextmail.com", "wrong", client=auth_client)

        assert exc_info.value.type == CREDENTIALS_SIGNIN

    def test_other_provider_failure_maps_to_callback_error(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthApiError(
            "Service unavailable", 503, "unexpected_failure"
        )

        with pytest.raises(AuthenticationError) as exc_info:
            sign_in_with_credentials("user@nextmail.com", "123456", client=auth_client)

        assert exc_info.value.type == CALLBACK_ROUTE_ERROR

    def test_missing_session_is_a_failure(self, auth_client):
        auth_client.auth.sign_in_with_password.return_value.session = None

        with pytest.raises(AuthenticationError) as exc_info:
            sign_in_with_credentials("user@nextmail.com", "123456", client=auth_client)

        assert exc_info.value.type == CALLBACK_ROUTE_ERROR


class TestAuthenticate:
    """Tests for the login form action."""

    def test_success(self, auth_client):
        result = authenticate("user@nextmail.com", "123456", client=auth_client)

        assert result.access_token == "access-token"
        assert result.user_id == "user-uuid-123"
        assert result.message is None

    def test_invalid_credentials_message(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        result = authenticate("user@nextmail.com", "wrong", client=auth_client)

        assert result.message == INVALID_CREDENTIALS_MESSAGE
        assert result.access_token is None

    @patch("dashboard.services.auth_service.sign_in_with_credentials")
    def test_other_auth_error_message(self, mock_sign_in):
        mock_sign_in.side_effect = AuthenticationError("AccessDenied")

        result = authenticate("user@nextmail.com", "123456")

        assert result.message == GENERIC_SIGN_IN_MESSAGE

    def test_non_auth_error_propagates(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = ConnectionError("network down")

        with pytest.raises(ConnectionError, match="network down"):
            authenticate("user@nextmail.com", "123456", client=auth_client)


class TestAuthenticationError:
    """Tests for the error discriminant."""

    def test_type_is_exposed_and_used_as_default_message(self):
        error = AuthenticationError(error_type=CREDENTIALS_SIGNIN)

        assert error.type == CREDENTIALS_SIGNIN
        assert str(error) == CREDENTIALS_SIGNIN

    def test_explicit_message(self):
        error = AuthenticationError(CALLBACK_ROUTE_ERROR, "Sign-in returned no session")

        assert error.type == CALLBACK_ROUTE_ERROR
        assert str(error) == "Sign-in returned no session"
