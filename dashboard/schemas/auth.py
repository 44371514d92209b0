"""
Pydantic schemas for authentication endpoints.

These models define the request/response contracts for credentials sign-in.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """
    Credentials submitted by the login form.
    """
    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def strip_email(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("email must not be blank")
        return value


class LoginResponse(BaseModel):
    """
    Response for POST /auth/login.

    On success the session fields are filled and message is null. On a
    handled sign-in failure only message is set.
    """
    access_token: Optional[str] = Field(None, description="JWT to send as 'Authorization: Bearer <token>'")
    refresh_token: Optional[str] = Field(None, description="Refresh token for the session")
    user_id: Optional[str] = Field(None, description="Signed-in user UUID")
    message: Optional[str] = Field(
        None,
        description="Human-readable sign-in error",
        examples=["Invalid credentials."]
    )
