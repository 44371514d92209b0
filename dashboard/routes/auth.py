"""
Auth API endpoints.

- POST /auth/login - credentials sign-in for the dashboard

The returned access token is what dashboard endpoints expect in
'Authorization: Bearer <token>'.
"""

import logging

from fastapi import APIRouter, Response, status

from dashboard.schemas.auth import LoginRequest, LoginResponse
from dashboard.services import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
    description="""
    Signs in through Supabase Auth.

    - 200 with the session tokens on success
    - 401 with message "Invalid credentials." when the credentials are rejected
    - 401 with message "Something went wrong." for any other sign-in failure
    """,
    responses={401: {"model": LoginResponse}},
)
def login(request: LoginRequest, response: Response) -> LoginResponse:
    result = authenticate(request.email, request.password)
    if result.message is not None:
        response.status_code = status.HTTP_401_UNAUTHORIZED
    return result
