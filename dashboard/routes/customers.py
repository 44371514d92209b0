"""
Customers API endpoints (read-only).

- GET /dashboard/customers - customers table with invoice totals
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from dashboard.auth.dependencies import AuthenticatedUser, get_authenticated_user
from dashboard.db.client import get_conn
from dashboard.schemas.customers import CustomersPageResponse, CustomerTableRow
from dashboard.services import fetch_filtered_customers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard/customers", tags=["customers"])


@router.get(
    "",
    response_model=CustomersPageResponse,
    status_code=status.HTTP_200_OK,
    summary="List customers",
    description="Customers whose name or email contains `query`, with invoice count and pending/paid totals."
)
def list_customers(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    query: str = "",
) -> CustomersPageResponse:
    logger.info(f"Listing customers for user {auth_user.user_id} (query={query!r})")

    try:
        with get_conn() as conn:
            customers = fetch_filtered_customers(conn, query)
    except Exception as e:
        logger.error(f"Failed to fetch customers: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch customer table."
            }
        )

    return CustomersPageResponse(
        customers=[CustomerTableRow(**customer) for customer in customers],
        query=query,
        count=len(customers),
    )
