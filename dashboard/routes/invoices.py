"""
Invoice dashboard API endpoints.

Pages:
1. GET  /dashboard/invoices              - searchable, paginated table (cached view)
2. GET  /dashboard/invoices/create       - data for the empty create form
3. GET  /dashboard/invoices/{id}/edit    - data for the prefilled edit form

Form actions:
4. POST   /dashboard/invoices            - create; 303 to the table on success
5. PUT    /dashboard/invoices/{id}       - update; 303 to the table on success
6. DELETE /dashboard/invoices/{id}       - delete

A form action that does not redirect answers with a FormState body:
400 for field errors, 500 for a database error.
"""

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from dashboard.auth.dependencies import AuthenticatedUser, get_authenticated_user
from dashboard.db.client import get_conn
from dashboard.schemas.customers import CustomerField
from dashboard.schemas.invoices import (
    CreateInvoicePageResponse,
    EditInvoicePageResponse,
    FormState,
    InvoiceForm,
    InvoiceFormRequest,
    InvoiceListItem,
    InvoicesPageResponse,
)
from dashboard.services import (
    INVOICES_VIEW,
    InvoiceDeleteError,
    ViewCache,
    create_invoice_action,
    delete_invoice_action,
    fetch_customers,
    fetch_edit_invoice_page,
    fetch_filtered_invoices,
    fetch_invoices_pages,
    get_view_cache,
    update_invoice_action,
)
from dashboard.services.invoice_actions import DELETED_MESSAGE
from dashboard.services.view_cache import view_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard/invoices", tags=["invoices"])


def _form_state_response(state: FormState) -> JSONResponse:
    """Field errors are the caller's fault (400); anything else is a server failure (500)."""
    status_code = (
        status.HTTP_400_BAD_REQUEST if state.errors else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=state.model_dump())


# --- Pages ---

@router.get(
    "",
    response_model=InvoicesPageResponse,
    status_code=status.HTTP_200_OK,
    summary="List invoices",
    description="""
    Invoices table for the dashboard.

    - `query` filters by customer name/email, amount, date or status
    - `page` selects the page (1-based)
    - Responses are cached per query/page until an invoice is written
    """
)
def list_invoices(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    view_cache: Annotated[ViewCache, Depends(get_view_cache)],
    query: str = "",
    page: Annotated[int, Query(ge=1)] = 1,
) -> InvoicesPageResponse:
    key = view_key(INVOICES_VIEW, urlencode([("query", query), ("page", page)]))
    cached = view_cache.get(key)
    if cached is not None:
        logger.debug(f"Serving cached view {key}")
        return cached

    logger.info(f"Listing invoices for user {auth_user.user_id} (query={query!r}, page={page})")
    generation = view_cache.generation(INVOICES_VIEW)

    try:
        with get_conn() as conn:
            invoices = fetch_filtered_invoices(conn, query, page)
            total_pages = fetch_invoices_pages(conn, query)
    except Exception as e:
        logger.error(f"Failed to fetch invoices: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch invoices."
            }
        )

    response = InvoicesPageResponse(
        invoices=[InvoiceListItem(**invoice) for invoice in invoices],
        query=query,
        current_page=page,
        total_pages=total_pages,
    )
    view_cache.set(key, response, generation)
    return response


@router.get(
    "/create",
    response_model=CreateInvoicePageResponse,
    status_code=status.HTTP_200_OK,
    summary="Create invoice form data",
)
def create_invoice_page(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> CreateInvoicePageResponse:
    try:
        with get_conn() as conn:
            customers = fetch_customers(conn)
    except Exception as e:
        logger.error(f"Failed to fetch customers: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch all customers."
            }
        )

    return CreateInvoicePageResponse(
        customers=[CustomerField(**customer) for customer in customers]
    )


@router.get(
    "/{invoice_id}/edit",
    response_model=EditInvoicePageResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit invoice form data",
    description="""
    Loads the invoice and the customer list concurrently.

    Returns 404 if the invoice does not exist.
    """
)
async def edit_invoice_page(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> EditInvoicePageResponse:
    try:
        invoice, customers = await fetch_edit_invoice_page(invoice_id)
    except Exception as e:
        logger.error(f"Failed to load edit page for invoice {invoice_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch invoice."
            }
        )

    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": f"Invoice {invoice_id} not found"
            }
        )

    return EditInvoicePageResponse(
        invoice=InvoiceForm(**invoice),
        customers=[CustomerField(**customer) for customer in customers],
    )


# --- Form actions ---

@router.post(
    "",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create an invoice",
    responses={
        303: {"description": "Created; redirect to the invoices table"},
        400: {"model": FormState, "description": "Missing or invalid fields"},
        500: {"model": FormState, "description": "Database error"},
    },
)
def create_invoice(
    form: InvoiceFormRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    view_cache: Annotated[ViewCache, Depends(get_view_cache)],
) -> JSONResponse:
    """
    Run the create action.

    On success the action raises RedirectSignal, which the app turns into
    303 See Other -> /dashboard/invoices.
    """
    logger.info(f"Create invoice submitted by user {auth_user.user_id}")
    state = create_invoice_action(form.to_form_data(), view_cache)
    return _form_state_response(state)


@router.put(
    "/{invoice_id}",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Update an invoice",
    responses={
        303: {"description": "Updated; redirect to the invoices table"},
        400: {"model": FormState, "description": "Missing or invalid fields"},
        500: {"model": FormState, "description": "Database error"},
    },
)
def update_invoice(
    invoice_id: str,
    form: InvoiceFormRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    view_cache: Annotated[ViewCache, Depends(get_view_cache)],
) -> JSONResponse:
    logger.info(f"Update of invoice {invoice_id} submitted by user {auth_user.user_id}")
    state = update_invoice_action(invoice_id, form.to_form_data(), view_cache)
    return _form_state_response(state)


@router.delete(
    "/{invoice_id}",
    response_model=FormState,
    status_code=status.HTTP_200_OK,
    summary="Delete an invoice",
    description="""
    Permanently removes the invoice.

    Deletion is currently disabled (INVOICE_DELETE_ENABLED) and answers
    500 delete_failed.
    """,
    responses={500: {"description": "Deletion disabled or database error"}},
)
def delete_invoice(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    view_cache: Annotated[ViewCache, Depends(get_view_cache)],
):
    logger.info(f"Delete of invoice {invoice_id} requested by user {auth_user.user_id}")

    try:
        state = delete_invoice_action(invoice_id, view_cache)
    except InvoiceDeleteError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "delete_failed",
                "details": str(e)
            }
        )

    if state.message != DELETED_MESSAGE:
        return _form_state_response(state)
    return state
