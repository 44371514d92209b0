"""
Service layer for the invoice dashboard backend.

Contains:
- Data access for invoices and customers (positional SQL via dashboard.db)
- Invoice form validation
- The create / update / delete invoice form actions
- The view cache invalidated after successful writes
- Credentials sign-in

Services act as the glue between routes (HTTP layer) and the database.
"""

from .auth_service import AuthenticationError, authenticate, sign_in_with_credentials
from .customer_service import fetch_customers, fetch_filtered_customers
from .invoice_actions import (
    InvoiceDeleteError,
    RedirectSignal,
    create_invoice_action,
    delete_invoice_action,
    update_invoice_action,
)
from .invoice_service import (
    delete_invoice,
    fetch_edit_invoice_page,
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
    insert_invoice,
    update_invoice,
)
from .validation import ValidationFailure, ValidationSuccess, validate_invoice_form
from .view_cache import INVOICES_VIEW, ViewCache, get_view_cache

__all__ = [
    "AuthenticationError",
    "authenticate",
    "sign_in_with_credentials",
    "fetch_customers",
    "fetch_filtered_customers",
    "InvoiceDeleteError",
    "RedirectSignal",
    "create_invoice_action",
    "update_invoice_action",
    "delete_invoice_action",
    "insert_invoice",
    "update_invoice",
    "delete_invoice",
    "fetch_invoice_by_id",
    "fetch_filtered_invoices",
    "fetch_invoices_pages",
    "fetch_edit_invoice_page",
    "ValidationSuccess",
    "ValidationFailure",
    "validate_invoice_form",
    "INVOICES_VIEW",
    "ViewCache",
    "get_view_cache",
]
