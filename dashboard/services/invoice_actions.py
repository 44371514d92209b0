"""
Invoice form actions (create / update / delete).

Each action runs one pass of the mutation pipeline:

1. Validate   - create/update only; failures return a FormState with field errors
2. Transform  - amount to integer cents; create also stamps today's date
3. Persist    - exactly one parameterized statement on its own connection,
                committed when the connection block exits
4. Invalidate - only after the commit succeeded: the invoices listing view
5. Complete   - create/update redirect to the listing (RedirectSignal);
                delete returns a FormState

A persistence failure returns a FormState with a fixed message; the driver
error is logged server-side only and never retried.
"""

import logging
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, ContextManager, Mapping, NoReturn

from dashboard.config import settings
from dashboard.db.client import get_conn
from dashboard.schemas.invoices import FormState
from dashboard.services.invoice_service import delete_invoice, insert_invoice, update_invoice
from dashboard.services.validation import validate_invoice_form
from dashboard.services.view_cache import INVOICES_VIEW, ViewCache

logger = logging.getLogger(__name__)

CREATE_VALIDATION_MESSAGE = "Missing Fields. Failed to Create Invoice."
UPDATE_VALIDATION_MESSAGE = "Missing Fields. Failed to Update Invoice."
CREATE_DATABASE_MESSAGE = "Database Error: Failed to Create Invoice."
UPDATE_DATABASE_MESSAGE = "Database Error: Failed to Update Invoice."
DELETE_DATABASE_MESSAGE = "Database Error: Failed to Delete Invoice."
DELETED_MESSAGE = "Deleted Invoice"


class RedirectSignal(Exception):
    """
    Raised to end a request with a redirect.

    The HTTP layer converts it into a 303 See Other response; nothing after
    the raise runs.
    """

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


class InvoiceDeleteError(Exception):
    """Raised when invoice deletion is blocked."""


def redirect(location: str) -> NoReturn:
    raise RedirectSignal(location)


def to_minor_units(amount: Decimal) -> int:
    """Convert a validated major-unit amount (whole cents, at most MAX_AMOUNT) to integer cents."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


Connection = Callable[[], ContextManager[Any]]


def create_invoice_action(
    form_data: Mapping[str, Any],
    view_cache: ViewCache,
    connection: Connection = get_conn,
    today: Callable[[], date] = utc_today,
) -> FormState:
    """
    Create an invoice from a form submission.

    Args:
        form_data: Submitted values keyed by form field name
        view_cache: Cache holding the rendered invoices listing
        connection: Factory for a committing connection block
        today: Source of the creation date

    Returns:
        FormState describing why nothing was created.

    Raises:
        RedirectSignal: To /dashboard/invoices after a successful insert.
    """
    validated = validate_invoice_form(form_data)
    if not validated.success:
        logger.info(f"Create invoice rejected: invalid fields {sorted(validated.field_errors)}")
        return FormState(errors=validated.field_errors, message=CREATE_VALIDATION_MESSAGE)

    record = validated.data
    amount_in_cents = to_minor_units(record.amount)
    created_on = today().isoformat()

    try:
        with connection() as conn:
            insert_invoice(conn, record.customer_id, amount_in_cents, record.status, created_on)
    except Exception as e:
        logger.error(f"Failed to create invoice: {e}", exc_info=True)
        return FormState(message=CREATE_DATABASE_MESSAGE)

    view_cache.invalidate(INVOICES_VIEW)
    redirect(INVOICES_VIEW)


def update_invoice_action(
    invoice_id: str,
    form_data: Mapping[str, Any],
    view_cache: ViewCache,
    connection: Connection = get_conn,
) -> FormState:
    """
    Update customer, amount and status of an existing invoice.

    Returns:
        FormState describing why nothing was updated.

    Raises:
        RedirectSignal: To /dashboard/invoices after a successful update.
    """
    validated = validate_invoice_form(form_data)
    if not validated.success:
        logger.info(
            f"Update of invoice {invoice_id} rejected: invalid fields {sorted(validated.field_errors)}"
        )
        return FormState(errors=validated.field_errors, message=UPDATE_VALIDATION_MESSAGE)

    record = validated.data
    amount_in_cents = to_minor_units(record.amount)

    try:
        with connection() as conn:
            update_invoice(conn, invoice_id, record.customer_id, amount_in_cents, record.status)
    except Exception as e:
        logger.error(f"Failed to update invoice {invoice_id}: {e}", exc_info=True)
        return FormState(message=UPDATE_DATABASE_MESSAGE)

    view_cache.invalidate(INVOICES_VIEW)
    redirect(INVOICES_VIEW)


def delete_invoice_action(
    invoice_id: str,
    view_cache: ViewCache,
    connection: Connection = get_conn,
) -> FormState:
    """
    Delete an invoice.

    Deletion is blocked unless INVOICE_DELETE_ENABLED is set: the action
    raises before touching the database (see DESIGN.md, "Open questions").

    Returns:
        FormState with "Deleted Invoice", or the database error message.

    Raises:
        InvoiceDeleteError: While deletion is disabled.
    """
    if not settings.INVOICE_DELETE_ENABLED:
        logger.warning(f"Delete of invoice {invoice_id} refused: deletion is disabled")
        raise InvoiceDeleteError("Failed to Delete Invoice")

    try:
        with connection() as conn:
            delete_invoice(conn, invoice_id)
    except Exception as e:
        logger.error(f"Failed to delete invoice {invoice_id}: {e}", exc_info=True)
        return FormState(message=DELETE_DATABASE_MESSAGE)

    view_cache.invalidate(INVOICES_VIEW)
    return FormState(message=DELETED_MESSAGE)
