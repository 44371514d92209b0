"""
Invoice data access.

Read wrappers used by the invoice pages and the three write statements used
by the form actions. Every function takes an open DB-API connection (see
dashboard.db.get_conn) so callers control connection scope.

Amounts are stored as integer cents. Reads that feed the edit form convert
back to major units; the listing returns cents as stored.
"""

import asyncio
import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from dashboard.config import settings
from dashboard.db.client import execute, fetch_all, fetch_one, get_conn
from dashboard.services.customer_service import fetch_customers

logger = logging.getLogger(__name__)

T = TypeVar("T")

INSERT_INVOICE_SQL = (
    "INSERT INTO invoices (customer_id, amount, status, date) "
    "VALUES (%s, %s, %s, %s)"
)
UPDATE_INVOICE_SQL = (
    "UPDATE invoices SET customer_id = %s, amount = %s, status = %s "
    "WHERE id = %s"
)
DELETE_INVOICE_SQL = "DELETE FROM invoices WHERE id = %s"

_INVOICE_SEARCH_FILTER = """
    customers.name ILIKE %s OR
    customers.email ILIKE %s OR
    invoices.amount::text ILIKE %s OR
    invoices.date::text ILIKE %s OR
    invoices.status ILIKE %s
"""

FILTERED_INVOICES_SQL = f"""
    SELECT
        invoices.id,
        invoices.customer_id,
        invoices.amount,
        invoices.date,
        invoices.status,
        customers.name,
        customers.email,
        customers.image_url
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    WHERE {_INVOICE_SEARCH_FILTER}
    ORDER BY invoices.date DESC
    LIMIT %s OFFSET %s
"""

INVOICES_COUNT_SQL = f"""
    SELECT COUNT(*) AS count
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    WHERE {_INVOICE_SEARCH_FILTER}
"""

INVOICE_BY_ID_SQL = """
    SELECT invoices.id, invoices.customer_id, invoices.amount, invoices.status
    FROM invoices
    WHERE invoices.id = %s
"""


def _search_params(query: str) -> List[str]:
    pattern = f"%{query}%"
    return [pattern] * 5


# --- Writes ---

def insert_invoice(conn: Any, customer_id: str, amount_in_cents: int, status: str, date: str) -> None:
    """
    Insert one invoice.

    Raises:
        Exception: Whatever the driver raises; the caller decides how to report it.
    """
    execute(
        conn,
        INSERT_INVOICE_SQL,
        [customer_id, amount_in_cents, status, date],
        query_name="invoices.insert",
    )
    logger.info(f"Invoice inserted for customer {customer_id} (status={status}, date={date})")


def update_invoice(conn: Any, invoice_id: str, customer_id: str, amount_in_cents: int, status: str) -> int:
    """
    Overwrite customer, amount and status of one invoice.

    The id and creation date are never touched.

    Returns:
        Number of rows updated (0 if the invoice no longer exists).
    """
    rowcount = execute(
        conn,
        UPDATE_INVOICE_SQL,
        [customer_id, amount_in_cents, status, invoice_id],
        query_name="invoices.update",
    )
    if rowcount == 0:
        logger.warning(f"Update matched no invoice with id {invoice_id}")
    else:
        logger.info(f"Invoice {invoice_id} updated (status={status})")
    return rowcount


def delete_invoice(conn: Any, invoice_id: str) -> int:
    """
    Hard-delete one invoice.

    Returns:
        Number of rows deleted.
    """
    rowcount = execute(conn, DELETE_INVOICE_SQL, [invoice_id], query_name="invoices.delete")
    logger.info(f"Invoice {invoice_id} delete affected {rowcount} row(s)")
    return rowcount


# --- Reads ---

def fetch_invoice_by_id(conn: Any, invoice_id: str) -> Optional[Dict[str, Any]]:
    """
    Fetch a single invoice for the edit form.

    Returns:
        Dict with id, customer_id, amount (major units) and status,
        or None if no invoice has that id.
    """
    row = fetch_one(conn, INVOICE_BY_ID_SQL, [invoice_id], query_name="invoices.by_id")
    if row is None:
        logger.warning(f"Invoice {invoice_id} not found")
        return None

    return {
        "id": str(row["id"]),
        "customer_id": str(row["customer_id"]),
        "amount": row["amount"] / 100,
        "status": row["status"],
    }


def fetch_filtered_invoices(conn: Any, query: str, current_page: int) -> List[Dict[str, Any]]:
    """
    Fetch one page of invoices matching a free-text search, newest first.

    The search term is matched (case-insensitively, as a substring) against
    customer name and email, and the amount, date and status of the invoice.
    """
    per_page = settings.INVOICES_PER_PAGE
    offset = (max(current_page, 1) - 1) * per_page

    rows = fetch_all(
        conn,
        FILTERED_INVOICES_SQL,
        _search_params(query) + [per_page, offset],
        query_name="invoices.filtered",
    )
    invoices = [
        {
            **row,
            "id": str(row["id"]),
            "customer_id": str(row["customer_id"]),
            "date": str(row["date"]),
        }
        for row in rows
    ]
    logger.debug(f"Fetched {len(invoices)} invoices (query={query!r}, page={current_page})")
    return invoices


def fetch_invoices_pages(conn: Any, query: str) -> int:
    """Return how many listing pages the search term produces."""
    row = fetch_one(conn, INVOICES_COUNT_SQL, _search_params(query), query_name="invoices.count")
    total = int(row["count"]) if row else 0
    return math.ceil(total / settings.INVOICES_PER_PAGE)


def _with_conn(read: Callable[..., T], *args: Any) -> T:
    with get_conn() as conn:
        return read(conn, *args)


async def fetch_edit_invoice_page(invoice_id: str) -> Tuple[Optional[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Load everything the edit form needs in parallel.

    The invoice lookup and the customer list run concurrently on worker
    threads, each with its own pooled connection, and both are awaited before
    returning.

    Returns:
        (invoice or None, customers)
    """
    invoice, customers = await asyncio.gather(
        asyncio.to_thread(_with_conn, fetch_invoice_by_id, invoice_id),
        asyncio.to_thread(_with_conn, fetch_customers),
    )
    return invoice, customers
