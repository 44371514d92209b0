"""
Customer data access (read-only).
"""

import logging
from typing import Any, Dict, List

from dashboard.db.client import fetch_all

logger = logging.getLogger(__name__)

CUSTOMERS_SQL = """
    SELECT id, name
    FROM customers
    ORDER BY name ASC
"""

FILTERED_CUSTOMERS_SQL = """
    SELECT
        customers.id,
        customers.name,
        customers.email,
        customers.image_url,
        COUNT(invoices.id) AS total_invoices,
        COALESCE(SUM(CASE WHEN invoices.status = 'pending' THEN invoices.amount ELSE 0 END), 0) AS total_pending,
        COALESCE(SUM(CASE WHEN invoices.status = 'paid' THEN invoices.amount ELSE 0 END), 0) AS total_paid
    FROM customers
    LEFT JOIN invoices ON customers.id = invoices.customer_id
    WHERE
        customers.name ILIKE %s OR
        customers.email ILIKE %s
    GROUP BY customers.id, customers.name, customers.email, customers.image_url
    ORDER BY customers.name ASC
"""


def fetch_customers(conn: Any) -> List[Dict[str, Any]]:
    """
    Fetch every customer (id and name) ordered by name, for form dropdowns.
    """
    rows = fetch_all(conn, CUSTOMERS_SQL, query_name="customers.all")
    return [{"id": str(row["id"]), "name": row["name"]} for row in rows]


def fetch_filtered_customers(conn: Any, query: str) -> List[Dict[str, Any]]:
    """
    Fetch customers whose name or email contains the search term, with
    invoice count and pending / paid totals (in cents).
    """
    pattern = f"%{query}%"
    rows = fetch_all(conn, FILTERED_CUSTOMERS_SQL, [pattern, pattern], query_name="customers.filtered")

    customers = [
        {
            "id": str(row["id"]),
            "name": row["name"],
            "email": row["email"],
            "image_url": row.get("image_url"),
            "total_invoices": int(row["total_invoices"]),
            "total_pending": int(row["total_pending"]),
            "total_paid": int(row["total_paid"]),
        }
        for row in rows
    ]
    logger.debug(f"Fetched {len(customers)} customers (query={query!r})")
    return customers
