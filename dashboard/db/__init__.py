"""
Database access layer for the invoice dashboard backend.

Tables used (Postgres):
- invoices (id, customer_id, amount, status, date)
- customers (id, name, email, image_url)

DO NOT define table schemas or migrations here.
All statements bind values positionally; never concatenate SQL.
"""

from .client import close_pool, execute, fetch_all, fetch_one, get_conn, init_pool

__all__ = ["get_conn", "init_pool", "close_pool", "fetch_one", "fetch_all", "execute"]
