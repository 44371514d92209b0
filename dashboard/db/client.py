"""
Postgres connection pool and query helpers.

Every statement goes through fetch_one / fetch_all / execute with its values
bound positionally by the driver (psycopg2 uses %s as the positional
placeholder). SQL text is never assembled from user input.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

import psycopg2
import psycopg2.extras
from psycopg2.pool import ThreadedConnectionPool

from dashboard.config import settings

logger = logging.getLogger(__name__)
_query_logger = logging.getLogger("dashboard.db.query")

_pool: Optional[ThreadedConnectionPool] = None
_pool_lock = threading.Lock()

_SLOW_QUERY_MS = 200.0


def _redact_params(params: Optional[Iterable[Any]]) -> Optional[List[Any]]:
    if params is None:
        return None
    redacted: List[Any] = []
    for value in params:
        if isinstance(value, str) and len(value) > 80:
            redacted.append(f"{value[:40]}...{value[-10:]}")
        else:
            redacted.append(value)
    return redacted


def _log_query(query_name: Optional[str], params: Optional[Iterable[Any]], elapsed_ms: float, rowcount: int) -> None:
    message = {
        "query": query_name or "unnamed",
        "ms": round(elapsed_ms, 2),
        "rowcount": rowcount,
        "params": _redact_params(params),
    }
    if elapsed_ms >= _SLOW_QUERY_MS:
        _query_logger.warning(f"db_slow_query={message}")
    else:
        _query_logger.debug(f"db_query={message}")


def init_pool(minconn: Optional[int] = None, maxconn: Optional[int] = None) -> ThreadedConnectionPool:
    """
    Create the process-wide connection pool if it does not exist yet.

    Raises:
        RuntimeError: If DATABASE_URL is not configured.
    """
    global _pool

    with _pool_lock:
        if _pool is None:
            if not settings.DATABASE_URL:
                raise RuntimeError("DATABASE_URL is required to open a database connection")
            _pool = ThreadedConnectionPool(
                minconn if minconn is not None else settings.DB_POOL_MIN,
                maxconn if maxconn is not None else settings.DB_POOL_MAX,
                dsn=settings.DATABASE_URL,
            )
            logger.info("Database connection pool initialized")
    return _pool


def close_pool() -> None:
    """Close every pooled connection (called on application shutdown)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            _pool.closeall()
            _pool = None
            logger.info("Database connection pool closed")


@contextmanager
def get_conn() -> Iterator[Any]:
    """
    Borrow a connection from the pool.

    Whatever the caller left uncommitted is committed on a clean exit and
    rolled back if the block raises. The connection always goes back to the
    pool.

    Example:
        >>> with get_conn() as conn:
        ...     invoice = fetch_invoice_by_id(conn, invoice_id)
    """
    pool = init_pool()
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def fetch_one(
    conn: Any,
    sql: str,
    params: Optional[Iterable[Any]] = None,
    query_name: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Run a query and return the first row as a dict, or None."""
    start = time.perf_counter()
    with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
        cur.execute(sql, list(params or []))
        row = cur.fetchone()
        rowcount = cur.rowcount
    _log_query(query_name, params, (time.perf_counter() - start) * 1000, rowcount)
    return dict(row) if row else None


def fetch_all(
    conn: Any,
    sql: str,
    params: Optional[Iterable[Any]] = None,
    query_name: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Run a query and return every row as a dict."""
    start = time.perf_counter()
    with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
        cur.execute(sql, list(params or []))
        rows = [dict(row) for row in cur.fetchall()]
        rowcount = cur.rowcount
    _log_query(query_name, params, (time.perf_counter() - start) * 1000, rowcount)
    return rows


def execute(
    conn: Any,
    sql: str,
    params: Optional[Iterable[Any]] = None,
    query_name: Optional[str] = None,
) -> int:
    """Run a write statement and return the affected row count."""
    start = time.perf_counter()
    with conn.cursor() as cur:
        cur.execute(sql, list(params or []))
        rowcount = cur.rowcount
    _log_query(query_name, params, (time.perf_counter() - start) * 1000, rowcount)
    return rowcount
