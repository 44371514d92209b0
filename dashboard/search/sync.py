"""
Search box <-> URL query string synchronization.

Keeps the value of a free-text search input reflected in the current page's
query string without navigating on every keystroke:

- changes are debounced (trailing edge, SEARCH_DEBOUNCE_MS, 300 ms by default)
- each applied term resets `page` to "1"
- a non-empty term sets `query`; an empty term removes it
- navigation replaces the current location (no new history entry)
"""

from typing import Callable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit

from dashboard.config import settings
from dashboard.search.debounce import Debouncer
from dashboard.utils.logging import get_logger

logger = get_logger(__name__)

QUERY_PARAM = "query"
PAGE_PARAM = "page"

Params = List[Tuple[str, str]]


def _set_param(params: Params, name: str, value: str) -> Params:
    """
    Set a parameter the way URLSearchParams.set does: the first occurrence is
    replaced in place, later duplicates are removed, and a missing parameter
    is appended.
    """
    result: Params = []
    replaced = False
    for key, current in params:
        if key != name:
            result.append((key, current))
        elif not replaced:
            result.append((name, value))
            replaced = True
    if not replaced:
        result.append((name, value))
    return result


def _delete_param(params: Params, name: str) -> Params:
    return [(key, value) for key, value in params if key != name]


def apply_search_term(params: Params, term: str) -> Params:
    """Return the query parameters for a new search term."""
    updated = _set_param(params, PAGE_PARAM, "1")
    if term:
        return _set_param(updated, QUERY_PARAM, term)
    return _delete_param(updated, QUERY_PARAM)


class QueryParamSynchronizer:
    """
    Drives URL updates from a search input.

    Args:
        url: Current location (path plus optional query string)
        replace: Navigation callback; receives the new path + query string and
                 must replace the current history entry
        wait_ms: Quiet period before a change is applied

    Example:
        >>> sync = QueryParamSynchronizer("/dashboard/invoices?page=3", router.replace)
        >>> sync.on_change("acme")
        # 300 ms later: router.replace("/dashboard/invoices?page=1&query=acme")
    """

    def __init__(
        self,
        url: str,
        replace: Callable[[str], None],
        wait_ms: Optional[int] = None,
    ):
        parts = urlsplit(url)
        self._path = parts.path
        self._params: Params = parse_qsl(parts.query, keep_blank_values=True)
        self._replace = replace
        self._debouncer: Debouncer[str] = Debouncer(
            self._apply,
            wait_ms=settings.SEARCH_DEBOUNCE_MS if wait_ms is None else wait_ms,
        )

    @property
    def initial_value(self) -> str:
        """Value to show in the input on first render (current `query`, if any)."""
        for key, value in self._params:
            if key == QUERY_PARAM:
                return value
        return ""

    @property
    def current_url(self) -> str:
        if not self._params:
            return self._path
        return f"{self._path}?{urlencode(self._params)}"

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def on_change(self, term: str) -> None:
        """Handle an input change event carrying the input's current text."""
        self._debouncer(term)

    def flush(self) -> None:
        self._debouncer.flush()

    def cancel(self) -> None:
        self._debouncer.cancel()

    def _apply(self, term: str) -> None:
        logger.debug(f"Searching... {term!r}")
        self._params = apply_search_term(self._params, term)
        self._replace(f"{self._path}?{urlencode(self._params)}")
