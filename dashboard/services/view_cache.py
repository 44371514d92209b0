"""
Read-side cache for rendered dashboard views.

Page endpoints store their response payload under a view key (the page path
plus its query string). Writers call invalidate() with the page path once a
write has been committed so the next read goes back to the database.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from dashboard.config import settings

logger = logging.getLogger(__name__)

INVOICES_VIEW = "/dashboard/invoices"


def view_key(path: str, query_string: str = "") -> str:
    """Build the cache key for a page path and its (already encoded) query string."""
    return f"{path}?{query_string}" if query_string else path


class ViewCache:
    """
    In-process TTL cache keyed by view key.

    invalidate(path) drops the entry for the bare path and every entry for
    the same path with a query string, so one call marks all search/page
    variants of a listing as stale. It also bumps the path's generation: a
    reader that captured generation(path) before querying and passes it to
    set() will not store rows read before a concurrent invalidation.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self._clock() - stored_at >= self._ttl_seconds:
                del self._entries[key]
                return None
            return value

    def generation(self, path: str) -> int:
        with self._lock:
            return self._generations.get(path, 0)

    def set(self, key: str, value: Any, generation: Optional[int] = None) -> bool:
        """
        Store a view.

        Args:
            key: View key (see view_key)
            value: Payload to serve until invalidated or expired
            generation: generation(path) read before the payload was fetched;
                        the value is dropped if the path was invalidated since

        Returns:
            True if the value was stored.
        """
        path = key.split("?", 1)[0]
        with self._lock:
            if generation is not None and self._generations.get(path, 0) != generation:
                logger.debug(f"Not caching {key}: invalidated while it was being read")
                return False
            self._entries[key] = (value, self._clock())
            return True

    def invalidate(self, path: str) -> int:
        """
        Mark every cached variant of a view as stale.

        Returns:
            Number of entries dropped.
        """
        prefix = f"{path}?"
        with self._lock:
            self._generations[path] = self._generations.get(path, 0) + 1
            stale = [key for key in self._entries if key == path or key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        logger.info(f"Invalidated view {path} ({len(stale)} cached entries)")
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_view_cache = ViewCache(ttl_seconds=settings.VIEW_CACHE_TTL_SECONDS)


def get_view_cache() -> ViewCache:
    """FastAPI dependency returning the process-wide view cache."""
    return _view_cache
