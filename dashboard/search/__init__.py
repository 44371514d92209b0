"""
Client-side search helpers: debounced query-string synchronization for the
dashboard search box.
"""

from .debounce import Debouncer
from .sync import QueryParamSynchronizer, apply_search_term

__all__ = ["Debouncer", "QueryParamSynchronizer", "apply_search_term"]
