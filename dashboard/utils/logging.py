"""
Logging utilities for the invoice dashboard backend.

Never log:
- Passwords submitted to /auth/login
- Supabase Auth tokens, API keys, or database URLs
- Raw form payloads (log field names and ids instead)
- Full email addresses (use mask_email)

Acceptable logging:
- High-level events (e.g., "Invoice inserted", "Invalidated view")
- Record identifiers and page/query metadata
- Error classes and sanitized error messages
"""

import logging
from typing import Optional

from dashboard.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configured_level() -> int:
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger for a module that may run outside the FastAPI app
    (the search synchronizer, scripts), where basicConfig was never called.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to LOG_LEVEL)

    Usage:
        >>> from dashboard.utils.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else _configured_level())

    # Fall back to our own handler only when nothing upstream will print
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger


def mask_email(email: str) -> str:
    """
    Keep the first character of the local part and the domain.

    >>> mask_email("user@nextmail.com")
    'u***@nextmail.com'
    """
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"
