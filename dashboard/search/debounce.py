"""
Trailing-edge debouncing on the asyncio event loop.
"""

import asyncio
from typing import Callable, Generic, Optional, TypeVar

from dashboard.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_NOTHING = object()


class Debouncer(Generic[T]):
    """
    Call `callback` with the last value seen once `wait_ms` have passed
    without a new call.

    Every call cancels the pending timer and starts a new one; values
    superseded within the quiet window are dropped, never queued.

    Must be called from code running on an event loop (or be given one).

    Example:
        >>> debounced = Debouncer(print, wait_ms=300)
        >>> debounced("a"); debounced("ab")   # prints "ab" once, 300 ms later
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        wait_ms: int = 300,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        if wait_ms < 0:
            raise ValueError("wait_ms must be >= 0")
        self._callback = callback
        self._wait_seconds = wait_ms / 1000
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._value: object = _NOTHING

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not fired yet."""
        return self._handle is not None

    def __call__(self, value: T) -> None:
        loop = self._loop or asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._value = value
        self._handle = loop.call_later(self._wait_seconds, self._fire)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            logger.debug("Pending debounced call cancelled")
        self._handle = None
        self._value = _NOTHING

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the timer."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = _NOTHING
        if value is _NOTHING:
            return
        self._callback(value)  # type: ignore[arg-type]
