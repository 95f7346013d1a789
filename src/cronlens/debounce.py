"""Caller-owned debouncing for interactive front ends.

Editors that re-validate on every keystroke wrap the engine call in a
``Debouncer``; the engine itself stays synchronous and stateless.

Example:
    >>> def refresh(source: str) -> None:
    ...     result = parse(source)
    ...     ...
    >>> debouncer = Debouncer(refresh, delay=0.3)
    >>> debouncer.call("*/5 * * *")     # superseded
    >>> debouncer.call("*/5 * * * *")   # runs ~0.3s later
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Debouncer(Generic[R]):
    """Runs ``func`` once calls have been quiet for ``delay`` seconds.

    Each ``call`` replaces any pending invocation. The function runs on a
    timer thread; exceptions it raises are logged and the last successful
    result is kept in ``last_result``.
    """

    def __init__(self, func: Callable[..., R], delay: float = 0.3) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self._func = func
        self._delay = delay
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self.last_result: R | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def call(self, *args: Any, **kwargs: Any) -> None:
        """Schedule ``func(*args, **kwargs)``, cancelling any pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self._delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> R | None:
        """Run the pending call now on the calling thread.

        Returns:
            The function's result, or None if nothing was pending.
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            pending, self._pending = self._pending, None
        if pending is None:
            return None
        args, kwargs = pending
        self.last_result = self._func(*args, **kwargs)
        return self.last_result

    def _fire(self) -> None:
        with self._lock:
            # A newer call replaced this timer after it had already started
            if threading.current_thread() is not self._timer:
                return
            pending, self._pending = self._pending, None
            self._timer = None
        if pending is None:
            return
        args, kwargs = pending
        try:
            self.last_result = self._func(*args, **kwargs)
        except Exception:
            logger.exception("Debounced call to %r failed", self._func)
