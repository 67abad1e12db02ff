"""Trailing-edge debounce for keystroke-driven re-ranking.

Each call restarts the quiet window; when it elapses the wrapped function
runs once with the arguments of the last call. The timer primitive is
injectable: a ``threading.Timer`` by default, ``loop.call_later`` for
asyncio hosts, or a fake clock in tests.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Protocol

from .config import settings

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def thread_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Start a daemon ``threading.Timer``."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def loop_timer(loop: asyncio.AbstractEventLoop | None = None) -> TimerFactory:
    """Timer factory scheduling on an asyncio event loop.

    Without an explicit loop, the running loop at call time is used.
    """
    def factory(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        target = loop or asyncio.get_running_loop()
        return target.call_later(delay, callback)

    return factory


class Debouncer:
    """Debounced wrapper around ``fn`` holding at most one pending timer."""

    def __init__(
        self,
        fn: Callable[..., Any],
        wait_ms: float,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self.fn = fn
        self.wait_ms = max(0.0, wait_ms)
        self._timer_factory = timer_factory or thread_timer
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        # Bumped on every call/cancel so a superseded timer that already
        # started running does nothing.
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._args, self._kwargs = args, kwargs
            if self._handle is not None:
                self._handle.cancel()
            self._handle = self._timer_factory(self.wait_ms / 1000.0, lambda: self._fire(generation))

    def _take_pending(self) -> tuple[tuple[Any, ...], dict[str, Any]]:
        args, kwargs = self._args, self._kwargs
        self._handle = None
        self._args, self._kwargs = (), {}
        self._generation += 1
        return args, kwargs

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._handle is None:
                return
            args, kwargs = self._take_pending()
        self.fn(*args, **kwargs)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._handle is None:
                return
            self._handle.cancel()
            self._take_pending()

    def flush(self) -> bool:
        """Run the pending call now.

        Returns:
            True if a call was pending
        """
        with self._lock:
            if self._handle is None:
                return False
            self._handle.cancel()
            args, kwargs = self._take_pending()
        self.fn(*args, **kwargs)
        return True


def debounce(
    fn: Callable[..., Any],
    wait_ms: float | None = None,
    *,
    timer_factory: TimerFactory | None = None,
) -> Debouncer:
    """Trailing-edge debounce of ``fn`` (default wait from settings)."""
    wait = settings.debounce.wait_ms if wait_ms is None else wait_ms
    return Debouncer(fn, wait, timer_factory)
