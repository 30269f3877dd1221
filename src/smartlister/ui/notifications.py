"""Toast notification store for the Smart Lister UI.

Any component can report feedback through a :class:`ToastStore` without
knowing how it is displayed.  The UI renders :meth:`ToastStore.list_toasts`
on a timer.

Replace Policy
--------------
Only one toast is visible at a time.  Adding a toast replaces the whole
visible set with ``[new_toast]`` and cancels the expiry timers of the
replaced ones.  Removal still matches by id.

Expiry
------
A toast with ``duration > 0`` is removed ``duration`` milliseconds after it
was added.  ``duration == 0`` keeps it until :meth:`ToastStore.remove_toast`
is called.  Timers that fire after the toast is gone do nothing.

Scheduling uses ``loop.call_later`` on the running asyncio loop.  Outside a
running loop (sync Gradio handlers run on worker threads) a daemon
``threading.Timer`` is used instead.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TOAST_DURATION_MS = 2000

Scheduler = Callable[[float, Callable[[], None]], Any]


@dataclass(frozen=True)
class Toast:
    """One notification.

    Attributes:
        id: Store-unique, increasing identifier
        title: Optional heading
        description: Optional body text
        duration: Lifetime in milliseconds (0 = until removed)
    """

    id: int
    title: str | None = None
    description: str | None = None
    duration: int = DEFAULT_TOAST_DURATION_MS


def schedule_later(delay: float, callback: Callable[[], None]) -> Any:
    """Run ``callback`` after ``delay`` seconds.

    Returns:
        A handle with a ``cancel()`` method
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
    return loop.call_later(delay, callback)


class ToastStore:
    """Session-scoped set of live toasts with automatic expiry.

    Construct one per UI session and call :meth:`close` on teardown.
    """

    def __init__(
        self,
        default_duration: int = DEFAULT_TOAST_DURATION_MS,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            default_duration: Duration used when ``add_toast`` gets none (ms)
            scheduler: ``(delay_seconds, callback) -> handle`` used for expiry.
                Defaults to :func:`schedule_later`.
        """
        self.default_duration = max(0, default_duration)
        self._scheduler = scheduler or schedule_later
        self._ids = itertools.count(1)
        self._toasts: list[Toast] = []
        self._timers: dict[int, Any] = {}
        self._lock = threading.Lock()
        self._closed = False

    def add_toast(
        self,
        title: str | None = None,
        description: str | None = None,
        duration: int | None = None,
    ) -> Toast:
        """Show a new toast, replacing whatever is currently visible.

        Args:
            title: Optional heading
            description: Optional body text
            duration: Lifetime in ms; None uses the store default, 0 persists.
                Negative values are treated as 0.

        Returns:
            The registered toast
        """
        resolved = self.default_duration if duration is None else max(0, duration)
        toast = Toast(id=next(self._ids), title=title, description=description, duration=resolved)

        with self._lock:
            replaced = list(self._timers.values())
            self._timers.clear()
            self._toasts = [toast]
            closed = self._closed

        for handle in replaced:
            handle.cancel()

        if resolved > 0 and not closed:
            handle = self._scheduler(resolved / 1000, lambda: self.remove_toast(toast.id))
            with self._lock:
                # The toast may already be gone (expired, replaced or closed)
                keep = not self._closed and any(t.id == toast.id for t in self._toasts)
                if keep:
                    self._timers[toast.id] = handle
            if not keep:
                handle.cancel()

        logger.debug(f"Toast {toast.id} added: {title!r} ({resolved} ms)")
        return toast

    def remove_toast(self, toast_id: int) -> None:
        """Remove a toast by id.  Unknown ids are ignored."""
        with self._lock:
            self._toasts = [t for t in self._toasts if t.id != toast_id]
            handle = self._timers.pop(toast_id, None)

        if handle is not None:
            handle.cancel()

    def list_toasts(self) -> list[Toast]:
        """Return the live toasts in display order."""
        with self._lock:
            return list(self._toasts)

    def close(self) -> None:
        """Cancel pending expiries and clear the store."""
        with self._lock:
            handles = list(self._timers.values())
            self._timers.clear()
            self._toasts = []
            self._closed = True

        for handle in handles:
            handle.cancel()
        logger.debug("ToastStore closed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._toasts)

    def __repr__(self) -> str:
        with self._lock:
            return f"ToastStore(live={len(self._toasts)}, closed={self._closed})"
