"""
Reconciliation loop.

The loop keeps a :class:`~request_board.client.session.ListSession` in
step with the server by polling ``GET /requests`` on a fixed cadence
(five seconds by default).  Each tick:

1. does nothing at all while the session is busy (no fetch);
2. otherwise fetches the authoritative list;
3. compares it structurally with the local copy and stops there if
   nothing changed, so passive UI state such as an open menu survives;
4. replaces the local copy wholesale and calls ``on_change`` once if it
   did change.

Fetch failures are logged and swallowed; the next tick simply tries
again.  User actions use :meth:`ReconciliationLoop.reload` instead,
which always redraws and lets errors propagate to the caller.

Ticks are scheduled against the time the loop started, not the time
the previous tick finished, so a tick skipped while busy does not push
the following one back.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional, Protocol

from request_board.app.schemas.request import RequestRead
from request_board.client.session import ListSession
from request_board.errors import RequestBoardError


logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0

Redraw = Callable[[List[RequestRead]], None]


class ListSource(Protocol):
    def list_requests(self) -> List[RequestRead]: ...


class ReconciliationLoop:
    """Background poller that refreshes a session's local list."""

    def __init__(
        self,
        api: ListSource,
        session: ListSession,
        on_change: Redraw,
        *,
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.api = api
        self.session = session
        self.on_change = on_change
        self.interval = interval
        self._clock = clock
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Single refresh steps
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """Run one poll; return ``True`` if the list was redrawn."""
        if self.session.is_busy:
            logger.debug("Auto-refresh skipped: user action in progress")
            return False
        try:
            items = self.api.list_requests()
        except RequestBoardError as exc:
            logger.warning("Auto-refresh failed: %s", exc)
            return False
        # A user action that started while the fetch was in flight does its
        # own reload, so the fetched list is dropped in that case.
        if not self.session.replace_unless_busy(items):
            return False
        self.on_change(self.session.items)
        logger.info("List auto-refreshed (%d requests)", len(items))
        return True

    def reload(self) -> List[RequestRead]:
        """Fetch, replace and redraw unconditionally.

        Used after a user mutation.  Errors propagate so the caller can
        tell the user; on error the local list is left untouched.
        """
        items = self.api.list_requests()
        self.session.replace(items)
        current = self.session.items
        self.on_change(current)
        return current

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start polling in a daemon thread.  No‑op if already running."""
        if self.running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="request-board-poll",
            daemon=True,
        )
        self.session.poll_handle = self
        self._thread.start()
        logger.info("Auto-refresh started (every %.1fs)", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop polling and wait for the thread to finish."""
        if self._stop_event is None:
            return
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._stop_event = None
        self._thread = None
        if self.session.poll_handle is self:
            self.session.poll_handle = None
        logger.info("Auto-refresh stopped")

    def _run(self, stop_event: threading.Event) -> None:
        next_tick = self._clock() + self.interval
        while not stop_event.wait(max(0.0, next_tick - self._clock())):
            try:
                self.tick()
            except Exception:
                logger.exception("Auto-refresh tick crashed")
            next_tick += self.interval
            now = self._clock()
            if next_tick <= now:
                # Ticks missed while a redraw ran long are dropped, not queued.
                missed = int((now - next_tick) // self.interval) + 1
                next_tick += missed * self.interval
