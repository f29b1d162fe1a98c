"""
Client‑side session state.

A :class:`ListSession` is everything one viewer knows about the board:
its local copy of the list, the busy flag that suspends background
refreshes while a user action is in flight, and the handle of the
reconciliation loop polling on its behalf.  The session is passed
explicitly to the loop, the interaction controller and the action
handlers so each of them can be tested with a session built by hand.

The local list is always a copy.  It is replaced wholesale on every
successful fetch and never edited in place, so a reader holding a
snapshot is not affected by a concurrent refresh.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional

from request_board.app.schemas.request import RequestRead

if TYPE_CHECKING:
    from request_board.client.reconcile import ReconciliationLoop


class ListSession:
    """Local view of the board owned by one client."""

    def __init__(self, items: Optional[Iterable[RequestRead]] = None) -> None:
        self._items: List[RequestRead] = list(items or [])
        self._busy_depth = 0
        self._lock = threading.RLock()
        self.poll_handle: Optional["ReconciliationLoop"] = None

    # ------------------------------------------------------------------
    # Local list
    # ------------------------------------------------------------------
    @property
    def items(self) -> List[RequestRead]:
        """A copy of the local list."""
        with self._lock:
            return list(self._items)

    def ids(self) -> List[int]:
        with self._lock:
            return [item.id for item in self._items]

    def find(self, request_id: int) -> Optional[RequestRead]:
        with self._lock:
            for item in self._items:
                if item.id == request_id:
                    return item
        return None

    def index_of(self, request_id: int) -> Optional[int]:
        with self._lock:
            for index, item in enumerate(self._items):
                if item.id == request_id:
                    return index
        return None

    def replace(self, items: Iterable[RequestRead]) -> bool:
        """Replace the local list if it differs structurally.

        Returns ``True`` when the list changed (and a redraw is due).
        """
        new_items = list(items)
        with self._lock:
            if new_items == self._items:
                return False
            self._items = new_items
            return True

    def replace_unless_busy(self, items: Iterable[RequestRead]) -> bool:
        """Like :meth:`replace`, but leave the list alone while busy.

        The busy check and the swap happen under one lock, so an action
        that marks the session busy either runs against the old list or
        starts after the new one is in place.
        """
        new_items = list(items)
        with self._lock:
            if self._busy_depth > 0:
                return False
            return self.replace(new_items)

    # ------------------------------------------------------------------
    # Busy flag
    # ------------------------------------------------------------------
    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._busy_depth > 0

    @contextmanager
    def busy(self) -> Iterator["ListSession"]:
        """Mark the session busy for the duration of the block.

        Blocks may nest (a delete followed by a compacting reorder); the
        flag clears when the outermost block exits, including on error.
        """
        with self._lock:
            self._busy_depth += 1
        try:
            yield self
        finally:
            with self._lock:
                self._busy_depth -= 1
