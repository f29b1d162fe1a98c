"""
User‑initiated mutations.

Every action follows the same pattern: mark the session busy so the
reconciliation loop leaves the list alone, make one API call, force a
reload and redraw from the server, and clear the busy flag however the
call ended.  The local list is never edited optimistically; whatever
the server returns after the call is what the user sees.

Failures are reported through the ``notify`` callable (a message box in
a GUI, a log line in the console watcher) and the action returns a
falsy value.  Form validation errors are the exception: they are raised
before the session is touched so the caller can attach the message to
the right field.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, List, Optional, Protocol, Sequence

from request_board.app.schemas.request import RequestRead, RequestStatus
from request_board.client.reconcile import ReconciliationLoop
from request_board.client.session import ListSession
from request_board.client.validation import validate_submission
from request_board.errors import RequestBoardError


logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class MutationAPI(Protocol):
    def list_requests(self) -> List[RequestRead]: ...

    def create_request(
        self,
        text: str,
        submitted_by: str,
        *,
        priority: bool = False,
        year: Optional[int] = None,
        request_type: Optional[str] = None,
    ) -> int: ...

    def set_status(self, request_id: int, status: str) -> None: ...

    def reorder(self, ordered_ids: Sequence[int]) -> None: ...

    def delete_request(self, request_id: int) -> None: ...


def next_toggle_status(status: str) -> Optional[str]:
    """Status reached by the toggle button, or ``None`` for completed."""
    if status == RequestStatus.PENDING:
        return RequestStatus.IN_PROGRESS.value
    if status == RequestStatus.IN_PROGRESS:
        return RequestStatus.PENDING.value
    return None


def _log_notification(message: str) -> None:
    logger.warning(message)


class RequestActions:
    """Mutation handlers bound to one session."""

    def __init__(
        self,
        api: MutationAPI,
        session: ListSession,
        loop: ReconciliationLoop,
        notify: Optional[Notifier] = None,
        *,
        compact_after_delete: bool = True,
    ) -> None:
        self.api = api
        self.session = session
        self.loop = loop
        self.notify = notify or _log_notification
        self.compact_after_delete = compact_after_delete

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    def submit_reorder(self, ordered_ids: Sequence[int]) -> bool:
        """Persist a candidate order, then reload from the server.

        The reload happens even when the reorder call fails so the view
        always ends up showing the server's order.
        """
        ok = False
        with self.session.busy():
            try:
                self.api.reorder(list(ordered_ids))
                ok = True
            except RequestBoardError as exc:
                logger.error("Error updating request order: %s", exc)
                self.notify("Failed to update request order. Please try again.")
            try:
                self.loop.reload()
            except RequestBoardError as exc:
                logger.error("Error reloading requests after reorder: %s", exc)
                if ok:
                    self.notify("Failed to load requests. Please check if the server is running.")
        return ok

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    def toggle_status(self, request_id: int) -> bool:
        """Flip between pending and in‑progress; completed is left alone."""
        request = self.session.find(request_id)
        if request is None:
            return False
        new_status = next_toggle_status(request.status)
        if new_status is None:
            return False
        return self._set_status(
            request_id, new_status, "Failed to update request status. Please try again."
        )

    def complete(self, request_id: int) -> bool:
        """Mark a request completed regardless of its current status."""
        if self.session.find(request_id) is None:
            return False
        return self._set_status(
            request_id, RequestStatus.COMPLETED.value, "Failed to complete request. Please try again."
        )

    def _set_status(self, request_id: int, status: str, failure_message: str) -> bool:
        with self.session.busy():
            try:
                self.api.set_status(request_id, status)
                self.loop.reload()
            except RequestBoardError as exc:
                logger.error("Error setting status of request %s to %s: %s", request_id, status, exc)
                self.notify(failure_message)
                return False
        return True

    # ------------------------------------------------------------------
    # Create / delete
    # ------------------------------------------------------------------
    def create(
        self,
        text: str,
        submitted_by: str,
        *,
        year: Any,
        request_type: Optional[str],
        priority: bool = False,
        today: Optional[date] = None,
    ) -> Optional[int]:
        """Validate and submit a new request; return its id on success.

        Raises
        ------
        ValidationError
            If the form is invalid.  Nothing is sent in that case.
        """
        submission = validate_submission(text, year, request_type, today=today)
        with self.session.busy():
            try:
                request_id = self.api.create_request(
                    submission.text,
                    submitted_by,
                    priority=priority,
                    year=submission.year,
                    request_type=submission.request_type,
                )
                self.loop.reload()
            except RequestBoardError as exc:
                logger.error("Error creating request: %s", exc)
                self.notify("Failed to create request. Please try again.")
                return None
        return request_id

    def delete(self, request_id: int, confirm: Optional[Callable[[], bool]] = None) -> bool:
        """Delete a request after optional confirmation.

        With ``compact_after_delete`` the remaining ids are resubmitted as
        a reorder so positions are dense again.
        """
        if confirm is not None and not confirm():
            return False
        with self.session.busy():
            try:
                self.api.delete_request(request_id)
                self.loop.reload()
            except RequestBoardError as exc:
                logger.error("Error deleting request %s: %s", request_id, exc)
                self.notify("Failed to delete request. Please try again.")
                return False
            if self.compact_after_delete:
                self.submit_reorder(self.session.ids())
        return True
