"""Request Board API client.

This module defines a thin client around the request board's REST API
using the ``requests`` library.  It exposes one method per logical
operation:

* :meth:`RequestBoardAPI.list_requests` – fetch the authoritative list.
* :meth:`RequestBoardAPI.create_request` – submit a new request.
* :meth:`RequestBoardAPI.set_status` – change a request's status.
* :meth:`RequestBoardAPI.set_sort_position` – move a single request.
* :meth:`RequestBoardAPI.reorder` – persist a full drag and drop order.
* :meth:`RequestBoardAPI.delete_request` – delete a request.
* :meth:`RequestBoardAPI.health` – check that the server is up.

Failures are raised as the exceptions in :mod:`request_board.errors`
rather than returned, so callers can write ``try``/``except``/``finally``
blocks around a mutation and always release their busy flag.  Every
call carries a timeout; a server that never answers therefore surfaces
as :class:`~request_board.errors.TransientTransportError` instead of
blocking the caller forever.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError as PydanticValidationError

from request_board.app.schemas.request import RequestRead
from request_board.errors import (
    InternalError,
    InvalidStatus,
    NotFound,
    TransientTransportError,
    ValidationError,
)


logger = logging.getLogger(__name__)

# Gateway style failures are worth retrying on the next poll.
_TRANSIENT_STATUSES = {502, 503, 504}


class RequestBoardAPI:
    """Client for the request board HTTP API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the version prefix, e.g.
                ``http://localhost:3001/api/v1``.
            timeout: Seconds to wait for each response.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            message = body.get("detail") or body.get("error") or body.get("message")
            if message:
                return str(message)
        return str(body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any | None = None,
        request_id: Any | None = None,
    ) -> Any:
        """Perform an HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/requests``).
            json_body: JSON body to send with the request.
            request_id: Id referenced by the path, used in ``NotFound``.

        Raises:
            TransientTransportError: connection failure, timeout or a
                502/503/504 response.
            ValidationError: HTTP 400 or 422.
            NotFound: HTTP 404.
            InternalError: any other non‑2xx response.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request %s %s failed: %s", method, path, exc)
            raise TransientTransportError(str(exc)) from exc

        if response.ok:
            if response.content:
                return response.json()
            return None

        status = response.status_code
        message = self._error_message(response)
        logger.error("API request %s %s failed (%s): %s", method, path, status, message)
        if status in (400, 422):
            raise ValidationError(message)
        if status == 404:
            raise NotFound(request_id if request_id is not None else path)
        if status in _TRANSIENT_STATUSES:
            raise TransientTransportError(f"HTTP {status}: {message}")
        raise InternalError(message, status_code=status)

    # ------------------------------------------------------------------
    # Request operations
    # ------------------------------------------------------------------
    def list_requests(self) -> List[RequestRead]:
        """Retrieve the whole list in display order."""
        data = self._request("GET", "/requests")
        if not isinstance(data, list):
            raise InternalError(f"Unexpected list payload: {type(data).__name__}")
        try:
            return [RequestRead.model_validate(item) for item in data]
        except PydanticValidationError as exc:
            raise InternalError(f"Malformed request in list payload: {exc}") from exc

    def create_request(
        self,
        text: str,
        submitted_by: str,
        *,
        priority: bool = False,
        year: Optional[int] = None,
        request_type: Optional[str] = None,
    ) -> int:
        """Create a request and return its id."""
        payload: Dict[str, Any] = {
            "text": text,
            "submittedBy": submitted_by,
            "priority": priority,
            "year": year,
            "type": request_type,
        }
        data = self._request("POST", "/requests", json_body=payload)
        return int(data["id"])

    def set_status(self, request_id: int, status: str) -> None:
        """Set a request's status."""
        try:
            self._request(
                "PUT",
                f"/requests/{request_id}/status",
                json_body={"status": status},
                request_id=request_id,
            )
        except ValidationError as exc:
            raise InvalidStatus(status) from exc

    def set_sort_position(self, request_id: int, position: int) -> None:
        """Move a single request without renumbering the others."""
        self._request(
            "PUT",
            f"/requests/{request_id}/position",
            json_body={"position": position},
            request_id=request_id,
        )

    def reorder(self, ordered_ids: Sequence[int]) -> None:
        """Persist a new relative order for ``ordered_ids``."""
        self._request("PUT", "/requests/reorder", json_body={"ids": list(ordered_ids)})

    def delete_request(self, request_id: int) -> None:
        """Delete a request."""
        self._request("DELETE", f"/requests/{request_id}", request_id=request_id)

    def health(self) -> Dict[str, Any]:
        """Return the server's health payload."""
        return self._request("GET", "/health")
