"""
Error taxonomy shared by the service and the client.

The service layer raises these exceptions and the route handlers
translate them into HTTP status codes.  The HTTP client performs the
reverse mapping so that client code can handle failures by type
without looking at status codes:

=========================  ===========================================
Exception                  Meaning
=========================  ===========================================
``ValidationError``        malformed or missing input (400)
``InvalidStatus``          status outside the allowed enum (400)
``NotFound``               unknown or already deleted request (404)
``TransientTransportError`` network failure, timeout or 502/503/504
``InternalError``          unexpected server fault (500)
=========================  ===========================================

``ValidationError`` and ``NotFound`` also derive from ``ValueError`` and
``LookupError`` respectively so that callers written against the
built‑in exceptions keep working.
"""

from __future__ import annotations

from typing import Optional


class RequestBoardError(Exception):
    """Base class for every error raised by the request board."""


class ValidationError(RequestBoardError, ValueError):
    """Input rejected before it reached the store.

    ``field`` names the offending input (``"text"``, ``"year"`` …) when
    known so that a form can show the message next to it.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidStatus(ValidationError):
    """Status value outside ``pending``/``in-progress``/``completed``."""

    def __init__(self, status: object) -> None:
        super().__init__(f"Invalid status: {status!r}", field="status")
        self.status = status


class NotFound(RequestBoardError, LookupError):
    """The referenced request does not exist (any more)."""

    def __init__(self, request_id: object) -> None:
        super().__init__(f"Request {request_id} not found")
        self.request_id = request_id


class TransientTransportError(RequestBoardError):
    """The server could not be reached or is temporarily unavailable."""


class InternalError(RequestBoardError):
    """The server failed unexpectedly."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
