"""
Text projection of the request list.

``render_lines`` is a pure function from the ordered list to display
lines; it holds no state and can be called on every change.  The
console watcher prints its output, and any other front end can use
``format_timestamp`` and ``status_label`` to stay consistent with it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List
from zoneinfo import ZoneInfo

from request_board.app.schemas.request import RequestRead, RequestStatus


STATUS_LABELS = {
    RequestStatus.PENDING: "Pending...",
    RequestStatus.IN_PROGRESS: "In Progress",
    RequestStatus.COMPLETED: "Completed",
}

EMPTY_MESSAGE = "No requests yet. Add one above!"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(RequestStatus(status), str(status))


def format_timestamp(value: str, tz_name: str = "America/Chicago") -> str:
    """Format a stored timestamp as ``MM/DD/YYYY @ hh:mm:ss AM``.

    Timestamps without an offset are taken to be UTC.  Unparseable
    values are returned unchanged.
    """
    try:
        moment = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return str(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(ZoneInfo(tz_name))
    return local.strftime("%m/%d/%Y @ %I:%M:%S %p")


def render_lines(requests: Iterable[RequestRead], tz_name: str = "America/Chicago") -> List[str]:
    """Return one block of lines per request, in list order."""
    items = list(requests)
    if not items:
        return [EMPTY_MESSAGE]

    lines: List[str] = []
    for index, request in enumerate(items, start=1):
        marker = "!" if request.priority else " "
        lines.append(f"{index:>3}.{marker} [{status_label(request.status)}] {request.text}")
        meta = []
        if request.year:
            meta.append(f"Year: {request.year}")
        if request.type:
            meta.append(f"Type: {request.type}")
        if meta:
            lines.append("       " + "  ".join(meta))
        lines.append(
            f"       Submitted: {format_timestamp(request.submitted_at, tz_name)}"
            f"  By: {request.submitted_by or 'Unknown'}"
        )
    return lines
