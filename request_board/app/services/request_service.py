"""
Service for the ordered request list.

This module is the authoritative store of the board.  It owns the
``requests`` table and exposes the mutation API used by the HTTP
routes: create, set status, set a single sort position, bulk reorder
and delete.  Every method opens its own connection and performs its
work in a single transaction, so each call is atomic with respect to
concurrent readers.

Display order is priority requests first, then ascending
``sort_position``, then ascending ``submitted_at``; the row id is the
final tie breaker so the order is total.  Positions may contain gaps
or duplicates at rest (after deletes or single‑record moves); a bulk
``reorder`` rewrites the submitted ids to ``0..n-1``.

There is no version check on any mutation: when two clients reorder or
change a status concurrently, the last call to reach the store wins.
Likewise ``set_status`` does not guard transitions, so a completed
request may be moved back to pending by a direct API call.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, List, Optional

from request_board.app.core.db import get_connection
from request_board.app.schemas.request import (
    STATUS_VALUES,
    RequestCreate,
    RequestRead,
)
from request_board.errors import InvalidStatus, NotFound, ValidationError


logger = logging.getLogger(__name__)

_SELECT_ORDERED = """
    SELECT id, text, submitted_by, submitted_at, status, priority,
           sort_position, year, type
    FROM requests
    ORDER BY priority DESC, sort_position ASC, submitted_at ASC, id ASC
"""

# SQLite stores INTEGER as a signed 64-bit value.
SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1


class RequestService:
    """Service class for reading and mutating the request list."""

    @staticmethod
    def _now() -> str:
        # Microsecond precision keeps insertion order within one second.
        return datetime.now(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _row_to_request(row: sqlite3.Row) -> RequestRead:
        """Convert a database row to a ``RequestRead`` instance."""
        return RequestRead(
            id=row["id"],
            text=row["text"],
            submitted_by=row["submitted_by"],
            submitted_at=str(row["submitted_at"]),
            status=row["status"],
            priority=bool(row["priority"]),
            sort_position=row["sort_position"],
            year=row["year"],
            type=row["type"],
        )

    @staticmethod
    def _storable(value: int) -> bool:
        return SQLITE_INT_MIN <= value <= SQLITE_INT_MAX

    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[int]:
        """Return ``value`` as a storable id, or ``None`` if it cannot be one.

        Integer strings such as ``"12"`` are accepted.  Booleans, other
        types and integers outside the SQLite range are not.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                return None
        if not isinstance(value, int) or not cls._storable(value):
            return None
        return value

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @classmethod
    async def list_requests(cls) -> List[RequestRead]:
        """Return the full collection in display order."""
        conn = get_connection()
        try:
            rows = conn.execute(_SELECT_ORDERED).fetchall()
            return [cls._row_to_request(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_request(cls, request_id: int) -> RequestRead:
        """Return a single request.

        Raises
        ------
        NotFound
            If no request has this id.
        """
        if not cls._storable(request_id):
            raise NotFound(request_id)
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM requests WHERE id = ?", (request_id,)
            ).fetchone()
            if not row:
                raise NotFound(request_id)
            return cls._row_to_request(row)
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @classmethod
    async def create_request(cls, data: RequestCreate) -> int:
        """Append a new pending request and return its id.

        The new row's ``sort_position`` is the number of rows already
        stored, which places it after every existing request of its
        tier unless positions have drifted upwards.

        Raises
        ------
        ValidationError
            If ``text`` or ``submitted_by`` is missing or blank.
        """
        text = (data.text or "").strip()
        submitted_by = (data.submitted_by or "").strip()
        if not text:
            raise ValidationError("Text is required", field="text")
        if not submitted_by:
            raise ValidationError("submittedBy is required", field="submittedBy")

        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            (count,) = conn.execute("SELECT COUNT(*) FROM requests").fetchone()
            cursor = conn.execute(
                """
                INSERT INTO requests
                    (text, submitted_by, submitted_at, status, priority, sort_position, year, type)
                VALUES (?, ?, ?, 'pending', ?, ?, ?, ?)
                """,
                (
                    text,
                    submitted_by,
                    cls._now(),
                    1 if data.priority else 0,
                    count,
                    data.year,
                    data.type,
                ),
            )
            request_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Created request %s by %s at position %s", request_id, submitted_by, count)
        return request_id

    @classmethod
    async def set_status(cls, request_id: int, status: Optional[str]) -> None:
        """Set the status of a request.

        Raises
        ------
        InvalidStatus
            If ``status`` is not one of the workflow states.
        NotFound
            If no request has this id.
        """
        if status not in STATUS_VALUES:
            raise InvalidStatus(status)
        if not cls._storable(request_id):
            raise NotFound(request_id)
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE requests SET status = ? WHERE id = ?",
                (status, request_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(request_id)
            conn.commit()
        finally:
            conn.close()
        logger.info("Request %s status set to %s", request_id, status)

    @classmethod
    async def set_sort_position(cls, request_id: int, position: int) -> None:
        """Move one request to ``position`` without renumbering siblings.

        Raises
        ------
        ValidationError
            If ``position`` does not fit an SQLite integer.
        NotFound
            If no request has this id.
        """
        if not cls._storable(position):
            raise ValidationError("position is out of range", field="position")
        if not cls._storable(request_id):
            raise NotFound(request_id)
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE requests SET sort_position = ? WHERE id = ?",
                (position, request_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(request_id)
            conn.commit()
        finally:
            conn.close()
        logger.info("Request %s sort position set to %s", request_id, position)

    @classmethod
    async def reorder(cls, ordered_ids: Any) -> int:
        """Assign ``sort_position = index`` for each id in ``ordered_ids``.

        All updates run inside one ``BEGIN IMMEDIATE`` transaction, so a
        concurrent ``reorder`` either sees none or all of them.

        Repeated ids keep their first occurrence only, so the positions
        written are unique.  Integer strings are read as ids.  Entries
        that are not in the store (deleted by another client since the
        caller last fetched, or values that can never be an id) are
        skipped without error and keep their slot in the numbering.

        Returns the number of rows actually updated.

        Raises
        ------
        ValidationError
            If ``ordered_ids`` is not a list.
        """
        if not isinstance(ordered_ids, list):
            raise ValidationError("ids must be an array", field="ids")

        slots: List[Optional[int]] = []
        seen = set()
        for value in ordered_ids:
            request_id = cls._coerce_id(value)
            if request_id is not None:
                if request_id in seen:
                    continue
                seen.add(request_id)
            slots.append(request_id)

        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            updated = 0
            for index, request_id in enumerate(slots):
                if request_id is None:
                    continue
                cursor = conn.execute(
                    "UPDATE requests SET sort_position = ? WHERE id = ?",
                    (index, request_id),
                )
                updated += cursor.rowcount
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()
        skipped = len(slots) - updated
        if skipped:
            logger.info("Reordered %s requests (%s unknown ids skipped)", updated, skipped)
        else:
            logger.info("Reordered %s requests", updated)
        return updated

    @classmethod
    async def delete_request(cls, request_id: int) -> None:
        """Permanently delete a request.

        Remaining positions are left untouched; the gap is harmless for
        ordering and disappears on the next ``reorder``.

        Raises
        ------
        NotFound
            If no request has this id.
        """
        if not cls._storable(request_id):
            raise NotFound(request_id)
        conn = get_connection()
        try:
            cursor = conn.execute("DELETE FROM requests WHERE id = ?", (request_id,))
            if cursor.rowcount == 0:
                raise NotFound(request_id)
            conn.commit()
        finally:
            conn.close()
        logger.info("Deleted request %s", request_id)
