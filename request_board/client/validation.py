"""
Form pre‑validation for new requests.

Problems the user can fix are caught here, before any network call, and
raised as :class:`~request_board.errors.ValidationError` carrying the
name of the offending field so a form can show the message next to it.
Fields are checked in form order and the first failure wins.
"""

from __future__ import annotations

from datetime import date
from typing import Any, NamedTuple, Optional

from request_board.errors import ValidationError


MIN_YEAR = 1900


class Submission(NamedTuple):
    text: str
    year: int
    request_type: str


def validate_submission(
    text: Optional[str],
    year: Any,
    request_type: Optional[str],
    today: Optional[date] = None,
) -> Submission:
    """Check a new‑request form and return the cleaned values.

    ``year`` may be an int or the raw text of a form field.  It must lie
    in ``[1900, current year]``.
    """
    cleaned_text = (text or "").strip()
    if not cleaned_text:
        raise ValidationError("Please enter a request before submitting.", field="text")

    try:
        year_value = int(str(year).strip())
    except (TypeError, ValueError):
        raise ValidationError("Please enter a valid year.", field="year") from None
    current_year = (today or date.today()).year
    if year_value < MIN_YEAR:
        raise ValidationError("Video media didn't exist before this, bub.", field="year")
    if year_value > current_year:
        raise ValidationError("You can't get something from the future, buddy.", field="year")

    cleaned_type = (request_type or "").strip()
    if not cleaned_type:
        raise ValidationError("Please select a type.", field="type")

    return Submission(cleaned_text, year_value, cleaned_type)
