"""
Chat notifications for newly submitted requests.

When a request is created the API schedules ``notify_new_request`` as a
background task.  The message is posted to a Discord channel through
the Discord REST API using the ``requests`` library.  Notifications are
best effort: when the bot token or channel id is not configured the
call is skipped with a warning, and delivery failures are logged
without affecting the response already sent to the submitter.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from request_board.app.core.config import settings


logger = logging.getLogger(__name__)


class NotificationService:
    """Posts request announcements to a Discord channel."""

    @staticmethod
    def build_message(
        text: str,
        submitted_by: Optional[str],
        priority: bool,
        year: Optional[int] = None,
        request_type: Optional[str] = None,
    ) -> str:
        """Render the announcement text for a new request."""
        lines: List[str] = [
            "\U0001F4EC **New Request Added**",
            f"**Requested by:** {submitted_by or 'Unknown'}",
            f"**Request:** {text}",
        ]
        if request_type:
            lines.append(f"**Type:** {request_type}")
        if year:
            lines.append(f"**Year:** {year}")
        lines.append(f"**Priority:** {'Yes' if priority else 'No'}")
        return "\n".join(lines)

    @classmethod
    def notify_new_request(
        cls,
        text: str,
        submitted_by: Optional[str],
        priority: bool,
        year: Optional[int] = None,
        request_type: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> bool:
        """Send the announcement; return ``True`` if Discord accepted it."""
        token = settings.discord_bot_token
        channel_id = settings.discord_channel_id
        if not token or not channel_id:
            logger.warning(
                "Discord notification skipped: bot token or DISCORD_CHANNEL_ID not set."
            )
            return False

        payload: Dict[str, Any] = {
            "content": cls.build_message(text, submitted_by, priority, year, request_type)
        }
        url = f"{settings.discord_api_base.rstrip('/')}/channels/{channel_id}/messages"
        http = session or requests
        try:
            response = http.post(
                url,
                json=payload,
                headers={"Authorization": f"Bot {token}"},
                timeout=10,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            body = ""
            if getattr(exc, "response", None) is not None:
                body = exc.response.text
            logger.error("Failed to send Discord notification: %s %s", exc, body)
            return False
        logger.info("Discord notification sent for request by %s", submitted_by)
        return True
