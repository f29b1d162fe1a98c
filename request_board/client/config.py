"""
Client configuration.

Like the service settings, ``ClientSettings`` reads environment
variables with defaults for every field.  Construct it directly to
override values in tests or embedding applications.
"""

import os
from dataclasses import dataclass


@dataclass
class ClientSettings:
    """Settings for the polling client."""

    base_url: str = os.getenv("REQUEST_BOARD_BASE_URL", "http://localhost:3001/api/v1")
    # Seconds between reconciliation ticks.
    poll_interval: float = float(os.getenv("REQUEST_BOARD_POLL_INTERVAL", "5"))
    # Pixels a press must travel in either axis before it becomes a drag.
    drag_threshold: int = int(os.getenv("REQUEST_BOARD_DRAG_THRESHOLD", "10"))
    # HTTP timeout in seconds; bounds how long a hung call keeps the
    # session busy.
    timeout: float = float(os.getenv("REQUEST_BOARD_TIMEOUT", "15"))
    timezone: str = os.getenv("REQUEST_BOARD_TIMEZONE", "America/Chicago")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = ClientSettings()
