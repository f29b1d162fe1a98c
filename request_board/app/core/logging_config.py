"""
Logging configuration shared by the API server and the client tools.

``setup_logging`` attaches a console handler, and optionally a rotating
file handler, to the root logger.  Records carry the timestamp, logger
name, level and message.  Chatty third party loggers (the state machine
library logs every transition, urllib3 every connection) are held at
``WARNING`` unless the board itself runs at ``DEBUG``.

Only the first call in a process has any effect.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("transitions", "urllib3")


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    noisy: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"INFO"``, case insensitive.
        Unknown names fall back to ``INFO``.
    logfile : Optional[str]
        File to log to in addition to the console.  The file is rotated
        at 5 MB with three backups kept.
    noisy : Iterable[str]
        Logger names capped at ``WARNING`` when ``level`` is above
        ``DEBUG``.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured: pytest, a second create_app() or the
        # watcher running in the server's process.
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = RotatingFileHandler(
            Path(logfile).resolve(),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if numeric_level > logging.DEBUG:
        for name in noisy:
            logging.getLogger(name).setLevel(logging.WARNING)
