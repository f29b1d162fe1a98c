"""Console viewer for the request board.

Loads the list once, then keeps it up to date with the reconciliation
loop and reprints the board whenever it changes.  Handy for a kiosk
terminal or for checking what other viewers see.

Usage::

    request-board-watch --base-url http://192.168.1.85:3001/api/v1

Configuration defaults come from ``REQUEST_BOARD_*`` environment
variables (see :mod:`request_board.client.config`).  Stop with Ctrl+C.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional, Sequence, TextIO

from request_board.app.core.logging_config import setup_logging
from request_board.app.schemas.request import RequestRead
from request_board.client.api import RequestBoardAPI
from request_board.client.config import settings
from request_board.client.reconcile import ReconciliationLoop
from request_board.client.render import render_lines
from request_board.client.session import ListSession
from request_board.errors import RequestBoardError


logger = logging.getLogger(__name__)


class BoardPrinter:
    """Redraw callback that prints the whole board."""

    def __init__(self, stream: Optional[TextIO] = None, tz_name: str = settings.timezone) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.tz_name = tz_name

    def __call__(self, requests: List[RequestRead]) -> None:
        self.stream.write("\n".join(render_lines(requests, self.tz_name)) + "\n\n")
        self.stream.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch the request board from a terminal.")
    parser.add_argument("--base-url", default=settings.base_url, help="API base URL including /api/v1")
    parser.add_argument(
        "--interval", type=float, default=settings.poll_interval, help="Seconds between refreshes"
    )
    parser.add_argument("--once", action="store_true", help="Print the board once and exit")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)

    api = RequestBoardAPI(base_url=args.base_url, timeout=settings.timeout)
    session = ListSession()
    loop = ReconciliationLoop(api, session, BoardPrinter(), interval=args.interval)

    try:
        loop.reload()
    except RequestBoardError as exc:
        logger.error("Failed to load requests. Please check if the server is running. (%s)", exc)
        if args.once:
            return 1
    if args.once:
        return 0

    loop.start()
    try:
        while loop.running:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Watcher stopped by user.")
    finally:
        loop.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
