"""Entry point for the request board server.

Launches the FastAPI application with uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (defaults
``0.0.0.0`` and ``3001``) so the board is reachable from other devices
on the network.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from request_board.app.core.config import settings
from request_board.app.main import app


async def run_server() -> None:
    """Serve the API until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level="info")
    server = Server(config)
    logging.getLogger(__name__).info(
        "Server running on http://%s:%s", settings.host, settings.port
    )
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_server())
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
