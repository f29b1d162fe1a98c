"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the service starts
with no configuration at all; in a deployment you override them via the
environment (or a ``.env`` file loaded by your process manager).
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Request Board")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite database.  Relative paths are resolved against the
    # package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "requests.db")

    # Listening address used by ``run.py``.
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))

    # Discord notification for newly created requests.  Both the bot token
    # and the channel must be set, otherwise notifications are skipped.
    # ``BOT_TOKEN`` is honoured for compatibility with older deployments.
    discord_bot_token: str = os.getenv("DISCORD_BOT_TOKEN", os.getenv("BOT_TOKEN", ""))
    discord_channel_id: str = os.getenv("DISCORD_CHANNEL_ID", "")
    discord_api_base: str = os.getenv("DISCORD_API_BASE", "https://discord.com/api/v10")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must be
# set before this module is imported.
settings = Settings()
