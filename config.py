"""Application configuration."""
import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

from domain.repositories import SnapshotStore

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # Chat front-ends
    telegram_token: str = os.getenv("TELEGRAM_TOKEN", "")
    discord_token: str = os.getenv("DISCORD_TOKEN", "")

    # Snapshot storage: "sqlite" (local file) or "postgres"
    store_backend: str = os.getenv("STORE_BACKEND", "sqlite")
    db_path: str = os.getenv("DB_PATH", "ledger.db")
    database_url: str = os.getenv("DATABASE_URL", "")

    # Display
    currency: str = os.getenv("CURRENCY", "RM")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        stream=sys.stdout,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        level=getattr(logging, level.upper(), logging.INFO),
    )


def create_store(config: Config) -> SnapshotStore:
    """Build the snapshot store selected by `STORE_BACKEND`."""

    backend = config.store_backend.lower()
    if backend == "sqlite":
        from infrastructure.db.snapshot_store_sqlite import SqliteSnapshotStore

        return SqliteSnapshotStore(config.db_path)
    if backend == "postgres":
        if not config.database_url:
            raise RuntimeError("DATABASE_URL environment variable is not set.")
        from infrastructure.db.snapshot_store_postgres import PostgresSnapshotStore

        return PostgresSnapshotStore(config.database_url)
    raise RuntimeError(f"Unknown STORE_BACKEND: {config.store_backend}")
