"""Factory for creating record-store database adapters."""

from dataclasses import dataclass
from pathlib import Path

from .interface import DatabaseAdapter
from .sqlite_adapter import SQLiteAdapter


@dataclass
class DatabaseConfig:
    """Database configuration container.

    Attributes:
        db_path: Path to the SQLite database file, or ":memory:"
    """

    db_path: Path | str

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not str(self.db_path).strip():
            raise ValueError("db_path is required for SQLite")
        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)


def create_database(config: DatabaseConfig) -> DatabaseAdapter:
    """Create a database adapter from configuration.

    Example:
        >>> adapter = create_database(DatabaseConfig(db_path="./data/publisher.db"))
    """
    return SQLiteAdapter(config.db_path)


def get_adapter(db_path: Path | str | None = None) -> DatabaseAdapter:
    """Get a database adapter, defaulting to PUBLISH_DATABASE_PATH.

    Args:
        db_path: Explicit database path; overrides the environment
    """
    from common.env import env

    return create_database(DatabaseConfig(db_path=db_path or env.database_path()))
