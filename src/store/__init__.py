"""Record store for published deployments.

Example:
    >>> from store import get_adapter, DeploymentStore
    >>> with get_adapter() as adapter:
    ...     store = DeploymentStore(adapter)
    ...     store.ensure_schema()
"""

from .deployments import DeploymentStore
from .factory import DatabaseConfig, create_database, get_adapter
from .interface import DatabaseAdapter
from .sqlite_adapter import SQLiteAdapter
from .types import ConnectionError, DatabaseError, IntegrityError, Row, SchemaError

__all__ = [
    "DatabaseAdapter",
    "DatabaseConfig",
    "DeploymentStore",
    "SQLiteAdapter",
    "create_database",
    "get_adapter",
    "DatabaseError",
    "ConnectionError",
    "IntegrityError",
    "SchemaError",
    "Row",
]
