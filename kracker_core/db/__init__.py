"""Database module for Kracker Core.

This module provides the Core API for credential storage.
Core encapsulates one connection and provides access to user operations.

ARCHITECTURE:
- Database holds the path and connection settings; it is created once at
  startup and shared by all requests
- Each unit of work acquires its own Core through ``database.get_core()``
- Core is a context manager: commit on success, rollback on error, and the
  connection is closed on every exit path

    with database.get_core() as core:
        user = core.user.create("neo", None, password_hash)

UNIQUENESS:
Username and email uniqueness is enforced by UNIQUE constraints, so two
concurrent registrations of the same username resolve inside sqlite:
exactly one insert succeeds and the other raises IntegrityError.
"""

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .user import UserOperations

SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "schema.sql"


class Core:
    """
    Database Core with user operations.

    Owns a single connection for the lifetime of one ``with`` block.
    """

    def __init__(self, connection: sqlite3.Connection):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = connection
        self._user_ops = None

    @property
    def user(self) -> "UserOperations":
        """User credential operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn)
        return self._user_ops

    def __enter__(self) -> "Core":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back the transaction.

        The connection is always closed, including on error paths.
        """
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()


class Database:
    """Connection factory for the credential store.

    Immutable after construction, so a single instance is safe to share
    across concurrent requests.
    """

    def __init__(self, path: str, timeout: float = 5.0):
        self.path = path
        self.timeout = timeout

    def _create_connection(self) -> sqlite3.Connection:
        """Create a fresh database connection.

        Returns:
            SQLite connection with row_factory set to sqlite3.Row
            and foreign keys enabled.
        """
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def get_core(self) -> Core:
        """
        Acquire a Core for one unit of work.

        Must be used as a context manager:

        >>> with database.get_core() as core:
        ...     core.user.get_by_id(user_id)
        """
        return Core(self._create_connection())

    def init_db(self) -> None:
        """Initialize database by running schema.sql if not already initialized."""
        conn = self._create_connection()
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
            )
            if cursor.fetchone():
                # Database already initialized, skip
                return

            with open(SCHEMA_PATH, "r") as f:
                schema_sql = f.read()
            conn.executescript(schema_sql)
            conn.commit()
            logger.info(f"Database schema applied at {self.path}")
        finally:
            conn.close()

    def get_schema_version(self) -> str:
        """
        Get current schema version from _schema_metadata table.

        Returns:
            Schema version string (e.g., '20261019')
        """
        with self.get_core() as core:
            row = core._conn.execute(
                "SELECT value FROM _schema_metadata WHERE key = 'version'"
            ).fetchone()
        return row[0] if row else "unknown"

    def check_health(self) -> tuple[bool, str | None]:
        """
        Run a trivial query against the store.

        Returns:
            (True, None) when the store answers, otherwise (False, reason).
        """
        try:
            with self.get_core() as core:
                row = core._conn.execute("SELECT 1").fetchone()
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False, str(e)

        if row is None or row[0] != 1:
            return False, "SELECT 1 failed"
        return True, None


from .user import CredentialStore, SqliteCredentialStore, UserOperations  # noqa: E402

__all__ = [
    "Core",
    "CredentialStore",
    "Database",
    "SqliteCredentialStore",
    "UserOperations",
]
