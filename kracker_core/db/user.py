"""User credential operations.

IMPORT CONVENTION:
- Core accesses these through core.user property
- Flows talk to the store through the CredentialStore protocol, implemented
  here by SqliteCredentialStore

Store failures are translated at this boundary: a uniqueness violation
becomes ConflictError (carrying the sqlite error name as its diagnostic
code), anything else sqlite raises becomes DependencyError.
"""

import logging
import sqlite3
from typing import TYPE_CHECKING, Protocol

from ..auth.schemas import UserCredential
from ..exceptions import ConflictError, DependencyError
from ..utils import isodatetime, uid

if TYPE_CHECKING:
    from . import Database

logger = logging.getLogger(__name__)


def _row_to_credential(row: sqlite3.Row) -> UserCredential:
    return UserCredential(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=row["created_at"],
    )


class UserOperations:
    """User table operations bound to one connection."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def create(self, username: str, email: str | None, password_hash: str) -> UserCredential:
        """Insert a user with an auto-generated UUID.

        Raises:
            sqlite3.IntegrityError: If username or email is already taken
        """
        user_id = uid.generate_uuid()
        now = isodatetime.now()
        self._conn.execute(
            """INSERT INTO users (id, username, email, password_hash, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (user_id, username, email, password_hash, now)
        )
        return UserCredential(
            id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=now,
        )

    def get_by_id(self, user_id: str) -> UserCredential | None:
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,)
        ).fetchone()
        return _row_to_credential(row) if row else None

    def find_by_username_or_email(self, identifier: str) -> list[UserCredential]:
        """Return up to two records whose username or email equals identifier.

        Two rows are enough for the caller to tell "exactly one" from
        "ambiguous" without loading the whole table.
        """
        rows = self._conn.execute(
            """SELECT * FROM users
               WHERE username = ? OR email = ?
               LIMIT 2""",
            (identifier, identifier)
        ).fetchall()
        return [_row_to_credential(row) for row in rows]

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]


class CredentialStore(Protocol):
    """Contract the auth flows need from persistence."""

    def insert_user(self, username: str, email: str | None, password_hash: str) -> UserCredential: ...

    def find_one_by_username_or_email(self, identifier: str) -> UserCredential | None: ...


class SqliteCredentialStore:
    """CredentialStore backed by the sqlite Database.

    Every call runs in its own scoped Core, so the connection is released
    on all exit paths.
    """

    def __init__(self, database: "Database"):
        self._database = database

    def insert_user(self, username: str, email: str | None, password_hash: str) -> UserCredential:
        """
        Insert a new credential record.

        Raises:
            ConflictError: If username or email already exists
            DependencyError: If the store is unreachable or fails otherwise
        """
        try:
            with self._database.get_core() as core:
                return core.user.create(username, email, password_hash)
        except sqlite3.IntegrityError as e:
            diagnostic = getattr(e, "sqlite_errorname", None) or "SQLITE_CONSTRAINT"
            logger.info(f"Registration conflict for username {username!r}: {diagnostic}")
            raise ConflictError(
                "Username or email already in use",
                {"sqlstate": diagnostic, "store_message": str(e)}
            ) from e
        except (sqlite3.Error, OSError) as e:
            raise DependencyError(f"Credential store insert failed: {e}") from e

    def find_one_by_username_or_email(self, identifier: str) -> UserCredential | None:
        """
        Look up exactly one record by username or email.

        Returns None when nothing matches or when more than one record
        matches (a username equal to another user's email).

        Raises:
            DependencyError: If the store is unreachable or fails otherwise
        """
        try:
            with self._database.get_core() as core:
                matches = core.user.find_by_username_or_email(identifier)
        except (sqlite3.Error, OSError) as e:
            raise DependencyError(f"Credential store lookup failed: {e}") from e

        if len(matches) != 1:
            if matches:
                logger.warning(f"Ambiguous login identifier matched {len(matches)} users")
            return None
        return matches[0]
