"""Registration and login flows.

AuthFlows orchestrates input checks, the credential store, password hashing
and token issuance. Each flow returns an explicit outcome, AuthSuccess or
AuthFailure, instead of raising; the HTTP layer maps the failure kind to a
status code and error code.

Login does not distinguish "no such user" from "wrong password": both
yield INVALID_CREDENTIALS, and both spend one Argon2 verification.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..exceptions import ConflictError, DependencyError
from .password import PasswordHasher
from .token import TokenService

if TYPE_CHECKING:
    from ..db.user import CredentialStore

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class FailureKind(str, Enum):
    """Failure outcomes of the auth flows; values are the wire error codes."""

    WEAK_INPUT = "weak_input"
    MISSING_FIELDS = "missing_fields"
    REGISTER_FAILED = "register_failed"
    INVALID_CREDENTIALS = "invalid_credentials"
    INTERNAL = "internal_error"


@dataclass(frozen=True)
class AuthSuccess:
    id: str
    username: str
    access_token: str


@dataclass(frozen=True)
class AuthFailure:
    """A flow failure.

    ``diagnostic`` carries the store's constraint code for REGISTER_FAILED;
    whether it reaches the client is an HTTP-layer decision.
    """

    kind: FailureKind
    detail: str | None = None
    diagnostic: str | None = None


AuthOutcome = AuthSuccess | AuthFailure


class AuthFlows:
    """Register and login orchestration."""

    def __init__(
        self,
        store: "CredentialStore",
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self._store = store
        self._hasher = hasher
        self._tokens = tokens

    def register(self, username: str, email: str | None, password: str) -> AuthOutcome:
        """
        Create a credential record and issue a token for it.

        Args:
            username: At least 3 characters; must be unique
            email: Optional; must be unique when given (empty means absent)
            password: At least 6 characters

        Returns:
            AuthSuccess, or AuthFailure with WEAK_INPUT, REGISTER_FAILED
            or INTERNAL
        """
        if len(username) < MIN_USERNAME_LENGTH or len(password) < MIN_PASSWORD_LENGTH:
            return AuthFailure(
                FailureKind.WEAK_INPUT,
                detail=(
                    f"username must be at least {MIN_USERNAME_LENGTH} characters and "
                    f"password at least {MIN_PASSWORD_LENGTH} characters"
                ),
            )

        try:
            password_hash = self._hasher.hash(password)
            user = self._store.insert_user(username, email or None, password_hash)
        except ConflictError as e:
            return AuthFailure(
                FailureKind.REGISTER_FAILED,
                detail=e.message,
                diagnostic=e.details.get("sqlstate"),
            )
        except DependencyError:
            logger.exception("Registration failed on a dependency")
            return AuthFailure(FailureKind.INTERNAL)

        logger.info(f"Registered user {user.username} ({user.id})")
        return self._success(user.id, user.username)

    def login(self, username_or_email: str, password: str) -> AuthOutcome:
        """
        Check credentials and issue a token.

        Returns:
            AuthSuccess, or AuthFailure with MISSING_FIELDS,
            INVALID_CREDENTIALS or INTERNAL
        """
        if not username_or_email or not password:
            return AuthFailure(
                FailureKind.MISSING_FIELDS,
                detail="username_or_email and password are required",
            )

        try:
            user = self._store.find_one_by_username_or_email(username_or_email)
        except DependencyError:
            logger.exception("Login failed on a dependency")
            return AuthFailure(FailureKind.INTERNAL)

        if user is None:
            self._hasher.dummy_verify(password)
            logger.warning("Failed login attempt (unknown identifier)")
            return AuthFailure(FailureKind.INVALID_CREDENTIALS)

        if not self._hasher.verify(password, user.password_hash):
            logger.warning(f"Failed login attempt for user {user.id}")
            return AuthFailure(FailureKind.INVALID_CREDENTIALS)

        logger.info(f"Successful login: {user.username}")
        return self._success(user.id, user.username)

    def _success(self, user_id: str, username: str) -> AuthSuccess:
        return AuthSuccess(
            id=user_id,
            username=username,
            access_token=self._tokens.issue(user_id, username),
        )
