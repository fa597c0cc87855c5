"""JWT access token issuance and verification.

Tokens are compact HS256 JWTs carrying ``sub``, ``username``, ``iat`` and
``exp`` (integer Unix seconds). Nothing is persisted: a token is valid iff
its MAC verifies under the server secret and the current time is before
``exp``.

The secret must be non-empty; issue, verify and TokenService raise
ValueError otherwise, and TokenService checks it once at construction.
Given a valid secret, verification never raises. It returns a
TokenVerification holding either the AuthenticatedIdentity or the
TokenError describing why it was rejected.

Two entry points share the same implementation:
- module functions ``issue``/``verify`` take the secret explicitly
- ``TokenService`` binds the secret once at startup and is what the
  application uses
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import jwt

from ..utils import isodatetime
from .schemas import AuthenticatedIdentity, TokenClaims

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "username", "iat", "exp"]


class TokenError(str, Enum):
    """Why a token was rejected."""

    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    ALGORITHM_MISMATCH = "algorithm_mismatch"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying a token: exactly one of identity/error is set."""

    identity: AuthenticatedIdentity | None = None
    error: TokenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _secret_bytes(secret: bytes | str) -> bytes:
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not secret:
        raise ValueError("Token secret must not be empty")
    return secret


def issue(
    subject: str,
    username: str,
    secret: bytes | str,
    ttl_minutes: int,
    now: int | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: User ID (becomes ``sub``)
        username: Username claim
        secret: HMAC key
        ttl_minutes: Lifetime; ``exp = iat + ttl_minutes * 60``
        now: Issue time in Unix seconds (defaults to the current time)

    Returns:
        Compact JWT string
    """
    iat = isodatetime.now_unix() if now is None else now
    claims = TokenClaims(
        sub=subject,
        username=username,
        iat=iat,
        exp=iat + ttl_minutes * 60,
    )
    return jwt.encode(claims.model_dump(), _secret_bytes(secret), algorithm=ALGORITHM)


def verify(token: str, secret: bytes | str, now: int | None = None) -> TokenVerification:
    """
    Verify a token's structure, algorithm, signature and expiry, in that order.

    Args:
        token: Compact JWT string
        secret: HMAC key the token must have been signed with
        now: Current time in Unix seconds (defaults to the current time)

    Returns:
        TokenVerification with the identity, or with the rejection reason

    Raises:
        ValueError: If the secret is empty
    """
    key = _secret_bytes(secret)
    if not isinstance(token, str) or not token:
        return TokenVerification(error=TokenError.MALFORMED)

    try:
        header = jwt.get_unverified_header(token)
    except jwt.InvalidTokenError:
        return TokenVerification(error=TokenError.MALFORMED)

    if header.get("alg") != ALGORITHM:
        return TokenVerification(error=TokenError.ALGORITHM_MISMATCH)

    try:
        # Expiry is checked below against our own clock
        payload = jwt.decode(
            token,
            key,
            algorithms=[ALGORITHM],
            options={
                "require": REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except jwt.InvalidSignatureError:
        return TokenVerification(error=TokenError.INVALID_SIGNATURE)
    except jwt.InvalidAlgorithmError:
        return TokenVerification(error=TokenError.ALGORITHM_MISMATCH)
    except jwt.InvalidTokenError:
        return TokenVerification(error=TokenError.MALFORMED)

    claims = _parse_claims(payload)
    if claims is None:
        return TokenVerification(error=TokenError.MALFORMED)

    current = isodatetime.now_unix() if now is None else now
    if current >= claims.exp:
        return TokenVerification(error=TokenError.EXPIRED)

    return TokenVerification(
        identity=AuthenticatedIdentity(user_id=claims.sub, username=claims.username)
    )


def _parse_claims(payload: dict) -> TokenClaims | None:
    """Strictly type-check the decoded claims; None if any is off."""
    if not isinstance(payload.get("sub"), str) or not isinstance(payload.get("username"), str):
        return None
    for name in ("iat", "exp"):
        value = payload.get(name)
        if not isinstance(value, int) or isinstance(value, bool):
            return None
    return TokenClaims(
        sub=payload["sub"],
        username=payload["username"],
        iat=payload["iat"],
        exp=payload["exp"],
    )


class TokenService:
    """Issues and verifies access tokens under one process-wide secret.

    Constructed once at startup with the configured secret; holds no
    mutable state, so it is shared across requests.
    """

    def __init__(
        self,
        secret: bytes | str,
        ttl_minutes: int = 60,
        clock: Callable[[], int] = isodatetime.now_unix,
    ):
        self._secret = _secret_bytes(secret)
        self.ttl_minutes = ttl_minutes
        self._clock = clock

    def issue(self, subject: str, username: str, ttl_minutes: int | None = None) -> str:
        ttl = self.ttl_minutes if ttl_minutes is None else ttl_minutes
        return issue(subject, username, self._secret, ttl, now=self._clock())

    def verify(self, token: str) -> TokenVerification:
        return verify(token, self._secret, now=self._clock())
