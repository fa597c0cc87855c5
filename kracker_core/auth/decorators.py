"""Authentication gate for protected endpoints.

This module provides the request-level filter that enforces bearer tokens:
- extract_bearer() parses the Authorization header
- authenticate_header() decides Authorized vs. Reject for one header value
- @auth_required applies that decision to a Flask view

Per request the gate runs ExtractHeader -> Verify -> {Reject | Authorized}.
A rejection short-circuits with 401 and a machine-readable code
(``missing_bearer`` or ``invalid_token``); the wrapped view never runs.
"""

import logging
import re
from dataclasses import dataclass
from functools import wraps

from flask import g, request

from ..exceptions import AuthenticationError
from ..services import get_services
from .schemas import AuthenticatedIdentity
from .token import TokenError, TokenService

logger = logging.getLogger(__name__)

_BEARER_RE = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE | re.DOTALL)

MISSING_BEARER = "missing_bearer"
INVALID_TOKEN = "invalid_token"


@dataclass(frozen=True)
class GateRejection:
    """Why the gate refused a request."""

    code: str
    token_error: TokenError | None = None


def extract_bearer(header_value: str | None) -> str | None:
    """
    Extract the token from an ``Authorization: Bearer <token>`` value.

    The scheme is matched case-insensitively. Returns None when the header is
    absent, uses another scheme, or carries no non-whitespace token.
    """
    if not header_value:
        return None
    match = _BEARER_RE.match(header_value)
    if match is None:
        return None
    token = match.group(1).strip()
    return token or None


def authenticate_header(
    header_value: str | None,
    tokens: TokenService,
) -> AuthenticatedIdentity | GateRejection:
    """Run the gate's decision for one Authorization header value."""
    token = extract_bearer(header_value)
    if token is None:
        return GateRejection(MISSING_BEARER)

    result = tokens.verify(token)
    if not result.ok:
        return GateRejection(INVALID_TOKEN, result.error)
    return result.identity


def auth_required(f):
    """
    Decorator to require a valid bearer token for endpoint access.

    Stores the verified identity in flask.g:
    - g.identity: AuthenticatedIdentity
    - g.user_id: User ID (token subject)
    - g.username: Username

    Raises:
        AuthenticationError: ``missing_bearer`` or ``invalid_token``

    Example:
    ```python
    @auth_required
    def protected_endpoint():
        user_id = g.user_id
        ...
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        outcome = authenticate_header(
            request.headers.get("Authorization"),
            get_services().tokens,
        )
        if isinstance(outcome, GateRejection):
            if outcome.token_error is not None:
                logger.warning(f"Rejected bearer token: {outcome.token_error.value}")
            else:
                logger.warning(f"Request to {request.path} without bearer token")
            raise AuthenticationError("Authentication required", code=outcome.code)

        g.identity = outcome
        g.user_id = outcome.user_id
        g.username = outcome.username
        return f(*args, **kwargs)

    return wrapper
