"""Authentication API endpoints for Kracker Core.

These endpoints handle registration, login and development token minting:
- POST /api/v1/auth/register - Create an account and return an access token
- POST /api/v1/auth/login    - Authenticate and return an access token
- GET  /dev/token            - Mint a token without credentials (dev only)

All endpoints return JSON. Flow failures are mapped to the exception
taxonomy here and rendered by the app's error handlers.
"""

import logging

from flask import Blueprint, jsonify, request

from ..api.validation import validate_request
from ..exceptions import AuthenticationError, ConflictError, DependencyError, ValidationError
from ..services import get_services
from .schemas import AuthResponse, DevTokenResponse, LoginRequest, RegisterRequest
from .service import AuthFailure, AuthOutcome, FailureKind

logger = logging.getLogger(__name__)


# Create blueprints
auth_bp = Blueprint("auth", __name__, url_prefix="/auth")
dev_bp = Blueprint("dev", __name__, url_prefix="/dev")


def _raise_for_failure(failure: AuthFailure):
    """Translate a flow failure into the matching KrackerError."""
    kind = failure.kind
    details = {"detail": failure.detail} if failure.detail else {}

    if kind in (FailureKind.WEAK_INPUT, FailureKind.MISSING_FIELDS):
        raise ValidationError(failure.detail or kind.value, details, code=kind.value)

    if kind is FailureKind.REGISTER_FAILED:
        if failure.diagnostic and get_services().settings.expose_store_diagnostics:
            details["sqlstate"] = failure.diagnostic
        raise ConflictError(failure.detail or "Registration failed", details)

    if kind is FailureKind.INVALID_CREDENTIALS:
        # Same code and shape whether the user is unknown or the password is wrong
        raise AuthenticationError("Invalid credentials")

    raise DependencyError(f"Auth flow failed: {kind.value}")


def _respond(outcome: AuthOutcome):
    if isinstance(outcome, AuthFailure):
        _raise_for_failure(outcome)

    return jsonify(
        AuthResponse(
            id=outcome.id,
            username=outcome.username,
            access_token=outcome.access_token,
        ).model_dump(by_alias=True)
    ), 200


# ============================================================================
# Registration and Login
# ============================================================================


@auth_bp.route("/register", methods=["POST"])
@validate_request
def register(data: RegisterRequest):
    """
    Create an account and return an access token.

    Example request:
    ```json
    {"username": "neo", "email": "neo@example.com", "password": "whoa123"}
    ```

    Example response:
    ```json
    {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "username": "neo",
        "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
    }
    ```

    Errors (400): ``weak_input``, ``invalid_json``, ``register_failed``
    """
    outcome = get_services().flows.register(data.username, data.email, data.password)
    return _respond(outcome)


@auth_bp.route("/login", methods=["POST"])
@validate_request
def login(data: LoginRequest):
    """
    Authenticate by username or email and return an access token.

    Example request:
    ```json
    {"username_or_email": "neo", "password": "whoa123"}
    ```

    Errors: 400 ``missing_fields`` / ``invalid_json``, 401 ``invalid_credentials``
    """
    outcome = get_services().flows.login(data.username_or_email, data.password)
    return _respond(outcome)


# ============================================================================
# Development Token Minting
# ============================================================================


@dev_bp.route("/token", methods=["GET"])
def dev_token():
    """
    Mint an access token for arbitrary claims. No authentication.

    Only registered when settings.enable_dev_routes is true.

    Example request:
    ```
    GET /dev/token?sub=42&username=trinity
    ```
    """
    sub = request.args.get("sub") or "dev"
    username = request.args.get("username") or "dev"
    access_token = get_services().tokens.issue(sub, username)

    logger.warning(f"Issued development token for sub={sub}")

    return jsonify(
        DevTokenResponse(access_token=access_token, sub=sub, username=username).model_dump(by_alias=True)
    ), 200
