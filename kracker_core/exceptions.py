"""Custom exceptions for Kracker Core.

Every exception carries a stable machine-readable ``code`` and the HTTP
status it maps to. The Flask error handlers in ``main`` render client
errors as ``{"error": code, **details}`` and dependency failures as an
opaque ``{"error": "internal_error"}``.
"""


class KrackerError(Exception):
    """Base exception for Kracker Core."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: dict | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if code is not None:
            self.code = code


class ValidationError(KrackerError):
    """Malformed or insufficient input (weak_input, missing_fields, invalid_json)."""

    status_code = 400
    code = "validation_error"


class AuthenticationError(KrackerError):
    """Bad credentials, or a missing, invalid or expired bearer token."""

    status_code = 401
    code = "invalid_credentials"


class ConflictError(KrackerError):
    """Uniqueness violation at registration."""

    status_code = 400
    code = "register_failed"


class DependencyError(KrackerError):
    """Store or crypto primitive failure. Never exposed to clients."""

    status_code = 500
    code = "internal_error"


class HashingError(DependencyError):
    """The password hashing primitive failed (e.g. could not allocate memory)."""
