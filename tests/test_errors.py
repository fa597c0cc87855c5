"""Tests for error handling and custom exceptions."""

import logging

import pytest

from kracker_core.exceptions import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    HashingError,
    KrackerError,
    ValidationError,
)


@pytest.fixture
def error_client(app):
    """App with routes that raise each error type."""

    @app.route("/test/validation")
    def raise_validation():
        raise ValidationError("Bad input", {"detail": "too short"}, code="weak_input")

    @app.route("/test/authentication")
    def raise_authentication():
        raise AuthenticationError("Nope")

    @app.route("/test/conflict")
    def raise_conflict():
        raise ConflictError("Taken", {"detail": "username taken"})

    @app.route("/test/dependency")
    def raise_dependency():
        raise DependencyError("disk I/O error at /var/lib/secret.db")

    @app.route("/test/hashing")
    def raise_hashing():
        raise HashingError("could not allocate 64 MiB")

    return app.test_client()


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_base_error_with_message(self):
        error = KrackerError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}

    def test_base_error_with_details(self):
        error = KrackerError("Not found", details={"reason": "x"})
        assert error.details == {"reason": "x"}

    @pytest.mark.parametrize(
        "cls, status, code",
        [
            (ValidationError, 400, "validation_error"),
            (AuthenticationError, 401, "invalid_credentials"),
            (ConflictError, 400, "register_failed"),
            (DependencyError, 500, "internal_error"),
            (HashingError, 500, "internal_error"),
        ],
    )
    def test_taxonomy(self, cls, status, code):
        error = cls("message")
        assert isinstance(error, KrackerError)
        assert error.status_code == status
        assert error.code == code

    def test_code_override_is_per_instance(self):
        error = AuthenticationError("x", code="missing_bearer")
        assert error.code == "missing_bearer"
        assert AuthenticationError("y").code == "invalid_credentials"


class TestErrorHandlers:
    """Test Flask error handlers."""

    def test_validation_error_format(self, error_client):
        response = error_client.get("/test/validation")
        assert response.status_code == 400
        assert response.get_json() == {"error": "weak_input", "detail": "too short"}

    def test_authentication_error_format(self, error_client):
        response = error_client.get("/test/authentication")
        assert response.status_code == 401
        assert response.get_json() == {"error": "invalid_credentials"}

    def test_conflict_error_format(self, error_client):
        response = error_client.get("/test/conflict")
        assert response.status_code == 400
        assert response.get_json() == {"error": "register_failed", "detail": "username taken"}

    @pytest.mark.parametrize("path", ["/test/dependency", "/test/hashing"])
    def test_dependency_errors_are_opaque(self, error_client, path):
        response = error_client.get(path)
        assert response.status_code == 500
        assert response.get_json() == {"error": "internal_error"}
        assert b"secret.db" not in response.data
        assert b"64 MiB" not in response.data

    def test_unhandled_error_is_logged_with_its_traceback(self, app, caplog):
        app.config["TESTING"] = False
        app.config["PROPAGATE_EXCEPTIONS"] = False

        @app.route("/test/unhandled")
        def raise_unhandled():
            raise RuntimeError("disk on fire")

        with caplog.at_level(logging.ERROR, logger="kracker_core.main"):
            response = app.test_client().get("/test/unhandled")

        assert response.status_code == 500
        assert response.get_json() == {"error": "internal_error"}

        records = [r for r in caplog.records if r.getMessage().startswith("Internal error:")]
        assert records
        exc_type, exc, tb = records[-1].exc_info
        assert exc_type is RuntimeError
        assert str(exc) == "disk on fire"
        assert tb is not None
