"""Authentication Pydantic schemas for API validation."""

from .auth import (
    AuthenticatedIdentity,
    AuthResponse,
    DevTokenResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    TokenClaims,
    UserCredential,
)

__all__ = [
    "AuthenticatedIdentity",
    "AuthResponse",
    "DevTokenResponse",
    "LoginRequest",
    "MeResponse",
    "RegisterRequest",
    "TokenClaims",
    "UserCredential",
]
