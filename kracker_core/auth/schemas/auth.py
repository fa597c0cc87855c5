"""Authentication schemas.

Request bodies are validated by ``@validate_request``; response models are
serialized with ``model_dump(by_alias=True)`` so the wire names match the
public contract (``accessToken``).
"""

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Domain Models
# ============================================================================


class UserCredential(BaseModel):
    """A stored user record, as returned by the credential store.

    ``password_hash`` is the Argon2id PHC string. It is excluded from repr
    so it never ends up in logs.
    """

    id: str
    username: str
    email: str | None = None
    password_hash: str = Field(repr=False)
    created_at: str


class AuthenticatedIdentity(BaseModel):
    """Request-scoped identity derived from a verified access token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str


class TokenClaims(BaseModel):
    """Claims carried by an access token."""

    sub: str
    username: str
    iat: int
    exp: int


# ============================================================================
# Request Schemas
# ============================================================================


class RegisterRequest(BaseModel):
    """Body of POST /api/v1/auth/register.

    Fields default to empty so that missing values fall through to the
    flow's own length rules (weak_input) rather than a schema error.
    """

    username: str = ""
    email: str | None = None
    password: str = ""


class LoginRequest(BaseModel):
    """Body of POST /api/v1/auth/login."""

    username_or_email: str = ""
    password: str = ""


# ============================================================================
# Response Schemas
# ============================================================================


class AuthResponse(BaseModel):
    """Successful register/login response."""

    id: str
    username: str
    access_token: str = Field(serialization_alias="accessToken")


class MeResponse(BaseModel):
    id: str
    username: str


class DevTokenResponse(BaseModel):
    access_token: str = Field(serialization_alias="accessToken")
    sub: str
    username: str
