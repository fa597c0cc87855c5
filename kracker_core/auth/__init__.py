"""Authentication module for Kracker Core.

This module provides the authentication protocol:
- Password hashing and verification (Argon2id)
- JWT access token issuance and verification (HS256)
- The bearer-token gate for protected endpoints
- Register and login flows

Auth endpoints (under the /api/v1 prefix unless noted):
- POST /auth/register - Create account and return an access token
- POST /auth/login - Authenticate and return an access token
- GET /me - Identity of the bearer token
- GET /dev/token - Development token minting (top-level, dev only)
"""

from . import password, schemas, token

__all__ = ["password", "schemas", "token"]
