"""Process-wide service wiring.

Everything here is built once by ``main.create_app`` from explicit
Settings and stored on the Flask app, so handlers never read configuration
or the signing secret from globals at call time.
"""

from dataclasses import dataclass

from flask import current_app

from .auth.password import PasswordHasher
from .auth.service import AuthFlows
from .auth.token import TokenService
from .config import Settings
from .db import Database, SqliteCredentialStore

EXTENSION_KEY = "kracker_core"


@dataclass(frozen=True)
class Services:
    settings: Settings
    database: Database
    hasher: PasswordHasher
    tokens: TokenService
    flows: AuthFlows


def build_services(config: Settings) -> Services:
    """Construct the service graph from settings."""
    database = Database(config.database_path, timeout=config.database_timeout_seconds)
    hasher = PasswordHasher(
        time_cost=config.argon2_time_cost,
        memory_cost=config.argon2_memory_cost,
        parallelism=config.argon2_parallelism,
    )
    tokens = TokenService(config.jwt_secret, ttl_minutes=config.jwt_expiry_minutes)
    flows = AuthFlows(
        store=SqliteCredentialStore(database),
        hasher=hasher,
        tokens=tokens,
    )
    return Services(
        settings=config,
        database=database,
        hasher=hasher,
        tokens=tokens,
        flows=flows,
    )


def get_services() -> Services:
    """Services of the app handling the current request."""
    return current_app.extensions[EXTENSION_KEY]
