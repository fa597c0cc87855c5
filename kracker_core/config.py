"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/kracker.db"
    database_timeout_seconds: float = 5.0
    api_v1_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # JWT Configuration
    # The default is for local development only; override JWT_SECRET when deployed.
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expiry_minutes: int = 60

    # Argon2id cost parameters (memory cost is in KiB)
    # Dev defaults: 3 iterations, 64 MiB, 1 lane. Tests lower these.
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Security Configuration
    # Include the store's constraint diagnostics in register_failed responses
    expose_store_diagnostics: bool = False
    # Serve GET /dev/token (unauthenticated token minting)
    enable_dev_routes: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


settings = Settings()
