from __future__ import annotations

from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """
    App settings.

    Loads from environment variables and an optional local `.env` file.
    `.env` is gitignored. Read once at import time and never mutated afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    API_TITLE: str = "VinPed Bank API"
    API_VERSION: str = "0.1.0"

    # development|staging|production
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database (Docker Compose)
    VINPED_DB_HOST: str = "localhost"
    VINPED_DB_PORT: int = 5432
    VINPED_DB_NAME: str = "vinped_bank"
    VINPED_DB_USER: str = "vinped"
    VINPED_DB_PASSWORD: str = "vinped"
    VINPED_DB_POOL_SIZE: int = 10

    # Auth (bearer JWT + server-side session rows)
    # Required outside development; see scripts/generate_jwt_secret.py
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"
    AUTH_TOKEN_TTL_DAYS: int = 30
    # Off by default: the gate trusts signature + expiry only, so a logged-out
    # token keeps working until it expires.
    AUTH_CHECK_SESSION_REVOCATION: bool = False
    PASSWORD_HASH_ITERATIONS: int = 210_000

    # Wallets
    DEFAULT_WALLET_NAME: str = "Carteira Principal"

    # CORS (browser UI on :3000 calling the API on :5000)
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def is_production_like(self) -> bool:
        return self.ENVIRONMENT.strip().lower() in ("production", "staging")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "development"


settings = Settings()
