"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode and the interactive docs. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_enabled: Toggle request rate limiting.
        rate_limit_default: Default rate limit for all endpoints.
        storage_backend: ``postgres`` for the relational store, ``memory``
            for a process-local store.
        database_dsn: Explicit SQLAlchemy DSN. Overrides the postgres_* fields.
        db_statement_timeout_seconds: Deadline applied to every repository
            call made while serving a request.
        auto_migrate: Apply pending schema migrations on startup.
        log_sql: Log every SQL statement sent to the database (noisy).
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Subscription Manager"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"

    storage_backend: Literal["postgres", "memory"] = "postgres"
    database_dsn: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "subscriptions"
    db_statement_timeout_seconds: float = 5.0
    auto_migrate: bool = False
    log_sql: bool = False

    def get_database_dsn(self) -> str:
        """Return the effective database DSN.

        Priority:
        1. Explicit `DATABASE_DSN`
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_dsn:
            return self.database_dsn
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
