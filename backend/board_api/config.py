"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache), single instance per process
    - collector_url is None when RUNTIME_ERROR_ENDPOINT_URL is unset or blank
    - board_id is None when BOARD_ID is unset or blank

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from board_api.core.resolve_tenant import DEFAULT_TENANT_PATTERN


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Database
    database_url: str = (
        "postgresql+asyncpg://board:board@db:5432/board"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 10

    # Failure reporting
    collector_url: str | None = Field(
        None,
        validation_alias=AliasChoices(
            "runtime_error_endpoint_url", "collector_url",
        ),
    )
    board_id: str | None = None
    tenant_id_pattern: str = DEFAULT_TENANT_PATTERN
    report_timeout_seconds: float = Field(5.0, gt=0)

    @field_validator("collector_url", "board_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # API
    cors_origins: list[str] = ["*"]

    # Observability: warnings and errors only by default
    log_level: str = "WARNING"
    log_format: str = "json"

    @property
    def reporting_enabled(self) -> bool:
        return self.collector_url is not None


@lru_cache
def get_settings() -> Settings:
    return Settings()
