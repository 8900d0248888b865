"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - jwt_secret has no default: the process refuses to start without it
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Components receive the values they need at startup (codec secret, hash
      rounds, SMTP settings) instead of reading settings themselves
    - Defaults provided for all non-secret settings
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def async_database_url(url: str) -> str:
    """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://directory:directory@db:5432/directory"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        return async_database_url(v) if isinstance(v, str) else v

    database_pool_size: int = 100
    database_max_overflow: int = 0

    # Session tokens
    jwt_secret: str = Field(min_length=1)
    jwt_algorithm: str = "HS256"
    cookie_name: str = "accessToken"

    # Credentials
    password_hash_rounds: int = Field(10, ge=10)

    # API
    api_prefix: str = "/qccareerschool"
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_origin_regex: str | None = (
        r"^https://([a-z0-9-]+\.)*(qccareerschool\.com|qccareer\.school)$"
    )

    # Public URLs
    site_url: str = "https://www.qccareerschool.com"
    public_api_url: str = "https://api.qccareerschool.com"
    verify_redirect_url: str = "https://localhost:3000/welcome"

    # Outgoing email
    email_host: str = "localhost"
    email_port: int = 587
    email_secure: bool = False
    email_require_tls: bool = True
    email_user: str | None = None
    email_password: str | None = None
    email_from: str = "QC Career School <info@qccareerschool.com>"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: str | None = None
    log_alert_to: list[str] = []
    log_alert_from: str | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
