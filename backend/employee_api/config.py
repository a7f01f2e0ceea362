"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - upstream_base_url is the only required value (no default)
    - upstream_max_retries is never negative: at least one call is always made
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Retry defaults mirror the upstream's rate-limit contract: 2s initial delay, 5 retries
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Upstream employee service
    upstream_base_url: str

    @field_validator("upstream_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are joined as /employee..., so the base never ends in '/'."""
        v = v.strip()
        if not v:
            raise ValueError("upstream_base_url cannot be empty")
        return v.rstrip("/")

    upstream_max_retries: int = Field(default=5, ge=0)
    upstream_base_delay_ms: int = 2000
    upstream_max_delay_ms: int = 60_000
    upstream_jitter: float = 0.25

    upstream_connect_timeout_seconds: float = 5.0
    upstream_read_timeout_seconds: float = 30.0
    upstream_call_timeout_seconds: float | None = None
    upstream_max_connections: int = 20

    # Queries
    top_earners_limit: int = 10

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
