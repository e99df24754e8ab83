"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache), single instance per process
    - api_base_url never ends with a slash; paths are appended as "/todos"
    - Retry count and delays are never negative; the timeout is positive

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out of the box against the reference store on localhost:8080
    - sync_max_retries defaults to 0: remote failures are reported, not retried,
      unless a deployment opts in
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Remote store
    api_base_url: str = "http://localhost:8080"
    request_timeout_seconds: float = Field(10.0, gt=0)

    @field_validator("api_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    # Retry policy (transport failures only)
    sync_max_retries: int = Field(0, ge=0)
    sync_base_delay_ms: int = Field(500, ge=0)
    sync_max_delay_ms: int = Field(10_000, ge=0)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
