from functools import lru_cache

from typing import List, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="GearX Percentile API")
    environment: Literal["dev", "test", "staging", "prod"] = Field(default="dev")
    debug: bool = Field(default=False)
    database_url: str = Field(default="sqlite+pysqlite:///./gearx.db")

    run_startup_ddl: bool = Field(default=True)

    admin_emails: str = Field(
        default="admin@gearx.dev",
        description="Comma separated email allowlist for administrator endpoints",
    )
    max_marks_limit: int = Field(default=1000, ge=1, description="Largest max_marks accepted for a percentile map")

    # Fallback heuristic used when a test has no percentile map
    fallback_mode: Literal["random", "deterministic"] = Field(default="random")
    fallback_score_weight: float = Field(default=0.85, ge=0.0, le=1.0)
    fallback_jitter_span: float = Field(default=15.0, ge=0.0, le=100.0)
    fallback_percentile_cap: float = Field(default=99.99, gt=0.0, le=100.0)

    # JEE marking scheme
    marks_per_correct: int = Field(default=4, ge=1)
    marks_per_incorrect: int = Field(default=1, ge=0)
    estimated_candidates: int = Field(default=1_200_000, ge=1)

    debug_instrumentation_enabled: bool = Field(default=True)

    # Database connection pooling settings
    db_pool_size: int = Field(default=5, ge=1, le=50, description="Number of connections to keep in the pool")
    db_max_overflow: int = Field(default=10, ge=0, le=100, description="Max connections to create beyond pool_size")
    db_pool_timeout: int = Field(default=30, ge=1, le=300, description="Seconds to wait for connection from pool")
    db_pool_recycle: int = Field(default=3600, ge=300, description="Seconds before recycling a connection")
    db_pool_pre_ping: bool = Field(default=True, description="Enable connection health checks before use")

    @field_validator("admin_emails", mode="before")
    @classmethod
    def _normalize_admin_emails(cls, value: object) -> str:
        if value in (None, b""):
            return ""
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        if isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        if isinstance(value, str):
            return value.strip()
        raise TypeError("ADMIN_EMAILS must be a comma separated string")

    @computed_field(return_type=List[str])
    def admin_allowlist(self) -> List[str]:
        return [part.strip().lower() for part in self.admin_emails.split(",") if part.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
