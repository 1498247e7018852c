"""
Configuration
=============

Environment-driven settings (prefix ``DATA_AGENT_``, optional ``.env`` file).
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Relational store
    database_url: str = "sqlite:///./prisma/dev.db"
    read_only: bool = True

    # Model provider
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    model: str = "gpt-4.1-mini"

    # Extraction loop
    max_retries: int = Field(default=3, ge=1, le=10)
    attempt_timeout_seconds: float = Field(default=60.0, gt=0)
    total_timeout_seconds: Optional[float] = Field(default=180.0, gt=0)
    retry_backoff_seconds: float = Field(default=0.0, ge=0)

    # Observability
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = ""
    tracing_enabled: bool = False
    otlp_endpoint: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="DATA_AGENT_",
        env_file=".env",
        extra="ignore",
        protected_namespaces=(),
    )

    @property
    def json_logs(self) -> bool:
        return self.log_format.lower() == "json" or self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()
