"""Application settings."""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_engine.core.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_PROVIDER,
    DEFAULT_REFRESH_SEC,
    DEFAULT_STARTING_CASH,
    MIN_REFRESH_SEC,
    QUOTE_INTERVAL_SEC,
    REQUEST_TIMEOUT_SEC,
)


class Settings(BaseSettings):
    """Configuration read by the engine at the start of every cycle.

    Values come from, in priority order: explicit arguments (the settings
    file), ``PORTFOLIO_*`` environment variables, then the defaults below.
    """

    model_config = SettingsConfigDict(env_prefix="PORTFOLIO_", extra="ignore")

    provider: str = Field(default=DEFAULT_PROVIDER, description="Quote provider name")
    api_key: str = Field(default="", description="Quote provider API key")
    refresh_sec: int = Field(default=DEFAULT_REFRESH_SEC, gt=0)
    starting_cash: float = Field(default=DEFAULT_STARTING_CASH, allow_inf_nan=False)
    database_url: str = Field(default=DEFAULT_DATABASE_URL)
    quote_interval_sec: float = Field(default=QUOTE_INTERVAL_SEC, ge=0.0)
    request_timeout_sec: float = Field(default=REQUEST_TIMEOUT_SEC, gt=0.0)
    log_level: str = Field(default="INFO")

    @property
    def effective_refresh_sec(self) -> int:
        """Refresh interval with the provider-friendly floor applied."""
        return max(self.refresh_sec, MIN_REFRESH_SEC)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    def redacted(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""
        data = self.model_dump()
        if data["api_key"]:
            data["api_key"] = "***"
        return data


__all__ = ["Settings"]
