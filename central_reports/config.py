"""Application configuration and environment management."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Report builder configuration loaded from environment variables.

    Attributes:
        base_record_count: Record count reported before any filter is applied.
        min_record_count: Lower clamp for the estimated record count.
        decay_low: Lower bound of the per-filter decay factor.
        decay_high: Upper bound (exclusive) of the per-filter decay factor.
        estimator_seed: Seed for randomized decay; deterministic midpoint when unset.
        catalog_path: Optional JSON document overriding the packaged value catalog.
        count_api_url: Base URL of a record count API; the mock estimator is used when unset.
        count_api_token: Bearer token for the record count API.
        request_timeout_seconds: HTTP timeout for outbound API requests.
        max_retry_attempts: Maximum number of retry attempts for transient failures.
        initial_backoff_seconds: Initial backoff used when retrying failed requests.
        autosave_debounce_seconds: Quiet period before an auto-save runs.
        telemetry_enabled: Log telemetry events.
    """

    base_record_count: int = Field(default=7100, alias="BASE_RECORD_COUNT", ge=0)
    min_record_count: int = Field(default=50, alias="MIN_RECORD_COUNT", ge=0)
    decay_low: float = Field(default=0.3, alias="DECAY_LOW", gt=0, le=1)
    decay_high: float = Field(default=0.7, alias="DECAY_HIGH", gt=0, le=1)
    estimator_seed: Optional[int] = Field(default=None, alias="ESTIMATOR_SEED")
    catalog_path: Optional[Path] = Field(default=None, alias="CATALOG_PATH")
    count_api_url: Optional[str] = Field(default=None, alias="COUNT_API_URL")
    count_api_token: Optional[SecretStr] = Field(default=None, alias="COUNT_API_TOKEN")
    request_timeout_seconds: int = Field(default=30, alias="REQUEST_TIMEOUT_SECONDS")
    max_retry_attempts: int = Field(default=5, alias="MAX_RETRY_ATTEMPTS")
    initial_backoff_seconds: float = Field(default=0.5, alias="INITIAL_BACKOFF_SECONDS")
    autosave_debounce_seconds: float = Field(
        default=2.0, alias="AUTOSAVE_DEBOUNCE_SECONDS", ge=0
    )
    telemetry_enabled: bool = Field(default=False, alias="TELEMETRY_ENABLED")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_decay_bounds(self) -> "Settings":
        if self.decay_low > self.decay_high:
            raise ValueError("DECAY_LOW must not exceed DECAY_HIGH.")
        return self

    def get_count_api_token(self) -> Optional[str]:
        """Return the count API token as a plain string, if configured."""
        if self.count_api_token is None:
            return None
        return self.count_api_token.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
