"""Client configuration.

Loads settings from environment variables (prefixed ``STOREFRONT_``)
with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Storefront client settings loaded from environment variables."""

    # Remote storefront service
    api_base_url: str = Field(
        default="http://localhost:8082/api/v1",
        description="Base URL of the catalog/cart/order service",
    )
    request_timeout: float = Field(default=30.0, gt=0)

    # Search
    search_debounce_seconds: float = Field(default=0.5, ge=0)

    # Simulator
    simulator_starting_balance: int = Field(default=5000, ge=0)

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
