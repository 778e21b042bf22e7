"""Storefront runtime settings.

Values come from the environment (or a local ``.env`` file). Protean's own
domain configuration stays in ``pyproject.toml`` under ``[tool.protean]``.
"""

from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceAdapter(Enum):
    HTTP = "http"
    FAKE = "fake"


class StorageBackend(Enum):
    FILE = "file"
    MEMORY = "memory"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Backend services ---
    api_url: str = Field(
        default="http://localhost:8080/api/v1",
        validation_alias=AliasChoices("STOREFRONT_API_URL", "API_URL"),
    )
    http_timeout: float = Field(default=10.0, validation_alias=AliasChoices("STOREFRONT_HTTP_TIMEOUT"))
    service_adapter: ServiceAdapter = Field(
        default=ServiceAdapter.HTTP,
        validation_alias=AliasChoices("STOREFRONT_SERVICE_ADAPTER"),
    )
    access_token: str | None = Field(default=None, validation_alias=AliasChoices("STOREFRONT_ACCESS_TOKEN"))

    # --- Orders ---
    currency: str = Field(default="USD", validation_alias=AliasChoices("STOREFRONT_CURRENCY"))

    # --- Client storage ---
    storage_backend: StorageBackend = Field(
        default=StorageBackend.FILE,
        validation_alias=AliasChoices("STOREFRONT_STORAGE_BACKEND"),
    )
    storage_path: str = Field(default=".storefront", validation_alias=AliasChoices("STOREFRONT_STORAGE_PATH"))

    # --- Logging ---
    log_dir: str = Field(default="logs", validation_alias=AliasChoices("STOREFRONT_LOG_DIR", "LOG_DIR"))


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
