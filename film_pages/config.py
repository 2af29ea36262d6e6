"""Site configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants.config import (
    PIXABAY_API_URL,
    PIXABAY_DEFAULT_QUERY,
    REQUEST_TIMEOUT_SECONDS,
    SWAPI_FIELD_NAME,
    SWAPI_TYPE_NAME,
    SWAPI_URL,
)
from .constants.paths import DEFAULT_OUTPUT_DIR


class SiteConfig(BaseSettings):
    """Options for both data sources and the build output."""

    pixabay_api_key: str | None = Field(default=None, description="Pixabay API key")
    pixabay_query: str = Field(default=PIXABAY_DEFAULT_QUERY, description="Photo search term")
    pixabay_url: str = Field(default=PIXABAY_API_URL, description="Pixabay search endpoint")
    swapi_url: str = Field(default=SWAPI_URL, description="GraphQL endpoint URL")
    swapi_type_name: str = Field(default=SWAPI_TYPE_NAME, description="Type name of the remote schema root")
    swapi_field_name: str = Field(default=SWAPI_FIELD_NAME, description="Query field the remote schema is mounted under")
    output_dir: Path = Field(default=DEFAULT_OUTPUT_DIR, description="Directory the site is written to")
    request_timeout: float = Field(default=REQUEST_TIMEOUT_SECONDS, description="HTTP timeout in seconds")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def load_config(**overrides) -> SiteConfig:
    """Build the configuration from the environment, applying non-None overrides."""

    return SiteConfig(**{key: value for key, value in overrides.items() if value is not None})
