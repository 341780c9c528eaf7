"""
Catalog settings.

Loaded from environment variables prefixed with ``CATALOG_`` and from an
optional ``.env`` file, e.g. ``CATALOG_CATALOG_FILE=data/seed.json``.

Priority (highest to lowest): environment variables, .env file, defaults.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """
    Attributes:
        catalog_file: JSON snapshot with categories and products
        default_page_size: Products per page when the caller gives none
        max_page_size: Upper bound accepted from the caller
        price_ceiling: Upper end of the price slider
        max_tree_depth: Guard for descendant resolution on bad data
        log_level: Root logging level name
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    catalog_file: str = Field(
        default="data/seed.json",
        description="Path to the catalog JSON snapshot",
    )

    default_page_size: int = Field(
        default=12,
        ge=1,
        description="Products per page",
    )

    max_page_size: int = Field(
        default=100,
        ge=1,
        description="Largest page size accepted from a caller",
    )

    price_ceiling: int = Field(
        default=10000,
        ge=1,
        description="Upper end of the price filter",
    )

    max_tree_depth: int = Field(
        default=64,
        ge=1,
        description="Deepest category level expanded during resolution",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level name",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize the level name, falling back to INFO for unknown names."""
        normalized = value.upper().strip()
        if normalized not in logging.getLevelNamesMapping():
            logger.warning(f"Unknown log level '{value}', defaulting to 'INFO'")
            return "INFO"
        return normalized

    @model_validator(mode="after")
    def check_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self

    @property
    def catalog_path(self) -> Path:
        return Path(self.catalog_file)

    def clamp_page_size(self, page_size: int | None) -> int:
        """Caller's page size limited to [1, max_page_size]."""
        if not page_size:
            return self.default_page_size
        return max(1, min(page_size, self.max_page_size))


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


def setup_logging(settings: Settings | None = None) -> None:
    """Configure root logging once for the app."""
    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)
