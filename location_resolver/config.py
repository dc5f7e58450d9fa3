"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
catalog file locations, resolver tuning, ingestion options and
logging.

Configuration can be overridden via environment variables:
- LOCRES_CATALOG_DATA_DIR=/path/to/data
- LOCRES_RESOLVER_PREFIX_WINDOW=5
- LOCRES_RESOLVER_CACHE_ENABLED=false
- LOCRES_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseSettings):
    """Facility catalog snapshot configuration.

    Environment variables prefixed with LOCRES_CATALOG_.
    """

    model_config = SettingsConfigDict(env_prefix="LOCRES_CATALOG_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    facilities_file: str = "facilities.csv"
    aliases_file: str = "aliases.csv"
    include_inactive_rows: bool = False

    @property
    def facilities_path(self) -> Path:
        """Full path to facilities CSV file."""
        return self.data_dir / self.facilities_file

    @property
    def aliases_path(self) -> Path:
        """Full path to aliases CSV file."""
        return self.data_dir / self.aliases_file


class ResolverConfig(BaseSettings):
    """Resolution engine configuration.

    Environment variables prefixed with LOCRES_RESOLVER_.
    """

    model_config = SettingsConfigDict(env_prefix="LOCRES_RESOLVER_")

    prefix_window: int = Field(default=5, ge=1)
    default_cluster_category: Literal["SEA_PORT", "AIRPORT"] = "SEA_PORT"
    cache_enabled: bool = True
    cache_max_size: Optional[int] = Field(default=None, ge=1)


class IngestionConfig(BaseSettings):
    """Offline reference file ingestion configuration.

    Environment variables prefixed with LOCRES_INGEST_.
    """

    model_config = SettingsConfigDict(env_prefix="LOCRES_INGEST_")

    encoding: str = "utf-8"
    skip_invalid_rows: bool = True


class GapReportConfig(BaseSettings):
    """Alias-gap report configuration.

    Environment variables prefixed with LOCRES_GAP_.
    """

    model_config = SettingsConfigDict(env_prefix="LOCRES_GAP_")

    max_suggestions: int = 3
    min_suggestion_score: float = 80.0


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with LOCRES_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="LOCRES_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    This is the main entry point for configuration. Sub-configurations
    can be accessed via attributes:

        config = get_config()
        print(config.resolver.prefix_window)
        print(config.catalog.facilities_path)

    Environment variables prefixed with LOCRES_.
    """

    model_config = SettingsConfigDict(env_prefix="LOCRES_")

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    gap_report: GapReportConfig = Field(default_factory=GapReportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def project_root(self) -> Path:
        """Return the project root directory."""
        return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()
