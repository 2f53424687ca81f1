"""
Configuration management for ListingHub.

Environment-based settings use Pydantic BaseSettings so that a build can be
pointed at a different archive or output directory without code changes.
Site metadata (name, base URL, contact details) lives in a small YAML file
validated by ``SiteConfig``.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("LH_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class SiteConfigError(Exception):
    """Raised when the site configuration file cannot be loaded or validated."""

    pass


class SiteConfig(BaseModel):
    """
    Site-wide metadata used by page and sitemap templates.

    Defaults reproduce the directory site the generator was built for, so a
    missing ``site.yml`` still yields a complete build.
    """

    name: str = Field(default="Electrolysis Directory", description="Site name")
    tagline: str = Field(
        default="Find the best electrolysis providers in your area.",
        description="Footer tagline",
    )
    base_url: str = Field(
        default="https://electrolysisdirectory.com",
        description="Absolute origin used in sitemap <loc> entries",
    )
    contact_email: str = Field(default="info@electrolysisdirectory.com")
    contact_phone: str = Field(default="(555) 123-4567")
    default_description: str = Field(
        default="Professional electrolysis services for permanent hair removal.",
        description="Fallback text for listings without a description",
    )
    service_noun: str = Field(
        default="Electrolysis",
        description="Service name used in page headings",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the origin without a trailing slash."""
        v = v.strip()
        if not v:
            raise ValueError("base_url must be a non-empty URL")
        return v.rstrip("/")


def load_site_config(config_path: Optional[str]) -> SiteConfig:
    """
    Load and validate the site configuration YAML.

    Args:
        config_path: Path to the YAML file; ``None`` or a missing file
            returns defaults

    Returns:
        Validated SiteConfig instance

    Raises:
        SiteConfigError: If the file is not valid YAML or fails validation
    """
    if not config_path or not Path(config_path).is_file():
        logger.info("configuration.site.defaults", config_path=config_path)
        return SiteConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(
            "configuration.yaml_parse_error",
            config_path=str(config_path),
            error=str(e),
        )
        raise SiteConfigError(f"Invalid YAML in site configuration: {e}") from e

    if not isinstance(raw_config, dict):
        raise SiteConfigError(
            f"Site configuration must be a mapping, got {type(raw_config).__name__}"
        )

    # Allow both a flat file and one nested under a top-level "site" key
    site_section = raw_config.get("site", raw_config)

    try:
        site = SiteConfig(**site_section)
    except ValidationError as e:
        logger.error(
            "configuration.validation_failed",
            config_path=str(config_path),
            error=str(e),
        )
        raise SiteConfigError(f"Site configuration validation failed: {e}") from e

    logger.info(
        "configuration.site.loaded",
        config_path=str(config_path),
        site_name=site.name,
        base_url=site.base_url,
    )
    return site


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are loaded with the LH_ prefix. For example,
    LH_OUTPUT_DIR overrides ``output_dir``. LOG_LEVEL is read without a
    prefix so it is shared with the logging module.
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    archive_path: str = Field(
        default="data/data.zip", description="Zip archive holding the CSV tables"
    )
    output_dir: str = Field(default="public", description="Static site output root")
    site_config: str = Field(
        default="config/site.yml", description="Path to the site metadata YAML"
    )

    sitemap_chunk_size: int = Field(
        default=200, gt=0, description="Company URLs per sitemap file"
    )
    sitemap_city_limit: int = Field(
        default=100, ge=0, description="Cities listed on the HTML sitemap page"
    )
    featured_limit: int = Field(
        default=5, ge=0, description="Featured providers shown on state pages"
    )
    nearby_city_limit: int = Field(
        default=5, ge=0, description="Nearby cities listed on city pages"
    )
    progress_interval: int = Field(
        default=100, gt=0, description="Log progress every N pages written"
    )

    model_config = SettingsConfigDict(
        env_prefix="LH_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def load_site(self) -> SiteConfig:
        """Load the SiteConfig referenced by ``site_config``."""
        return load_site_config(self.site_config)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
