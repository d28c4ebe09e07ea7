"""
Resolver configuration loader.

Loads the rewrite mappings, virtual URLs and search path from YAML:

    mappings:
      - /content/site/:/
      - /-/
    virtual_urls:
      - /home:/content/site/index.html
    search_path:
      - /apps
      - /libs
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATH = ["/apps/", "/libs/"]


class ResolverConfig(BaseModel):
    """Configuration of the resource resolver."""

    mappings: list[str] = Field(
        default_factory=lambda: ["/-/"],
        description="Rewrite rules '<internal><op><external>', first match wins",
    )
    virtual_urls: list[str] = Field(
        default_factory=list,
        description="Exact aliases 'virtual:real'",
    )
    search_path: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_PATH),
        description="Prefixes tried in order for relative paths",
    )

    @field_validator("search_path")
    @classmethod
    def normalize_search_path(cls, value: list[str]) -> list[str]:
        """Make every entry absolute with a trailing slash; never empty."""
        normalized = []
        for entry in value:
            entry = entry.strip()
            if not entry:
                continue
            if not entry.startswith("/"):
                entry = "/" + entry
            if not entry.endswith("/"):
                entry = entry + "/"
            normalized.append(entry)
        return normalized or ["/"]


def load_resolver_config(config_path: Optional[Path | str] = None) -> ResolverConfig:
    """
    Load resolver configuration from a YAML file.

    Args:
        config_path: Path to the config file; defaults are used if None or missing

    Returns:
        ResolverConfig instance

    Raises:
        ConfigurationError: If the file exists but cannot be read or validated
    """
    if config_path is None:
        return ResolverConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Resolver config not found at {config_path}. Using defaults.")
        return ResolverConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load resolver config from {config_path}: {e}")
        raise ConfigurationError(
            f"Failed to load resolver config: {e}",
            context={"path": str(config_path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Resolver config must be a mapping",
            context={"path": str(config_path)},
        )

    try:
        config = ResolverConfig(**data)
    except ValidationError as e:
        logger.error(f"Invalid resolver config in {config_path}: {e}")
        raise ConfigurationError(
            f"Invalid resolver config: {e}",
            context={"path": str(config_path)},
        ) from e

    logger.info(
        f"Loaded resolver config: {len(config.mappings)} mappings, "
        f"{len(config.virtual_urls)} virtual URLs, "
        f"search path {config.search_path}"
    )
    return config
