"""Application configuration via pydantic-settings, plus quality-config loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from search_quality.domains.registry import default_quality_config
from search_quality.models import QualityConfig

logger = structlog.get_logger(__name__)


class ConfigurationError(ValueError):
    """Raised when a quality configuration cannot be built."""


class Settings(BaseSettings):
    """All runtime configuration, loaded from environment / .env file."""

    port: int = 7777
    log_level: str = "INFO"
    environment: str = "development"
    min_quality_score: float = 0.3
    enable_quality_filtering: bool = True
    quality_config_path: str | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


# Module-level singleton for the service layer; the analyzer itself takes
# an explicit QualityConfig.
settings = Settings()


def build_quality_config(overrides: dict[str, Any] | None = None) -> QualityConfig:
    """Return the default config with *overrides* applied.

    Args:
        overrides: Partial mapping of :class:`QualityConfig` fields.

    Returns:
        A validated, immutable :class:`QualityConfig`.

    Raises:
        ConfigurationError: If the overrides produce an invalid config.
    """
    base = default_quality_config()
    if not overrides:
        return base
    if not isinstance(overrides, dict):
        raise ConfigurationError(
            f"quality overrides must be a mapping, got {type(overrides).__name__}"
        )
    try:
        return base.with_overrides(overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid quality config: {exc}") from exc


def load_quality_config(path: str | Path | None) -> QualityConfig:
    """Load quality overrides from the YAML file at *path*.

    A ``None`` path yields the default config. An empty file counts as no
    overrides.

    Raises:
        ConfigurationError: If the file is unreadable, is not a YAML mapping,
            or describes an invalid config.
    """
    if path is None:
        return default_quality_config()

    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read quality config {config_path}: {exc}") from exc

    config = build_quality_config(raw or None)
    logger.info("config.quality_loaded", path=str(config_path), keys=sorted((raw or {}).keys()))
    return config
