# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

Settings are read from environment variables (and an optional .env file)
with defaults suitable for local development. A cached instance is
provided via get_settings().

Example:
    >>> from neuroadapt.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.presets.rules_path.name
    'rules.yaml'
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repository-level config directory, next to the package
DEFAULT_PRESET_CONFIG_DIR = Path(__file__).parents[3] / "config" / "presets"


class PresetSettings(BaseSettings):
    """Preset engine configuration.

    Attributes:
        config_dir: Directory holding rules.yaml.
        rules_file: Name of the rules file inside config_dir.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRESET_",
        extra="ignore",
    )

    config_dir: Path = DEFAULT_PRESET_CONFIG_DIR
    rules_file: str = "rules.yaml"

    @property
    def rules_path(self) -> Path:
        """Full path of the rules file."""
        return self.config_dir / self.rules_file


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        environment: Deployment environment.
        debug: Enable debug output.
        log_level: Logging level name.
        presets: Preset engine settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "test", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    presets: PresetSettings = Field(default_factory=PresetSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize and validate the log level name."""
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next call re-reads the environment."""
    get_settings.cache_clear()
