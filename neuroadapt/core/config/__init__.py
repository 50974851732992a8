# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for NeuroAdapt.

- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Utilities for loading rule files

Example:
    >>> from neuroadapt.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.environment
    'development'
"""

from neuroadapt.core.config.settings import (
    PresetSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from neuroadapt.core.config.yaml_loader import YAMLLoadError, deep_merge, load_yaml

__all__ = [
    # Settings
    "Settings",
    "PresetSettings",
    "get_settings",
    "clear_settings_cache",
    # YAML utilities
    "load_yaml",
    "deep_merge",
    "YAMLLoadError",
]
