# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML configuration file loader utilities.

Rule tables for the preset engine ship as YAML and are layered over
built-in defaults, so a deployment only needs to list the values it
tunes.

Example:
    >>> from pathlib import Path
    >>> from neuroadapt.core.config.yaml_loader import deep_merge, load_yaml
    >>> overrides = load_yaml(Path("config/presets/rules.yaml"))
    >>> rules = deep_merge({"baseline": {"standard": 15.0}}, overrides)
"""

from pathlib import Path
from typing import Any

import yaml


class YAMLLoadError(Exception):
    """Raised when a YAML file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialize YAMLLoadError.

        Args:
            path: Path to the YAML file that failed to load.
            reason: Description of why the file failed to load.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load YAML file '{path}': {reason}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file whose root is a mapping.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed mapping, or an empty dict for an empty file.

    Raises:
        YAMLLoadError: If the file is missing, unreadable, not valid YAML,
            or its root is not a mapping.
    """
    if not path.is_file():
        reason = "File does not exist" if not path.exists() else "Path is not a file"
        raise YAMLLoadError(path, reason)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise YAMLLoadError(path, f"Cannot read file: {e}") from e

    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise YAMLLoadError(path, f"Invalid YAML syntax: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise YAMLLoadError(
            path, f"YAML root must be a mapping, got {type(parsed).__name__}"
        )

    return parsed


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two mappings, override winning on conflicts.

    Lists are replaced, not concatenated: a deployment that lists its own
    cluster rules replaces the default rule table entirely.

    Args:
        base: Defaults.
        override: Values taking precedence.

    Returns:
        A new merged dictionary. Inputs are not modified.
    """
    result: dict[str, Any] = base.copy()

    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = override_value

    return result
