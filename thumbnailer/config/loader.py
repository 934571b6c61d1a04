"""
Configuration loading: a TOML file merged over the defaults.
"""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any

from thumbnailer.config.defaults import DEFAULTS

_POSITIVE_INTS = (("thumbnail", "width"), ("thumbnail", "height"), ("workers", "max"))
_STRINGS = (("thumbnail", "output_format"), ("resizer", "strategy"), ("logging", "level"))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two dictionaries without mutating the originals."""
    merged: dict[str, Any] = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(config: dict[str, Any], path: Path) -> None:
    for section, key in _POSITIVE_INTS:
        value = config.get(section, {}).get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ValueError(f"{path}: [{section}] {key} must be a positive integer, got {value!r}")
    for section, key in _STRINGS:
        value = config.get(section, {}).get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{path}: [{section}] {key} must be a non-empty string, got {value!r}")
    quality = config.get("thumbnail", {}).get("output_quality")
    if quality is not None and not (isinstance(quality, (int, float)) and 0.0 <= quality <= 1.0):
        raise ValueError(f"{path}: [thumbnail] output_quality must be between 0.0 and 1.0, got {quality!r}")


def load_config(path: Path | None) -> dict[str, Any]:
    """
    Load a TOML config file and merge it over defaults.
    Missing files (or no path) return defaults; malformed or invalid files raise ValueError.
    """
    if path is None:
        return copy.deepcopy(DEFAULTS)
    if path.is_dir():
        raise IsADirectoryError(f"Config path points to a directory: {path}")

    user_config: dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("rb") as fh:
                user_config = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid config file {path}: {exc}") from exc

    merged = _deep_merge(DEFAULTS, user_config)
    _validate(merged, path)
    return merged
