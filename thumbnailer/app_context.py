"""
Application bootstrap helpers.

Responsibilities:
- Locate/load configuration.
- Configure logging.
- Build the thumbnail parameter and batch runner from the configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from thumbnailer.config.loader import load_config
from thumbnailer.logging.setup import setup_logging
from thumbnailer.models.parameter import ThumbnailParameter
from thumbnailer.services.batch_service import BatchService

ENV_CONFIG_DIR = "THUMBNAILER_CONFIG_DIR"


@dataclass
class AppContext:
    """Settings and services shared by the command line entry points."""

    config: dict[str, Any]
    config_path: Path
    parameter: ThumbnailParameter
    batch_service: BatchService
    log_path: Path | None = None


def default_config_dir() -> Path:
    """Return the directory to hold config files, honoring env override."""
    override = os.getenv(ENV_CONFIG_DIR)
    if override:
        return Path(override)
    return Path.home() / ".thumbnailer"


def default_config_path() -> Path:
    """Return default config file path."""
    return default_config_dir() / "config.toml"


def initialize_app(
    config_path: Path | None = None,
    log_dir: Path | None = None,
    **parameter_overrides: Any,
) -> AppContext:
    """
    Load configuration, set up logging and return an AppContext.
    Keyword arguments override fields of the configured ThumbnailParameter.
    """
    config_path = config_path or default_config_path()
    config = load_config(config_path)

    log_path = setup_logging(log_dir=log_dir, level=str(config.get("logging", {}).get("level", "INFO")))

    parameter = ThumbnailParameter.from_config(config, **parameter_overrides)
    batch_service = BatchService(max_workers=int(config.get("workers", {}).get("max", 2)))

    return AppContext(
        config=config,
        config_path=config_path,
        parameter=parameter,
        batch_service=batch_service,
        log_path=log_path,
    )
