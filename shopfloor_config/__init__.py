"""
shopfloor_config -- single public entrypoint for import settings.

Responsibility:
    ``get_active_settings()`` is the only way runtime code obtains settings.
    YAML loading is internal to this package.

Architecture position:
    Sits above ``shopfloor_kernel`` and beside ``shopfloor_ingestion``; the
    kernel never imports from here.

Failure modes:
    - ``FileNotFoundError`` -- the requested settings file does not exist.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``ConfigurationError`` (a ``ValueError``) -- a value has the wrong
      type or the log level is unknown.
"""

from __future__ import annotations

from pathlib import Path

from shopfloor_config.loader import load_yaml_file, parse_settings
from shopfloor_config.schema import (
    DatabaseSettings,
    DefaultNestSheetSettings,
    DuplicateSettings,
    ImportSettings,
)
from shopfloor_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_settings(config_path: Path | str | None = None) -> ImportSettings:
    """Load and parse the settings file (``sets/default.yaml`` by default).

    Emits a ``settings_loaded`` log entry naming the file and the key
    switches so every import can be traced to the settings that shaped it.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_PATH
    settings = parse_settings(load_yaml_file(path))

    _logger.info(
        "settings_loaded",
        extra={
            "config_path": str(path),
            "default_work_order_name": settings.default_work_order_name,
            "collapse_single_part_products": settings.collapse_single_part_products,
            "log_level": settings.log_level,
        },
    )
    return settings


__all__ = [
    "get_active_settings",
    "ImportSettings",
    "DefaultNestSheetSettings",
    "DuplicateSettings",
    "DatabaseSettings",
]
