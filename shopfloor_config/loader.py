"""
Settings loader (``shopfloor_config.loader``).

Responsibility
--------------
Reads a settings YAML file and parses it into ``shopfloor_config.schema``
dataclasses.  Runtime callers go through
``shopfloor_config.get_active_settings()`` instead of calling this module.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong value type or unknown log level  -> ``ConfigurationError``
  (a ``ValueError``).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from shopfloor_config.schema import (
    DatabaseSettings,
    DefaultNestSheetSettings,
    DuplicateSettings,
    ImportSettings,
)
from shopfloor_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(key, value)
    return value


def _bool(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(key, value)
    return value


def _str(section: dict[str, Any], key: str, default: str) -> str:
    value = section.get(key, default)
    if value is None:
        return default
    return str(value)


def parse_log_level(value: Any) -> str:
    """Normalize a log level name; unknown names are rejected."""
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError("logging.level", value)
    return level


def parse_settings(data: dict[str, Any]) -> ImportSettings:
    """Parse the top-level settings mapping into an ``ImportSettings``."""
    defaults = ImportSettings()

    import_data = _section(data, "import")
    sheet_data = _section(data, "default_nest_sheet")
    dup_data = _section(data, "duplicates")
    db_data = _section(data, "database")
    log_data = _section(data, "logging")

    sheet_defaults = defaults.default_nest_sheet
    dup_defaults = defaults.duplicates
    db_defaults = defaults.database

    length = dup_data.get("disambiguator_length", dup_defaults.disambiguator_length)
    if not isinstance(length, int) or isinstance(length, bool) or not 1 <= length <= 32:
        raise ConfigurationError("duplicates.disambiguator_length", length)

    return ImportSettings(
        default_work_order_name=_str(
            import_data, "default_work_order_name", defaults.default_work_order_name
        ),
        collapse_single_part_products=_bool(
            import_data,
            "collapse_single_part_products",
            defaults.collapse_single_part_products,
        ),
        default_nest_sheet=DefaultNestSheetSettings(
            name=_str(sheet_data, "name", sheet_defaults.name),
            material=_str(sheet_data, "material", sheet_defaults.material),
            barcode=_str(sheet_data, "barcode", sheet_defaults.barcode),
        ),
        duplicates=DuplicateSettings(
            id_timestamp_format=_str(
                dup_data, "id_timestamp_format", dup_defaults.id_timestamp_format
            ),
            name_timestamp_format=_str(
                dup_data, "name_timestamp_format", dup_defaults.name_timestamp_format
            ),
            disambiguator_length=length,
        ),
        database=DatabaseSettings(
            url=_str(db_data, "url", db_defaults.url),
            echo=_bool(db_data, "echo", db_defaults.echo),
        ),
        log_level=parse_log_level(log_data.get("level", defaults.log_level)),
    )
