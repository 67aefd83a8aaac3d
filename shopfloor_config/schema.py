"""
Import settings schema.

Frozen dataclasses the loader parses ``sets/*.yaml`` into.  Every field has
a default so a partial settings file is valid.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DefaultNestSheetSettings:
    """Fallback sheet created for parts with no placed sheet."""

    name: str = "Default Nest Sheet"
    material: str = "Unknown"
    barcode: str = "DEFAULT"


@dataclass(frozen=True)
class DuplicateSettings:
    """Formats used to derive reimport identifiers and names."""

    id_timestamp_format: str = "%Y%m%d_%H%M%S"
    name_timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    disambiguator_length: int = 6  # hex characters


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = "sqlite:///shopfloor.db"
    echo: bool = False


@dataclass(frozen=True)
class ImportSettings:
    """Root settings object returned by ``get_active_settings()``."""

    default_work_order_name: str = "New Import Work Order"
    collapse_single_part_products: bool = True
    default_nest_sheet: DefaultNestSheetSettings = field(
        default_factory=DefaultNestSheetSettings
    )
    duplicates: DuplicateSettings = field(default_factory=DuplicateSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    log_level: str = "INFO"
