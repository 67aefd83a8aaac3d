"""
Typed exception hierarchy for the shop-floor kernel and import pipeline.

Every error carries a class-level ``code`` (machine-readable, API-safe) and
stores its context as attributes so callers catch by type and read
structured data instead of parsing messages.

    ShopfloorError (base)
    |
    +-- ImportPipelineError
    |   +-- ImportValidationError
    |   +-- DuplicateWorkOrderError
    |   +-- UnknownTableTypeError
    |
    +-- PersistenceError
    |   +-- EngineNotInitializedError
    |
    +-- ConfigurationError

Error codes
-----------

Category     | Code                       | When raised
-------------|----------------------------|-------------------------------------
Import       | IMPORT_VALIDATION_FAILED   | Blank name, empty or unknown selection
             | DUPLICATE_WORK_ORDER       | Work order id or name already stored
             | UNKNOWN_TABLE_TYPE         | Field lookup against an unknown table
-------------|----------------------------|-------------------------------------
Persistence  | PERSISTENCE_FAILED         | Commit failed, transaction rolled back
             | ENGINE_NOT_INITIALIZED     | Session requested before init
-------------|----------------------------|-------------------------------------
Config       | CONFIGURATION_INVALID      | Settings file has an invalid value

The public import entrypoints never let these escape: they are caught at the
service boundary and folded into a ``ConversionResult``.
"""

from __future__ import annotations

from datetime import datetime


class ShopfloorError(Exception):
    """Base exception for all shop-floor errors."""

    code: str = "SHOPFLOOR_ERROR"


# Import pipeline


class ImportPipelineError(ShopfloorError):
    """Base exception for import pipeline errors."""

    code: str = "IMPORT_ERROR"


class ImportValidationError(ImportPipelineError):
    """Selection request failed validation before any persistence."""

    code: str = "IMPORT_VALIDATION_FAILED"

    def __init__(self, errors: list[str], invalid_ids: tuple[str, ...] = ()):
        self.errors = list(errors)
        self.invalid_ids = invalid_ids
        super().__init__("; ".join(self.errors) or "Invalid selection")


class DuplicateWorkOrderError(ImportPipelineError):
    """Candidate work order id or name collides with a persisted work order."""

    code: str = "DUPLICATE_WORK_ORDER"

    def __init__(
        self,
        work_order_id: str,
        work_order_name: str,
        existing_import_date: datetime | None,
        duplicate_info: object | None = None,
        errors: list[str] | None = None,
    ):
        self.work_order_id = work_order_id
        self.work_order_name = work_order_name
        self.existing_import_date = existing_import_date
        self.duplicate_info = duplicate_info
        self.errors = list(errors or [])
        super().__init__(
            f"Work order already exists: id={work_order_id!r} name={work_order_name!r}"
        )


class UnknownTableTypeError(ImportPipelineError):
    """Field lookup requested for a table type with no mapping table."""

    code: str = "UNKNOWN_TABLE_TYPE"

    def __init__(self, table_type: str):
        self.table_type = table_type
        super().__init__(f"Unknown table type: {table_type}")


# Persistence


class PersistenceError(ShopfloorError):
    """Atomic commit failed; every staged change was rolled back."""

    code: str = "PERSISTENCE_FAILED"

    def __init__(self, message: str, work_order_id: str | None = None):
        self.work_order_id = work_order_id
        super().__init__(message)


class EngineNotInitializedError(PersistenceError):
    """Engine or session factory requested before init_engine_from_url()."""

    code: str = "ENGINE_NOT_INITIALIZED"

    def __init__(self) -> None:
        super().__init__("Engine not initialized. Call init_engine_from_url() first.")


# Configuration


class ConfigurationError(ShopfloorError, ValueError):
    """Settings file contains an invalid value."""

    code: str = "CONFIGURATION_INVALID"

    def __init__(self, key: str, value: object):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration value for {key}: {value!r}")
