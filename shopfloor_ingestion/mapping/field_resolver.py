"""
Field resolver: logical field names to physical export columns, plus typed
accessors with safe defaults.  ZERO I/O.

Defaults when a value is missing or unparsable:
    get_string  -> ""
    get_int     -> 1   (rows without a quantity are single units)
    get_decimal -> Decimal(0)
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from shopfloor_ingestion.domain.types import Row, TableType
from shopfloor_ingestion.mapping.column_map import COLUMN_MAP, EDGE_FIELDS
from shopfloor_kernel.exceptions import UnknownTableTypeError
from shopfloor_kernel.logging_config import get_logger

logger = get_logger("ingestion.field_resolver")

DEFAULT_INT = 1


class FieldResolver:
    """Resolves logical field names against the static column map."""

    def __init__(self, column_map: dict[TableType, dict[str, str]] | None = None):
        self._column_map = column_map or COLUMN_MAP

    def _mapping(self, table_type: TableType | str) -> dict[str, str]:
        parsed = TableType.parse(table_type)
        if parsed is None or parsed not in self._column_map:
            raise UnknownTableTypeError(str(table_type))
        return self._column_map[parsed]

    def resolve(self, table_type: TableType | str, logical_name: str) -> str:
        """Physical column for ``logical_name``; the name itself when unmapped."""
        mapping = self._mapping(table_type)
        physical = mapping.get(logical_name)
        if physical is not None:
            return physical
        logger.warning(
            "field_mapping_missing",
            extra={"table_type": TableType.parse(table_type).value, "logical_name": logical_name},
        )
        return logical_name

    def has_field(self, table_type: TableType | str, logical_name: str) -> bool:
        return logical_name in self._mapping(table_type)

    def get_string(self, row: Row, table_type: TableType | str, logical_name: str) -> str:
        # Unmapped names are a silent miss here: callers test for optional columns.
        if not self.has_field(table_type, logical_name):
            return ""
        value = row.get(self.resolve(table_type, logical_name))
        if value is None:
            return ""
        return str(value)

    def get_int(self, row: Row, table_type: TableType | str, logical_name: str) -> int:
        value = row.get(self.resolve(table_type, logical_name))
        return _parse_int(value, DEFAULT_INT)

    def get_decimal(
        self, row: Row, table_type: TableType | str, logical_name: str
    ) -> Decimal:
        value = row.get(self.resolve(table_type, logical_name))
        return _parse_decimal(value)

    def edge_banding_code(self, row: Row) -> str:
        """Banded sides of a PARTS row as a compact code, e.g. ``"Top,Left"``."""
        sides = [
            side
            for side, field_name in EDGE_FIELDS
            if self.get_string(row, TableType.PARTS, field_name).strip()
        ]
        return ",".join(sides)


def _parse_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _parse_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal(0)
    return parsed if parsed.is_finite() else Decimal(0)
