"""Field mapping: static column map and the typed field resolver."""

from shopfloor_ingestion.mapping.column_map import COLUMN_MAP, EDGE_FIELDS
from shopfloor_ingestion.mapping.field_resolver import FieldResolver

__all__ = ["COLUMN_MAP", "EDGE_FIELDS", "FieldResolver"]
