"""Pure import-pipeline domain: types and quantity expansion (no I/O)."""

from shopfloor_ingestion.domain.expansion import Instance, expand, instance_count
from shopfloor_ingestion.domain.types import (
    ConversionResult,
    ConversionStatistics,
    DuplicateDetectionResult,
    ImportDetachedProduct,
    ImportHardware,
    ImportNestSheet,
    ImportPart,
    ImportProduct,
    ImportSubassembly,
    ImportWorkOrder,
    RawImportBundle,
    Row,
    SelectionItemType,
    SelectionRequest,
    TableType,
)

__all__ = [
    "Row",
    "TableType",
    "RawImportBundle",
    "ImportPart",
    "ImportHardware",
    "ImportSubassembly",
    "ImportProduct",
    "ImportDetachedProduct",
    "ImportNestSheet",
    "ImportWorkOrder",
    "SelectionItemType",
    "SelectionRequest",
    "ConversionStatistics",
    "DuplicateDetectionResult",
    "ConversionResult",
    "Instance",
    "expand",
    "instance_count",
]
