"""Import pipeline services."""

from shopfloor_ingestion.services.cross_reference import (
    NestSheetLinker,
    build_placement_map,
)
from shopfloor_ingestion.services.duplicate_resolver import DuplicateResolver
from shopfloor_ingestion.services.identifier_allocator import IdentifierAllocator
from shopfloor_ingestion.services.import_service import (
    ImportService,
    build_full_selection,
    build_import_service,
)
from shopfloor_ingestion.services.selective_converter import (
    SelectiveConverter,
    validate_selection,
)
from shopfloor_ingestion.services.tree_builder import TreeBuilder

__all__ = [
    "TreeBuilder",
    "IdentifierAllocator",
    "NestSheetLinker",
    "build_placement_map",
    "DuplicateResolver",
    "SelectiveConverter",
    "validate_selection",
    "ImportService",
    "build_full_selection",
    "build_import_service",
]
