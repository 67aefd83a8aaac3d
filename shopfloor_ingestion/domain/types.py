"""
shopfloor_ingestion.domain.types -- Pure dataclasses for the import pipeline.

ZERO I/O. Imports only from the standard library.

Three groups of types live here:
    - The raw input bundle (rows keyed by physical column name).
    - The parsed preview tree (logical quantities, nothing expanded).
    - Selection requests and the structured conversion result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Mapping

Row = Mapping[str, Any]


# =============================================================================
# Raw input
# =============================================================================


class TableType(str, Enum):
    """Record tables of a CAD cut-list export."""

    PRODUCTS = "PRODUCTS"
    SUBASSEMBLIES = "SUBASSEMBLIES"
    PARTS = "PARTS"
    HARDWARE = "HARDWARE"
    PLACEDSHEETS = "PLACEDSHEETS"
    OPTIMIZATIONRESULTS = "OPTIMIZATIONRESULTS"

    @classmethod
    def parse(cls, tag: str | TableType) -> TableType | None:
        """Case-insensitive lookup; NESTSHEETS is accepted for PLACEDSHEETS."""
        if isinstance(tag, TableType):
            return tag
        key = str(tag).strip().upper()
        if key == "NESTSHEETS":
            return cls.PLACEDSHEETS
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class RawImportBundle:
    """Already-deserialized export, grouped by table type."""

    products: list[Row] = field(default_factory=list)
    parts: list[Row] = field(default_factory=list)
    subassemblies: list[Row] = field(default_factory=list)
    hardware: list[Row] = field(default_factory=list)
    nest_sheets: list[Row] = field(default_factory=list)  # PLACEDSHEETS
    optimization_results: list[Row] = field(default_factory=list)
    work_order_id: str | None = None  # Export header, when present
    work_order_name: str | None = None


# =============================================================================
# Parsed preview tree (logical quantities)
# =============================================================================


@dataclass
class ImportPart:
    id: str
    name: str
    quantity: int = 1
    length: Decimal = Decimal(0)
    width: Decimal = Decimal(0)
    thickness: Decimal = Decimal(0)
    material: str = ""
    edge_banding: str = ""  # e.g. "Top,Left"
    product_id: str = ""
    subassembly_id: str = ""


@dataclass
class ImportHardware:
    id: str
    name: str
    quantity: int = 1
    product_id: str = ""
    subassembly_id: str = ""


@dataclass
class ImportSubassembly:
    id: str
    name: str
    quantity: int = 1
    product_id: str = ""
    parent_subassembly_id: str = ""
    length: Decimal = Decimal(0)
    width: Decimal = Decimal(0)
    parts: list[ImportPart] = field(default_factory=list)
    subassemblies: list[ImportSubassembly] = field(default_factory=list)
    hardware: list[ImportHardware] = field(default_factory=list)


@dataclass
class ImportProduct:
    id: str
    name: str
    item_number: str = ""
    quantity: int = 1
    length: Decimal = Decimal(0)
    width: Decimal = Decimal(0)
    parts: list[ImportPart] = field(default_factory=list)
    subassemblies: list[ImportSubassembly] = field(default_factory=list)
    hardware: list[ImportHardware] = field(default_factory=list)


@dataclass
class ImportDetachedProduct:
    """A product reclassified as a single loose part."""

    id: str
    name: str
    item_number: str = ""
    quantity: int = 1
    length: Decimal = Decimal(0)
    width: Decimal = Decimal(0)
    thickness: Decimal = Decimal(0)
    material: str = ""
    edge_banding: str = ""
    source_part_id: str = ""  # Physical part LinkID, kept for label scans
    part_quantity: int = 1  # The single part's own quantity per instance


@dataclass
class ImportNestSheet:
    id: str
    name: str
    material: str = ""
    length: Decimal = Decimal(0)
    width: Decimal = Decimal(0)
    thickness: Decimal = Decimal(0)
    barcode: str = ""


@dataclass
class ImportWorkOrder:
    """Root of the parsed tree handed to the selection step."""

    id: str
    name: str
    products: list[ImportProduct] = field(default_factory=list)
    hardware: list[ImportHardware] = field(default_factory=list)  # Standalone
    detached_products: list[ImportDetachedProduct] = field(default_factory=list)
    nest_sheets: list[ImportNestSheet] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def iter_items(self) -> Iterator[tuple[str, SelectionItemType]]:
        """Yield (id, item type) for every node, depth first."""
        for product in self.products:
            yield product.id, SelectionItemType.PRODUCT
            yield from _iter_container(product)
        for hardware in self.hardware:
            yield hardware.id, SelectionItemType.HARDWARE
        for detached in self.detached_products:
            yield detached.id, SelectionItemType.DETACHED_PRODUCT
        for sheet in self.nest_sheets:
            yield sheet.id, SelectionItemType.NEST_SHEET

    def all_item_ids(self) -> set[str]:
        return {item_id for item_id, _ in self.iter_items()}

    def item_types(self) -> dict[str, set[SelectionItemType]]:
        """Every item type each id appears under in the tree."""
        types: dict[str, set[SelectionItemType]] = {}
        for item_id, item_type in self.iter_items():
            types.setdefault(item_id, set()).add(item_type)
        return types


def _iter_container(
    node: ImportProduct | ImportSubassembly,
) -> Iterator[tuple[str, SelectionItemType]]:
    for part in node.parts:
        yield part.id, SelectionItemType.PART
    for sub in node.subassemblies:
        yield sub.id, SelectionItemType.SUBASSEMBLY
        yield from _iter_container(sub)
    for hardware in node.hardware:
        yield hardware.id, SelectionItemType.HARDWARE


# =============================================================================
# Selection
# =============================================================================


class SelectionItemType(str, Enum):
    """Discriminator attached to every selected id."""

    PRODUCT = "product"
    PART = "part"
    SUBASSEMBLY = "subassembly"
    HARDWARE = "hardware"
    DETACHED_PRODUCT = "detached_product"
    NEST_SHEET = "nestsheet"

    @classmethod
    def parse(cls, value: str | SelectionItemType) -> SelectionItemType | None:
        if isinstance(value, SelectionItemType):
            return value
        key = str(value).strip().lower()
        if key == "detached":
            return cls.DETACHED_PRODUCT
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class SelectionRequest:
    """Ids chosen from the preview tree, each tagged with its item type."""

    work_order_name: str
    items: Mapping[str, str | SelectionItemType] = field(default_factory=dict)
    allow_duplicates: bool = False

    def ids_of(self, item_type: SelectionItemType) -> frozenset[str]:
        return frozenset(
            item_id
            for item_id, raw_type in self.items.items()
            if SelectionItemType.parse(raw_type) is item_type
        )

    def unknown_types(self) -> dict[str, str]:
        """Selected ids whose type tag is not a known discriminator."""
        return {
            item_id: str(raw_type)
            for item_id, raw_type in self.items.items()
            if SelectionItemType.parse(raw_type) is None
        }


# =============================================================================
# Results
# =============================================================================


@dataclass
class ConversionStatistics:
    """Running counts accumulated while materializing a selection."""

    converted_products: int = 0
    converted_parts: int = 0
    converted_subassemblies: int = 0
    converted_hardware: int = 0
    converted_detached_products: int = 0
    converted_nest_sheets: int = 0

    @property
    def total(self) -> int:
        return (
            self.converted_products
            + self.converted_parts
            + self.converted_subassemblies
            + self.converted_hardware
            + self.converted_detached_products
            + self.converted_nest_sheets
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "converted_products": self.converted_products,
            "converted_parts": self.converted_parts,
            "converted_subassemblies": self.converted_subassemblies,
            "converted_hardware": self.converted_hardware,
            "converted_detached_products": self.converted_detached_products,
            "converted_nest_sheets": self.converted_nest_sheets,
        }


@dataclass(frozen=True)
class DuplicateDetectionResult:
    """Outcome of checking a candidate work order against the store."""

    has_duplicates: bool
    id_conflict: bool = False
    name_conflict: bool = False
    duplicate_work_order_id: str | None = None
    duplicate_work_order_name: str | None = None
    existing_import_date: datetime | None = None
    suggested_new_id: str | None = None
    suggested_new_name: str | None = None
    conflict_messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConversionResult:
    """What every conversion entrypoint returns; callers branch on success."""

    success: bool
    work_order_id: str | None = None
    statistics: ConversionStatistics = field(default_factory=ConversionStatistics)
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    duplicate_info: DuplicateDetectionResult | None = None
