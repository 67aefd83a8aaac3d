"""
Tree builder: flat export rows -> parsed ImportWorkOrder preview tree.

Rows reference each other through string LinkIDs.  The builder indexes
them once, then assembles Product -> Subassembly (recursive) ->
Part/Hardware.  Quantities stay logical here; instance expansion happens
when a selection is materialized.

Cycle guard: the ids of the subassemblies on the current recursion path are
threaded down as a set.  A child whose id is already on the path is kept as
a leaf and recorded as a warning.  Ids leave the set on the way back up, so
sibling branches may legitimately repeat an id.
"""

from __future__ import annotations

from collections import defaultdict
from uuid import uuid4

from shopfloor_config.schema import ImportSettings
from shopfloor_ingestion.domain.types import (
    ImportDetachedProduct,
    ImportHardware,
    ImportNestSheet,
    ImportPart,
    ImportProduct,
    ImportSubassembly,
    ImportWorkOrder,
    RawImportBundle,
    Row,
    TableType,
)
from shopfloor_ingestion.mapping.field_resolver import FieldResolver
from shopfloor_kernel.logging_config import get_logger

logger = get_logger("ingestion.tree_builder")

PRODUCTS = TableType.PRODUCTS
SUBASSEMBLIES = TableType.SUBASSEMBLIES
PARTS = TableType.PARTS
HARDWARE = TableType.HARDWARE
PLACEDSHEETS = TableType.PLACEDSHEETS


def placeholder_id(kind: str) -> str:
    return f"unknown-{kind}-{uuid4().hex[:8]}"


class _RowIndex:
    """LinkID lookups over one bundle, built once per tree."""

    def __init__(self, bundle: RawImportBundle, resolver: FieldResolver):
        self.direct_parts: dict[str, list[Row]] = defaultdict(list)
        self.subassembly_parts: dict[str, list[Row]] = defaultdict(list)
        self.top_subassemblies: dict[str, list[Row]] = defaultdict(list)
        self.nested_subassemblies: dict[str, list[Row]] = defaultdict(list)
        self.product_hardware: dict[str, list[Row]] = defaultdict(list)
        self.subassembly_hardware: dict[str, list[Row]] = defaultdict(list)
        self.standalone_hardware: list[Row] = []

        get = resolver.get_string
        for row in bundle.parts:
            sub_id = get(row, PARTS, "SubassemblyId")
            if sub_id:
                self.subassembly_parts[sub_id].append(row)
            else:
                self.direct_parts[get(row, PARTS, "ProductId")].append(row)

        for row in bundle.subassemblies:
            parent_id = get(row, SUBASSEMBLIES, "ParentSubassemblyId")
            if parent_id:
                self.nested_subassemblies[parent_id].append(row)
            else:
                self.top_subassemblies[get(row, SUBASSEMBLIES, "ProductId")].append(row)

        for row in bundle.hardware:
            sub_id = get(row, HARDWARE, "SubassemblyId")
            product_id = get(row, HARDWARE, "ProductId")
            if sub_id:
                self.subassembly_hardware[sub_id].append(row)
            elif product_id:
                self.product_hardware[product_id].append(row)
            else:
                self.standalone_hardware.append(row)


class TreeBuilder:
    """Builds the parsed preview tree from a raw bundle."""

    def __init__(
        self,
        resolver: FieldResolver | None = None,
        settings: ImportSettings | None = None,
    ):
        self._resolver = resolver or FieldResolver()
        self._settings = settings or ImportSettings()

    def build(
        self,
        bundle: RawImportBundle,
        work_order_name: str | None = None,
    ) -> ImportWorkOrder:
        logger.info(
            "tree_build_started",
            extra={
                "product_rows": len(bundle.products),
                "subassembly_rows": len(bundle.subassemblies),
                "part_rows": len(bundle.parts),
                "hardware_rows": len(bundle.hardware),
                "nest_sheet_rows": len(bundle.nest_sheets),
            },
        )

        tree = ImportWorkOrder(
            id=self._work_order_id(bundle),
            name=self._work_order_name(bundle, work_order_name),
        )
        index = _RowIndex(bundle, self._resolver)

        for row in bundle.products:
            product = self._build_product(row, index, tree.warnings)
            if self._settings.collapse_single_part_products and _is_single_part(product):
                tree.detached_products.append(_detach(product))
            else:
                tree.products.append(product)

        tree.hardware = [self._build_hardware(row) for row in index.standalone_hardware]
        tree.nest_sheets = [
            sheet
            for sheet in (self._build_nest_sheet(row, tree.warnings) for row in bundle.nest_sheets)
            if sheet is not None
        ]

        logger.info(
            "tree_build_completed",
            extra={
                "work_order_id": tree.id,
                "products": len(tree.products),
                "detached_products": len(tree.detached_products),
                "standalone_hardware": len(tree.hardware),
                "nest_sheets": len(tree.nest_sheets),
                "warning_count": len(tree.warnings),
            },
        )
        return tree

    # -- work order header -----------------------------------------------------

    def _work_order_id(self, bundle: RawImportBundle) -> str:
        if bundle.work_order_id:
            return bundle.work_order_id
        if bundle.products:
            from_row = self._resolver.get_string(bundle.products[0], PRODUCTS, "WorkOrderId")
            if from_row:
                return from_row
        return str(uuid4())

    def _work_order_name(self, bundle: RawImportBundle, requested: str | None) -> str:
        default = self._settings.default_work_order_name
        if requested and requested.strip() and requested != default:
            return requested
        if bundle.work_order_name:
            return bundle.work_order_name
        if bundle.products:
            from_row = self._resolver.get_string(bundle.products[0], PRODUCTS, "WorkOrderName")
            if from_row.strip():
                return from_row
        return default

    # -- products and subassemblies ----------------------------------------------

    def _build_product(
        self, row: Row, index: _RowIndex, warnings: list[str]
    ) -> ImportProduct:
        r = self._resolver
        source_id = r.get_string(row, PRODUCTS, "ProductId")
        item_number = r.get_string(row, PRODUCTS, "ItemNumber")
        product = ImportProduct(
            id=source_id,
            name=r.get_string(row, PRODUCTS, "Name") or item_number,
            item_number=item_number,
            quantity=r.get_int(row, PRODUCTS, "Quantity"),
            length=r.get_decimal(row, PRODUCTS, "Length"),
            width=r.get_decimal(row, PRODUCTS, "Width"),
        )

        # Children match on the export id; a row without one cannot own any.
        if not source_id:
            product.id = placeholder_id("product")
            _warn(
                warnings,
                "product_id_missing",
                f"Product '{product.name}' has no id; using placeholder '{product.id}'",
                placeholder_id=product.id,
            )
            return product

        product.parts = [
            self._build_part(part_row) for part_row in index.direct_parts.get(source_id, [])
        ]
        for sub_row in index.top_subassemblies.get(source_id, []):
            product.subassemblies.append(
                self._build_subassembly(sub_row, source_id, index, set(), warnings)
            )
        product.hardware = [
            self._build_hardware(hw_row) for hw_row in index.product_hardware.get(source_id, [])
        ]
        return product

    def _build_subassembly(
        self,
        row: Row,
        product_id: str,
        index: _RowIndex,
        path: set[str],
        warnings: list[str],
    ) -> ImportSubassembly:
        r = self._resolver
        sub_id = r.get_string(row, SUBASSEMBLIES, "SubassemblyId")
        node = ImportSubassembly(
            id=sub_id,
            name=r.get_string(row, SUBASSEMBLIES, "Name"),
            quantity=r.get_int(row, SUBASSEMBLIES, "Quantity"),
            product_id=product_id,
            parent_subassembly_id=r.get_string(row, SUBASSEMBLIES, "ParentSubassemblyId"),
            length=r.get_decimal(row, SUBASSEMBLIES, "Length"),
            width=r.get_decimal(row, SUBASSEMBLIES, "Width"),
        )

        if not sub_id:
            node.id = placeholder_id("subassembly")
            _warn(
                warnings,
                "subassembly_id_missing",
                f"Subassembly '{node.name}' under product '{product_id}' has no id; "
                f"using placeholder '{node.id}'",
                product_id=product_id,
                placeholder_id=node.id,
            )
            return node

        if sub_id in path:
            _warn(
                warnings,
                "subassembly_cycle_detected",
                f"Cycle detected at subassembly '{sub_id}' under product '{product_id}'; "
                "nested expansion stopped",
                product_id=product_id,
                subassembly_id=sub_id,
                path=sorted(path),
            )
            return node

        path.add(sub_id)
        try:
            node.parts = [
                self._build_part(part_row) for part_row in index.subassembly_parts.get(sub_id, [])
            ]
            for child_row in index.nested_subassemblies.get(sub_id, []):
                node.subassemblies.append(
                    self._build_subassembly(child_row, product_id, index, path, warnings)
                )
            node.hardware = [
                self._build_hardware(hw_row)
                for hw_row in index.subassembly_hardware.get(sub_id, [])
            ]
        finally:
            path.discard(sub_id)
        return node

    # -- leaves ----------------------------------------------------------------------

    def _build_part(self, row: Row) -> ImportPart:
        r = self._resolver
        return ImportPart(
            id=r.get_string(row, PARTS, "PartId"),
            name=r.get_string(row, PARTS, "Name"),
            quantity=r.get_int(row, PARTS, "Quantity"),
            length=r.get_decimal(row, PARTS, "Length"),
            width=r.get_decimal(row, PARTS, "Width"),
            thickness=r.get_decimal(row, PARTS, "Thickness"),
            material=r.get_string(row, PARTS, "Material"),
            edge_banding=r.edge_banding_code(row),
            product_id=r.get_string(row, PARTS, "ProductId"),
            subassembly_id=r.get_string(row, PARTS, "SubassemblyId"),
        )

    def _build_hardware(self, row: Row) -> ImportHardware:
        r = self._resolver
        return ImportHardware(
            id=r.get_string(row, HARDWARE, "HardwareId"),
            name=r.get_string(row, HARDWARE, "Name"),
            quantity=r.get_int(row, HARDWARE, "Quantity"),
            product_id=r.get_string(row, HARDWARE, "ProductId"),
            subassembly_id=r.get_string(row, HARDWARE, "SubassemblyId"),
        )

    def _build_nest_sheet(self, row: Row, warnings: list[str]) -> ImportNestSheet | None:
        r = self._resolver
        sheet_id = r.get_string(row, PLACEDSHEETS, "SheetId")
        file_name = r.get_string(row, PLACEDSHEETS, "FileName")
        name = file_name or r.get_string(row, PLACEDSHEETS, "Name")
        if not sheet_id:
            _warn(
                warnings,
                "nest_sheet_id_missing",
                f"Placed sheet '{name}' has no id and was skipped",
                sheet_name=name,
            )
            return None
        return ImportNestSheet(
            id=sheet_id,
            name=name,
            material=r.get_string(row, PLACEDSHEETS, "Material"),
            length=r.get_decimal(row, PLACEDSHEETS, "Length"),
            width=r.get_decimal(row, PLACEDSHEETS, "Width"),
            thickness=r.get_decimal(row, PLACEDSHEETS, "Thickness"),
            barcode=r.get_string(row, PLACEDSHEETS, "BarCode") or name,
        )


def _is_single_part(product: ImportProduct) -> bool:
    return len(product.parts) == 1 and not product.subassemblies and not product.hardware


def _detach(product: ImportProduct) -> ImportDetachedProduct:
    part = product.parts[0]
    logger.info(
        "product_detached",
        extra={"product_id": product.id, "source_part_id": part.id},
    )
    return ImportDetachedProduct(
        id=product.id,
        name=product.name,
        item_number=product.item_number,
        quantity=product.quantity,
        length=part.length,
        width=part.width,
        thickness=part.thickness,
        material=part.material,
        edge_banding=part.edge_banding,
        source_part_id=part.id,
        part_quantity=part.quantity,
    )


def _warn(warnings: list[str], event: str, message: str, **fields: object) -> None:
    logger.warning(event, extra={"detail": message, **fields})
    warnings.append(message)
