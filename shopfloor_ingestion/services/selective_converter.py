"""
Selective converter: parsed tree + selection -> persisted work order.

Order of work inside one unit of work:
    1. Duplicate check on the work order id and name.
    2. Selected nest sheets (parts need them).
    3. Selected products, expanded into instances, with their selected
       parts, subassemblies (expanded, recursive) and hardware.
    4. Selected standalone hardware.
    5. Selected detached products, expanded into instances, each instance
       with its own companion part.
    6. Categorizer pass over every part.
    7. Commit.

Only nodes whose id is selected with a matching item type are materialized,
and a child is reached only through a selected parent.  Every id is claimed
through the IdentifierAllocator, so nothing collides with persisted rows or
with another entity of the same conversion.

Validation, duplicate and persistence failures never escape ``convert``;
they come back as a failed ConversionResult and nothing is written.
"""

from __future__ import annotations

from typing import Callable
from uuid import uuid4

from sqlalchemy.orm import Session

from shopfloor_config.schema import ImportSettings
from shopfloor_ingestion.categorizers.base import DefaultCategorizer, PartCategorizer
from shopfloor_ingestion.domain.expansion import expand
from shopfloor_ingestion.domain.types import (
    ConversionResult,
    ConversionStatistics,
    ImportDetachedProduct,
    ImportHardware,
    ImportNestSheet,
    ImportPart,
    ImportProduct,
    ImportSubassembly,
    ImportWorkOrder,
    RawImportBundle,
    SelectionItemType,
    SelectionRequest,
)
from shopfloor_ingestion.mapping.field_resolver import FieldResolver
from shopfloor_ingestion.services.cross_reference import (
    NestSheetLinker,
    build_placement_map,
)
from shopfloor_ingestion.services.duplicate_resolver import DuplicateResolver
from shopfloor_ingestion.services.identifier_allocator import IdentifierAllocator
from shopfloor_kernel.db.unit_of_work import UnitOfWork
from shopfloor_kernel.domain.clock import Clock, SystemClock
from shopfloor_kernel.exceptions import DuplicateWorkOrderError, ImportValidationError
from shopfloor_kernel.logging_config import LogContext, get_logger
from shopfloor_kernel.models import (
    EDGE_SIDES,
    DetachedProduct,
    Hardware,
    NestSheet,
    Part,
    PartCategory,
    PartStatus,
    Product,
    Subassembly,
    WorkOrder,
)
from shopfloor_kernel.selectors.entity_selector import EntitySelector, EntityTable

logger = get_logger("ingestion.selective_converter")


def validate_selection(tree: ImportWorkOrder, selection: SelectionRequest) -> None:
    """Raise ImportValidationError listing every problem with the request."""
    errors: list[str] = []
    if not selection.work_order_name or not selection.work_order_name.strip():
        errors.append("Work order name is required")
    if not selection.items:
        errors.append("At least one item must be selected for import")

    for item_id, raw_type in selection.unknown_types().items():
        errors.append(f"Unknown item type '{raw_type}' for item '{item_id}'")

    known = tree.item_types()
    invalid = tuple(item_id for item_id in selection.items if item_id not in known)
    if invalid:
        errors.append(f"Invalid item IDs selected: {', '.join(invalid)}")

    for item_id, raw_type in selection.items.items():
        item_type = SelectionItemType.parse(raw_type)
        if item_type is None or item_id not in known or item_type in known[item_id]:
            continue
        actual = ", ".join(sorted(t.value for t in known[item_id]))
        errors.append(f"Item '{item_id}' was selected as {item_type.value} but is a {actual}")

    if errors:
        raise ImportValidationError(errors, invalid_ids=invalid)


def edge_flags(edge_banding: str) -> dict[str, str]:
    """Per-side ``edgebanding_*`` column values for a compact side code."""
    sides = {side.strip() for side in edge_banding.split(",") if side.strip()}
    return {
        f"edgebanding_{side.lower()}": "Yes" if side in sides else ""
        for side in EDGE_SIDES
    }


class SelectiveConverter:
    """Materializes the selected branches of a parsed tree in one commit."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: ImportSettings | None = None,
        clock: Clock | None = None,
        categorizer: PartCategorizer | None = None,
        resolver: FieldResolver | None = None,
    ):
        self._session_factory = session_factory
        self._settings = settings or ImportSettings()
        self._clock = clock or SystemClock()
        self._categorizer = categorizer or DefaultCategorizer()
        self._resolver = resolver or FieldResolver()

    def convert(
        self,
        tree: ImportWorkOrder,
        selection: SelectionRequest,
        bundle: RawImportBundle | None = None,
    ) -> ConversionResult:
        with LogContext.bind(
            correlation_id=str(uuid4()),
            work_order_id=tree.id,
            producer="ingestion",
        ):
            logger.info(
                "conversion_started",
                extra={
                    "work_order_name": selection.work_order_name,
                    "selected_items": len(selection.items),
                    "allow_duplicates": selection.allow_duplicates,
                },
            )
            try:
                validate_selection(tree, selection)
                return self._convert_validated(tree, selection, bundle)
            except ImportValidationError as exc:
                logger.warning(
                    "selection_validation_failed",
                    extra={"errors": exc.errors, "invalid_ids": list(exc.invalid_ids)},
                )
                return ConversionResult(success=False, errors=tuple(exc.errors))
            except DuplicateWorkOrderError as exc:
                return ConversionResult(
                    success=False,
                    errors=tuple(exc.errors),
                    duplicate_info=exc.duplicate_info,
                )
            except Exception as exc:
                logger.error(
                    "conversion_failed",
                    extra={"work_order_name": selection.work_order_name},
                    exc_info=True,
                )
                return ConversionResult(success=False, errors=(f"Import error: {exc}",))

    def _convert_validated(
        self,
        tree: ImportWorkOrder,
        selection: SelectionRequest,
        bundle: RawImportBundle | None,
    ) -> ConversionResult:
        placements = build_placement_map(
            bundle.optimization_results if bundle is not None else (), self._resolver
        )

        with UnitOfWork(self._session_factory) as uow:
            selector = EntitySelector(uow.session)
            duplicates = DuplicateResolver(selector, self._clock, self._settings.duplicates)

            work_order_id = tree.id
            work_order_name = selection.work_order_name.strip()
            duplicate_info = duplicates.check(work_order_id, work_order_name)
            if duplicate_info.has_duplicates:
                if not selection.allow_duplicates:
                    raise DuplicateWorkOrderError(
                        work_order_id=work_order_id,
                        work_order_name=work_order_name,
                        existing_import_date=duplicate_info.existing_import_date,
                        duplicate_info=duplicate_info,
                        errors=list(duplicate_info.conflict_messages),
                    )
                work_order_id = duplicate_info.suggested_new_id
                work_order_name = duplicate_info.suggested_new_name
                logger.info(
                    "duplicate_alternates_applied",
                    extra={"new_work_order_id": work_order_id, "new_work_order_name": work_order_name},
                )

            allocator = IdentifierAllocator(selector)
            work_order = WorkOrder(
                id=allocator.claim(EntityTable.WORK_ORDER, work_order_id),
                name=work_order_name,
                imported_date=self._clock.now(),
                is_archived=False,
            )
            uow.stage(work_order)

            run = _ConversionRun(
                uow=uow,
                selection=selection,
                work_order=work_order,
                allocator=allocator,
                placements=placements,
                clock=self._clock,
                settings=self._settings,
            )
            run.materialize(tree)

            for part in run.parts:
                part.category = self._categorizer.categorize(part)

            uow.commit()

        logger.info(
            "conversion_committed",
            extra={
                "committed_work_order_id": work_order.id,
                **run.statistics.as_dict(),
                "converted_total": run.statistics.total,
                "warning_count": len(run.warnings),
            },
        )
        return ConversionResult(
            success=True,
            work_order_id=work_order.id,
            statistics=run.statistics,
            warnings=tuple(tree.warnings) + tuple(run.warnings),
            duplicate_info=duplicate_info if duplicate_info.has_duplicates else None,
        )


class _ConversionRun:
    """State for materializing one selection into staged ORM entities."""

    def __init__(
        self,
        uow: UnitOfWork,
        selection: SelectionRequest,
        work_order: WorkOrder,
        allocator: IdentifierAllocator,
        placements: dict[str, list[str]],
        clock: Clock,
        settings: ImportSettings,
    ):
        self._uow = uow
        self._work_order = work_order
        self._allocator = allocator
        self._clock = clock
        self.statistics = ConversionStatistics()
        self.warnings: list[str] = []
        self.parts: list[Part] = []
        self._reached: set[str] = set()

        self._selected = {
            item_type: selection.ids_of(item_type) for item_type in SelectionItemType
        }
        self._linker = NestSheetLinker(
            work_order_id=work_order.id,
            placements=placements,
            allocator=allocator,
            clock=clock,
            defaults=settings.default_nest_sheet,
            on_sheet_created=self._stage_default_sheet,
        )

    def _is_selected(self, item_id: str, item_type: SelectionItemType) -> bool:
        if item_id in self._selected[item_type]:
            self._reached.add(item_id)
            return True
        return False

    def materialize(self, tree: ImportWorkOrder) -> None:
        for sheet in tree.nest_sheets:
            if self._is_selected(sheet.id, SelectionItemType.NEST_SHEET):
                self._add_nest_sheet(sheet)

        for product in tree.products:
            if self._is_selected(product.id, SelectionItemType.PRODUCT):
                self._add_product(product)

        for hardware in tree.hardware:
            if self._is_selected(hardware.id, SelectionItemType.HARDWARE):
                self._add_hardware(hardware)

        for detached in tree.detached_products:
            if self._is_selected(detached.id, SelectionItemType.DETACHED_PRODUCT):
                self._add_detached_product(detached)

        self._warn_unreached()

    # -- nest sheets -------------------------------------------------------------

    def _add_nest_sheet(self, source: ImportNestSheet) -> None:
        sheet = NestSheet(
            id=self._allocator.claim(EntityTable.NEST_SHEET, source.id),
            work_order_id=self._work_order.id,
            name=source.name,
            material=source.material,
            length=source.length,
            width=source.width,
            thickness=source.thickness,
            barcode=source.barcode or source.name,
            created_date=self._clock.now(),
            is_processed=False,
        )
        self._uow.stage(sheet)
        self._linker.register(source.id, sheet)
        self.statistics.converted_nest_sheets += 1

    def _stage_default_sheet(self, sheet: NestSheet) -> None:
        self._uow.stage(sheet)
        self.statistics.converted_nest_sheets += 1

    # -- products and subassemblies ------------------------------------------------

    def _add_product(self, source: ImportProduct) -> None:
        instances = expand(source.id, source.name, source.quantity)
        if len(instances) > 1:
            logger.info(
                "product_expanded",
                extra={"product_id": source.id, "instances": len(instances)},
            )
        for instance in instances:
            product = Product(
                id=self._allocator.claim(EntityTable.PRODUCT, instance.id),
                work_order_id=self._work_order.id,
                item_number=source.item_number,
                name=instance.name,
                qty=1,
                length=source.length,
                width=source.width,
                status=PartStatus.PENDING,
            )
            self._uow.stage(product)
            self.statistics.converted_products += 1
            self._add_contents(source, product, parent=None, suffix=instance.suffix)

    def _add_contents(
        self,
        source: ImportProduct | ImportSubassembly,
        product: Product,
        parent: Subassembly | None,
        suffix: str,
    ) -> None:
        for part in source.parts:
            if self._is_selected(part.id, SelectionItemType.PART):
                self._add_part(
                    part,
                    suffix,
                    product_id=product.id,
                    subassembly_id=parent.id if parent is not None else None,
                )

        for sub in source.subassemblies:
            if self._is_selected(sub.id, SelectionItemType.SUBASSEMBLY):
                self._add_subassembly(sub, product, parent, suffix)

        for hardware in source.hardware:
            if self._is_selected(hardware.id, SelectionItemType.HARDWARE):
                if parent is None:
                    self._add_hardware(hardware, product_id=product.id)
                else:
                    self._add_hardware(hardware, subassembly_id=parent.id)

    def _add_subassembly(
        self,
        source: ImportSubassembly,
        product: Product,
        parent: Subassembly | None,
        suffix: str,
    ) -> None:
        for instance in expand(source.id, source.name, source.quantity, suffix):
            sub = Subassembly(
                id=self._allocator.claim(EntityTable.SUBASSEMBLY, instance.id),
                work_order_id=self._work_order.id,
                product_id=product.id,
                parent_subassembly_id=parent.id if parent is not None else None,
                name=instance.name,
                qty=1,
                length=source.length,
                width=source.width,
            )
            if parent is not None:
                parent.child_subassemblies.append(sub)
            self._uow.stage(sub)
            self.statistics.converted_subassemblies += 1
            self._add_contents(source, product, parent=sub, suffix=instance.suffix)

    # -- leaves ------------------------------------------------------------------------

    def _add_part(
        self,
        source: ImportPart,
        suffix: str,
        product_id: str | None,
        subassembly_id: str | None,
    ) -> None:
        part = Part(
            id=self._allocator.claim(EntityTable.PART, f"{source.id}{suffix}"),
            work_order_id=self._work_order.id,
            product_id=product_id,
            subassembly_id=subassembly_id,
            name=source.name,
            qty=source.quantity,
            length=source.length,
            width=source.width,
            thickness=source.thickness,
            material=source.material,
            edge_banding=source.edge_banding,
            status=PartStatus.PENDING,
            category=PartCategory.STANDARD,
            **edge_flags(source.edge_banding),
        )
        self._linker.link(part, source.id)
        self._uow.stage(part)
        self.parts.append(part)
        self.statistics.converted_parts += 1

    def _add_hardware(
        self,
        source: ImportHardware,
        product_id: str | None = None,
        subassembly_id: str | None = None,
    ) -> None:
        hardware = Hardware(
            id=self._allocator.generate(EntityTable.HARDWARE),
            source_hardware_id=source.id,
            work_order_id=self._work_order.id,
            product_id=product_id,
            subassembly_id=subassembly_id,
            name=source.name,
            qty=source.quantity,
            status=PartStatus.PENDING,
        )
        self._uow.stage(hardware)
        self.statistics.converted_hardware += 1

    def _add_detached_product(self, source: ImportDetachedProduct) -> None:
        instances = expand(source.id, source.name, source.quantity)
        if len(instances) > 1:
            logger.info(
                "detached_product_expanded",
                extra={"detached_product_id": source.id, "instances": len(instances)},
            )
        for instance in instances:
            self._add_detached_instance(source, instance.id, instance.name, instance.suffix)

    def _add_detached_instance(
        self,
        source: ImportDetachedProduct,
        instance_id: str,
        instance_name: str,
        suffix: str,
    ) -> None:
        flags = edge_flags(source.edge_banding)
        source_part_id = source.source_part_id or source.id
        detached = DetachedProduct(
            id=self._allocator.claim(EntityTable.DETACHED_PRODUCT, instance_id),
            work_order_id=self._work_order.id,
            item_number=source.item_number,
            name=instance_name,
            qty=1,
            length=source.length,
            width=source.width,
            thickness=source.thickness,
            material=source.material,
            source_part_id=source_part_id,
            status=PartStatus.PENDING,
            **flags,
        )
        self._uow.stage(detached)
        self.statistics.converted_detached_products += 1

        part = Part(
            id=self._allocator.claim(EntityTable.PART, f"{source_part_id}{suffix}"),
            work_order_id=self._work_order.id,
            detached_product_id=detached.id,
            name=source.name,
            qty=source.part_quantity,
            length=source.length,
            width=source.width,
            thickness=source.thickness,
            material=source.material,
            edge_banding=source.edge_banding,
            status=PartStatus.PENDING,
            category=PartCategory.STANDARD,
            **flags,
        )
        detached.parts.append(part)
        self._linker.link(part, source_part_id)
        self._uow.stage(part)
        self.parts.append(part)
        self.statistics.converted_parts += 1

    def _warn_unreached(self) -> None:
        for item_type, ids in self._selected.items():
            for item_id in sorted(ids - self._reached):
                message = (
                    f"Selected {item_type.value} '{item_id}' was skipped because "
                    "its parent was not selected"
                )
                logger.warning(
                    "selected_item_skipped",
                    extra={"item_id": item_id, "item_type": item_type.value},
                )
                self.warnings.append(message)
