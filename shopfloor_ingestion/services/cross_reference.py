"""
Cross-reference resolver: attaches parts to the nest sheets they were
optimized onto.

OPTIMIZATIONRESULTS rows pair a part LinkID with a sheet LinkID, one row per
placed unit, so a part may map to several sheets.  Each physical instance of
a part consumes the next sheet in row order; once the list is exhausted the
last sheet is reused.

A part with no placement (or whose sheet was not imported) goes to the work
order's first nest sheet.  When the work order has none, a single fallback
sheet is created on first use and shared by every later orphan.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable

from shopfloor_config.schema import DefaultNestSheetSettings
from shopfloor_ingestion.domain.types import Row, TableType
from shopfloor_ingestion.mapping.field_resolver import FieldResolver
from shopfloor_ingestion.services.identifier_allocator import IdentifierAllocator
from shopfloor_kernel.domain.clock import Clock
from shopfloor_kernel.logging_config import get_logger
from shopfloor_kernel.models import NestSheet, Part
from shopfloor_kernel.selectors.entity_selector import EntityTable

logger = get_logger("ingestion.cross_reference")


def build_placement_map(
    rows: Iterable[Row], resolver: FieldResolver
) -> dict[str, list[str]]:
    """Part LinkID -> sheet LinkIDs, in row order.  Incomplete rows are skipped."""
    placements: dict[str, list[str]] = defaultdict(list)
    skipped = 0
    for row in rows:
        part_id = resolver.get_string(row, TableType.OPTIMIZATIONRESULTS, "PartId")
        sheet_id = resolver.get_string(row, TableType.OPTIMIZATIONRESULTS, "SheetId")
        if not part_id or not sheet_id:
            skipped += 1
            continue
        placements[part_id].append(sheet_id)
    if skipped:
        logger.debug("placement_rows_skipped", extra={"skipped": skipped})
    return dict(placements)


class NestSheetLinker:
    """Per-conversion part -> sheet assignment for one work order."""

    def __init__(
        self,
        work_order_id: str,
        placements: dict[str, list[str]],
        allocator: IdentifierAllocator,
        clock: Clock,
        defaults: DefaultNestSheetSettings,
        on_sheet_created: Callable[[NestSheet], None],
    ):
        self._work_order_id = work_order_id
        self._placements = placements
        self._allocator = allocator
        self._clock = clock
        self._defaults = defaults
        self._on_sheet_created = on_sheet_created
        self._sheets: list[NestSheet] = []
        self._by_source_id: dict[str, NestSheet] = {}
        self._consumed: dict[str, int] = defaultdict(int)
        self._default_sheet: NestSheet | None = None

    @property
    def default_sheet(self) -> NestSheet | None:
        return self._default_sheet

    def register(self, source_id: str, sheet: NestSheet) -> None:
        """Record a materialized sheet under its export LinkID."""
        self._sheets.append(sheet)
        self._by_source_id[source_id] = sheet

    def link(self, part: Part, source_part_id: str) -> NestSheet:
        """Attach ``part`` to its sheet and return the sheet."""
        sheet = self._placed_sheet(source_part_id) or self._fallback_sheet()
        part.nest_sheet_id = sheet.id
        sheet.parts.append(part)
        return sheet

    def _placed_sheet(self, source_part_id: str) -> NestSheet | None:
        sheet_ids = self._placements.get(source_part_id)
        if not sheet_ids:
            return None
        position = min(self._consumed[source_part_id], len(sheet_ids) - 1)
        self._consumed[source_part_id] += 1
        sheet = self._by_source_id.get(sheet_ids[position])
        if sheet is None:
            logger.debug(
                "placed_sheet_not_imported",
                extra={"part_id": source_part_id, "sheet_id": sheet_ids[position]},
            )
        return sheet

    def _fallback_sheet(self) -> NestSheet:
        if self._sheets:
            return self._sheets[0]

        sheet = NestSheet(
            id=self._allocator.generate(EntityTable.NEST_SHEET),
            work_order_id=self._work_order_id,
            name=self._defaults.name,
            material=self._defaults.material,
            barcode=self._defaults.barcode,
            created_date=self._clock.now(),
            is_processed=False,
        )
        self._sheets.append(sheet)
        self._default_sheet = sheet
        logger.info(
            "default_nest_sheet_created",
            extra={"nest_sheet_id": sheet.id, "barcode": sheet.barcode},
        )
        self._on_sheet_created(sheet)
        return sheet
