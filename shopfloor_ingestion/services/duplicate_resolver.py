"""
Duplicate resolver: checks a candidate work order id and name against the
persisted store and derives reimport alternates.

Suggested alternates are timestamp-suffixed from the injected Clock:
    id    WO100_20250701_093000
    name  Kitchen (Reimported 2025-07-01 09:30:00)
If an alternate is itself taken, a short random hex disambiguator is
appended.
"""

from __future__ import annotations

import secrets

from shopfloor_config.schema import DuplicateSettings
from shopfloor_ingestion.domain.types import DuplicateDetectionResult
from shopfloor_kernel.domain.clock import Clock
from shopfloor_kernel.logging_config import get_logger
from shopfloor_kernel.selectors.entity_selector import (
    EntitySelector,
    EntityTable,
    WorkOrderSummary,
)

logger = get_logger("ingestion.duplicate_resolver")


class DuplicateResolver:
    def __init__(
        self,
        selector: EntitySelector,
        clock: Clock,
        settings: DuplicateSettings | None = None,
    ):
        self._selector = selector
        self._clock = clock
        self._settings = settings or DuplicateSettings()

    def check(self, work_order_id: str, work_order_name: str) -> DuplicateDetectionResult:
        """Look up both fields; suggestions are filled only when something matches."""
        by_id = self._selector.find_work_order_by_id(work_order_id)
        by_name = self._selector.find_work_order_by_name(work_order_name)
        if by_id is None and by_name is None:
            return DuplicateDetectionResult(has_duplicates=False)

        messages: list[str] = []
        if by_id is not None:
            messages.append(
                f"Work order with ID '{work_order_id}' already exists "
                f"(imported as '{by_id.name}' on {_date(by_id)})"
            )
        if by_name is not None:
            messages.append(
                f"Work order with name '{work_order_name}' already exists "
                f"(ID: {by_name.id}, imported on {_date(by_name)})"
            )

        existing = by_id or by_name
        result = DuplicateDetectionResult(
            has_duplicates=True,
            id_conflict=by_id is not None,
            name_conflict=by_name is not None,
            duplicate_work_order_id=existing.id,
            duplicate_work_order_name=existing.name,
            existing_import_date=existing.imported_date,
            suggested_new_id=self.suggest_id(work_order_id),
            suggested_new_name=self.suggest_name(work_order_name),
            conflict_messages=tuple(messages),
        )
        logger.warning(
            "duplicate_work_order_detected",
            extra={
                "candidate_id": work_order_id,
                "candidate_name": work_order_name,
                "existing_id": existing.id,
                "id_conflict": result.id_conflict,
                "name_conflict": result.name_conflict,
                "suggested_new_id": result.suggested_new_id,
            },
        )
        return result

    def suggest_id(self, work_order_id: str) -> str:
        stamp = self._clock.now().strftime(self._settings.id_timestamp_format)
        candidate = f"{work_order_id}_{stamp}"
        if self._selector.exists(EntityTable.WORK_ORDER, candidate):
            candidate = f"{candidate}_{self._disambiguator()}"
        return candidate

    def suggest_name(self, work_order_name: str) -> str:
        stamp = self._clock.now().strftime(self._settings.name_timestamp_format)
        candidate = f"{work_order_name} (Reimported {stamp})"
        if self._selector.find_work_order_by_name(candidate) is not None:
            candidate = f"{work_order_name} (Reimported {stamp} - {self._disambiguator()})"
        return candidate

    def _disambiguator(self) -> str:
        length = self._settings.disambiguator_length
        return secrets.token_hex((length + 1) // 2)[:length]


def _date(summary: WorkOrderSummary) -> str:
    if summary.imported_date is None:
        return "unknown date"
    return summary.imported_date.strftime("%Y-%m-%d")
