"""
Module: shopfloor_kernel.selectors.entity_selector
Responsibility: The persisted-store contract the import pipeline depends on:
    identifier existence checks across every entity table and work order
    lookups by id or name.
Architecture position: Kernel > Selectors.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy import func, select

from shopfloor_kernel.db.base import Base
from shopfloor_kernel.models import (
    DetachedProduct,
    Hardware,
    NestSheet,
    Part,
    Product,
    Subassembly,
    WorkOrder,
)
from shopfloor_kernel.selectors.base import BaseSelector


class EntityTable(str, Enum):
    """Tables whose identifiers must be unique across imports."""

    WORK_ORDER = "work_order"
    PRODUCT = "product"
    SUBASSEMBLY = "subassembly"
    PART = "part"
    HARDWARE = "hardware"
    DETACHED_PRODUCT = "detached_product"
    NEST_SHEET = "nest_sheet"


_MODEL_FOR_TABLE: dict[EntityTable, type[Base]] = {
    EntityTable.WORK_ORDER: WorkOrder,
    EntityTable.PRODUCT: Product,
    EntityTable.SUBASSEMBLY: Subassembly,
    EntityTable.PART: Part,
    EntityTable.HARDWARE: Hardware,
    EntityTable.DETACHED_PRODUCT: DetachedProduct,
    EntityTable.NEST_SHEET: NestSheet,
}


@dataclass(frozen=True)
class WorkOrderSummary:
    """Read-only view of a persisted work order."""

    id: str
    name: str
    imported_date: datetime | None
    is_archived: bool


class EntitySelector(BaseSelector[Base]):
    """Existence and work-order lookups against the persisted store."""

    def exists(self, table: EntityTable | str, entity_id: str) -> bool:
        """True if a row with this primary key is already persisted."""
        model = _MODEL_FOR_TABLE[EntityTable(table)]
        stmt = select(func.count()).select_from(model).where(model.id == entity_id)
        return self.session.scalar(stmt) > 0

    def find_work_order_by_id(self, work_order_id: str) -> WorkOrderSummary | None:
        row = self.session.get(WorkOrder, work_order_id)
        return _summarize(row) if row is not None else None

    def find_work_order_by_name(self, name: str) -> WorkOrderSummary | None:
        """First persisted work order with exactly this name (oldest import wins)."""
        stmt = (
            select(WorkOrder)
            .where(WorkOrder.name == name)
            .order_by(WorkOrder.imported_date)
            .limit(1)
        )
        row = self.session.scalars(stmt).first()
        return _summarize(row) if row is not None else None


def _summarize(row: WorkOrder) -> WorkOrderSummary:
    return WorkOrderSummary(
        id=row.id,
        name=row.name,
        imported_date=row.imported_date,
        is_archived=row.is_archived,
    )
