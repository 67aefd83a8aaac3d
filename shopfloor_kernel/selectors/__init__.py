"""Read-only selectors over the persisted work order graph."""

from shopfloor_kernel.selectors.base import BaseSelector
from shopfloor_kernel.selectors.entity_selector import (
    EntitySelector,
    EntityTable,
    WorkOrderSummary,
)

__all__ = ["BaseSelector", "EntitySelector", "EntityTable", "WorkOrderSummary"]
