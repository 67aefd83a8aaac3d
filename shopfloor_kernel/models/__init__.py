"""ORM models for the work order entity graph."""

from shopfloor_kernel.models.detached_product import DetachedProduct
from shopfloor_kernel.models.hardware import Hardware
from shopfloor_kernel.models.nest_sheet import NestSheet
from shopfloor_kernel.models.part import EDGE_SIDES, Part
from shopfloor_kernel.models.product import Product, Subassembly
from shopfloor_kernel.models.status import PartCategory, PartStatus
from shopfloor_kernel.models.work_order import WorkOrder

__all__ = [
    "WorkOrder",
    "Product",
    "Subassembly",
    "Part",
    "EDGE_SIDES",
    "Hardware",
    "DetachedProduct",
    "NestSheet",
    "PartStatus",
    "PartCategory",
]
