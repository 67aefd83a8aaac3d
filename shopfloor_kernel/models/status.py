"""Workflow status and part category enumerations shared by the models."""

from enum import Enum


class PartStatus(str, Enum):
    """Shop-floor workflow status.

    Contract: Every imported entity starts PENDING and moves forward through
    CUT -> SORTED -> ASSEMBLED -> SHIPPED outside this package.
    """

    PENDING = "Pending"
    CUT = "Cut"
    SORTED = "Sorted"
    ASSEMBLED = "Assembled"
    SHIPPED = "Shipped"


class PartCategory(str, Enum):
    """Routing category assigned to a part after import.

    STANDARD doubles as the "not yet categorized" sentinel.
    """

    STANDARD = "Standard"
    DOORS_AND_DRAWER_FRONTS = "DoorsAndDrawerFronts"
    ADJUSTABLE_SHELVES = "AdjustableShelves"
    HARDWARE = "Hardware"
