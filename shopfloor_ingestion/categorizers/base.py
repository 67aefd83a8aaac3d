"""
PartCategorizer protocol and the default implementation.

Categorization rules (doors, drawer fronts, adjustable shelves, ...) live
outside this package.  The converter calls ``categorize`` exactly once per
persisted part, after the part's id and nest sheet are final and before the
import commits.  Until then every part carries PartCategory.STANDARD.
"""

from __future__ import annotations

from typing import Protocol

from shopfloor_kernel.models import Part, PartCategory


class PartCategorizer(Protocol):
    """Assigns a routing category to a built part."""

    def categorize(self, part: Part) -> PartCategory:
        """Return the part's category. Must not mutate the part."""
        ...


class DefaultCategorizer:
    """Leaves every part in the standard category."""

    def categorize(self, part: Part) -> PartCategory:
        return PartCategory.STANDARD
