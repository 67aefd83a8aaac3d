"""
Quantity expansion: one logical node with quantity N becomes N physical
instances of quantity 1.

Instance ids carry an accumulated suffix.  A product P1 with quantity 2
yields P1_1 and P1_2; a subassembly S1 (quantity 2) under P1_1 yields
S1_1_1 and S1_1_2; a part X under S1_1_2 becomes X_1_2.  Nodes with
quantity 1 add nothing to the suffix but still inherit their parent's.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Instance:
    """One physical instance of an expanded node."""

    index: int  # 1-based
    id: str
    name: str
    suffix: str  # Accumulated suffix passed to descendants


def instance_count(quantity: Any) -> int:
    """Number of physical instances for a declared quantity.

    Non-positive, missing and unparsable quantities count as a single unit.
    """
    if isinstance(quantity, bool):
        return 1
    try:
        count = int(quantity)
    except (TypeError, ValueError):
        return 1
    return count if count > 1 else 1


def expand(
    base_id: str,
    name: str,
    quantity: Any,
    inherited_suffix: str = "",
) -> list[Instance]:
    """Expand one node into its physical instances."""
    count = instance_count(quantity)
    if count == 1:
        return [Instance(1, f"{base_id}{inherited_suffix}", name, inherited_suffix)]

    instances = []
    for i in range(1, count + 1):
        suffix = f"{inherited_suffix}_{i}"
        instances.append(
            Instance(i, f"{base_id}{suffix}", f"{name} (Instance {i})", suffix)
        )
    return instances
