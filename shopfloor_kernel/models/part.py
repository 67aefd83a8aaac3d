"""
Module: shopfloor_kernel.models.part
Responsibility: ORM persistence for cut parts.
Architecture position: Kernel > Models.  May import from db/base.py and
    sibling models only.

Invariants enforced:
    - nest_sheet_id is NOT NULL: every part is attached to the sheet it was
      optimized onto, or to the work order's fallback sheet.
    - status starts PENDING; category starts STANDARD until categorized.
    - A part belongs to a product (and optionally one of its subassemblies)
      or to a detached product.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor_kernel.db.base import TrackedBase
from shopfloor_kernel.models.status import PartCategory, PartStatus

if TYPE_CHECKING:
    from shopfloor_kernel.models.detached_product import DetachedProduct
    from shopfloor_kernel.models.nest_sheet import NestSheet
    from shopfloor_kernel.models.product import Product, Subassembly

EDGE_SIDES = ("Top", "Bottom", "Left", "Right")


class Part(TrackedBase):
    """A single cut part tracked through cutting, sorting and assembly."""

    __tablename__ = "parts"

    __table_args__ = (
        Index("idx_part_work_order", "work_order_id"),
        Index("idx_part_nest_sheet", "nest_sheet_id"),
        Index("idx_part_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    work_order_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("work_orders.id"),
        nullable=False,
    )

    product_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("products.id"),
        nullable=True,
    )

    subassembly_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("subassemblies.id"),
        nullable=True,
    )

    detached_product_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("detached_products.id"),
        nullable=True,
    )

    nest_sheet_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("nest_sheets.id"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Millimetres
    length: Mapped[Decimal | None] = mapped_column(nullable=True)
    width: Mapped[Decimal | None] = mapped_column(nullable=True)
    thickness: Mapped[Decimal | None] = mapped_column(nullable=True)

    material: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # "Yes" when the side is banded, "" otherwise
    edgebanding_top: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    edgebanding_bottom: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    edgebanding_left: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    edgebanding_right: Mapped[str] = mapped_column(String(10), nullable=False, default="")

    # Compact side code, e.g. "Top,Left"
    edge_banding: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    status: Mapped[PartStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PartStatus.PENDING,
    )

    category: Mapped[PartCategory] = mapped_column(
        String(40),
        nullable=False,
        default=PartCategory.STANDARD,
    )

    product: Mapped["Product | None"] = relationship(back_populates="parts")

    subassembly: Mapped["Subassembly | None"] = relationship(back_populates="parts")

    detached_product: Mapped["DetachedProduct | None"] = relationship(
        back_populates="parts",
    )

    nest_sheet: Mapped["NestSheet"] = relationship(back_populates="parts")

    @property
    def banded_sides(self) -> tuple[str, ...]:
        """Sides whose edge-banding flag is set, in Top/Bottom/Left/Right order."""
        flags = (
            self.edgebanding_top,
            self.edgebanding_bottom,
            self.edgebanding_left,
            self.edgebanding_right,
        )
        return tuple(side for side, flag in zip(EDGE_SIDES, flags) if flag)

    def __repr__(self) -> str:
        return f"<Part {self.id}: {self.name}>"
