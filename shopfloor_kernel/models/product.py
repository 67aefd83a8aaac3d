"""
Module: shopfloor_kernel.models.product
Responsibility: ORM persistence for products and their (recursively nested)
    subassemblies.
Architecture position: Kernel > Models.  May import from db/base.py and
    sibling models only.

Invariants enforced:
    - qty is 1 for every persisted product and subassembly: quantity is
      expanded into physical instances before insert.
    - Subassemblies keep the owning product instance in product_id at every
      nesting depth; parent_subassembly_id is set only below the top level.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor_kernel.db.base import TrackedBase
from shopfloor_kernel.models.status import PartStatus

if TYPE_CHECKING:
    from shopfloor_kernel.models.hardware import Hardware
    from shopfloor_kernel.models.part import Part
    from shopfloor_kernel.models.work_order import WorkOrder


class Product(TrackedBase):
    """A single physical product instance inside a work order."""

    __tablename__ = "products"

    __table_args__ = (
        Index("idx_product_work_order", "work_order_id"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    work_order_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("work_orders.id"),
        nullable=False,
    )

    # Item number as printed on the CAD export (e.g. "C-101")
    item_number: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    length: Mapped[Decimal | None] = mapped_column(nullable=True)
    width: Mapped[Decimal | None] = mapped_column(nullable=True)

    status: Mapped[PartStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PartStatus.PENDING,
    )

    work_order: Mapped["WorkOrder"] = relationship(back_populates="products")

    parts: Mapped[list["Part"]] = relationship(back_populates="product")

    subassemblies: Mapped[list["Subassembly"]] = relationship(
        back_populates="product",
    )

    hardware: Mapped[list["Hardware"]] = relationship(back_populates="product")

    def __repr__(self) -> str:
        return f"<Product {self.id}: {self.name}>"


class Subassembly(TrackedBase):
    """
    A subassembly instance, either directly under a product or nested under
    another subassembly.
    """

    __tablename__ = "subassemblies"

    __table_args__ = (
        Index("idx_subassembly_product", "product_id"),
        Index("idx_subassembly_parent", "parent_subassembly_id"),
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

    parent_subassembly_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("subassemblies.id"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    length: Mapped[Decimal | None] = mapped_column(nullable=True)
    width: Mapped[Decimal | None] = mapped_column(nullable=True)

    product: Mapped["Product | None"] = relationship(back_populates="subassemblies")

    parent_subassembly: Mapped["Subassembly | None"] = relationship(
        back_populates="child_subassemblies",
        remote_side="Subassembly.id",
    )

    child_subassemblies: Mapped[list["Subassembly"]] = relationship(
        back_populates="parent_subassembly",
    )

    parts: Mapped[list["Part"]] = relationship(back_populates="subassembly")

    hardware: Mapped[list["Hardware"]] = relationship(back_populates="subassembly")

    def __repr__(self) -> str:
        return f"<Subassembly {self.id}: {self.name}>"
