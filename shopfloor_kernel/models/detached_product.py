"""
Module: shopfloor_kernel.models.detached_product
Responsibility: ORM persistence for detached products: products that ship
    as a single loose part (a filler strip, a panel) rather than an assembly.
Architecture position: Kernel > Models.

Invariants enforced:
    - qty is 1: a declared quantity N is expanded into N detached products.
    - Each detached product owns exactly one companion Part, whose id is the
      export's physical part LinkID (source_part_id) plus the instance suffix,
      so label scans resolve.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor_kernel.db.base import TrackedBase
from shopfloor_kernel.models.status import PartStatus

if TYPE_CHECKING:
    from shopfloor_kernel.models.part import Part
    from shopfloor_kernel.models.work_order import WorkOrder


class DetachedProduct(TrackedBase):
    __tablename__ = "detached_products"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    work_order_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("work_orders.id"),
        nullable=False,
    )

    item_number: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    length: Mapped[Decimal | None] = mapped_column(nullable=True)
    width: Mapped[Decimal | None] = mapped_column(nullable=True)
    thickness: Mapped[Decimal | None] = mapped_column(nullable=True)

    material: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    edgebanding_top: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    edgebanding_bottom: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    edgebanding_left: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    edgebanding_right: Mapped[str] = mapped_column(String(10), nullable=False, default="")

    # Export LinkID of the single physical part
    source_part_id: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    status: Mapped[PartStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PartStatus.PENDING,
    )

    work_order: Mapped["WorkOrder"] = relationship(back_populates="detached_products")

    parts: Mapped[list["Part"]] = relationship(back_populates="detached_product")

    def __repr__(self) -> str:
        return f"<DetachedProduct {self.id}: {self.name}>"
