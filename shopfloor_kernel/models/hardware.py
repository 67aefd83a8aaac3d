"""
Module: shopfloor_kernel.models.hardware
Responsibility: ORM persistence for hardware line items (hinges, slides,
    fasteners) owned by a product or subassembly instance, or standalone
    on the work order.
Architecture position: Kernel > Models.

Invariants enforced:
    - id is generated (uuid4 string) because the same export hardware row is
      materialized once per product instance; source_hardware_id keeps the
      export's LinkID for traceability.
    - At most one of product_id and subassembly_id is set; hardware listed
      under a subassembly belongs to that subassembly only.
    - qty is the per-container quantity from the export and is never expanded.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor_kernel.db.base import TrackedBase
from shopfloor_kernel.models.status import PartStatus

if TYPE_CHECKING:
    from shopfloor_kernel.models.product import Product, Subassembly
    from shopfloor_kernel.models.work_order import WorkOrder


class Hardware(TrackedBase):
    __tablename__ = "hardware"

    __table_args__ = (
        Index("idx_hardware_work_order", "work_order_id"),
        Index("idx_hardware_source", "source_hardware_id"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    source_hardware_id: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )

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

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    status: Mapped[PartStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PartStatus.PENDING,
    )

    work_order: Mapped["WorkOrder"] = relationship(back_populates="hardware")

    product: Mapped["Product | None"] = relationship(back_populates="hardware")

    subassembly: Mapped["Subassembly | None"] = relationship(back_populates="hardware")

    def __repr__(self) -> str:
        return f"<Hardware {self.id} ({self.source_hardware_id}): {self.name} x{self.qty}>"
