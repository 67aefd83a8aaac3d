"""
Module: shopfloor_kernel.models.nest_sheet
Responsibility: ORM persistence for nest sheets: the material sheets the
    upstream optimizer placed parts on.
Architecture position: Kernel > Models.

Invariants enforced:
    - At most one fallback sheet (barcode "DEFAULT") per work order; it is
      created only when a part has no placed sheet to go to.
    - barcode is not unique: the fallback barcode repeats across work orders.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from shopfloor_kernel.models.part import Part
    from shopfloor_kernel.models.work_order import WorkOrder


class NestSheet(TrackedBase):
    """A physical sheet of material that one or more parts are cut from."""

    __tablename__ = "nest_sheets"

    __table_args__ = (
        Index("idx_nest_sheet_work_order", "work_order_id"),
        Index("idx_nest_sheet_barcode", "barcode"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    work_order_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("work_orders.id"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    material: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    length: Mapped[Decimal | None] = mapped_column(nullable=True)
    width: Mapped[Decimal | None] = mapped_column(nullable=True)
    thickness: Mapped[Decimal | None] = mapped_column(nullable=True)

    barcode: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_date: Mapped[datetime] = mapped_column(nullable=False)

    is_processed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    processed_date: Mapped[datetime | None] = mapped_column(nullable=True)

    work_order: Mapped["WorkOrder"] = relationship(back_populates="nest_sheets")

    parts: Mapped[list["Part"]] = relationship(back_populates="nest_sheet")

    def __repr__(self) -> str:
        return f"<NestSheet {self.id}: {self.name} [{self.barcode}]>"
