"""
Module: shopfloor_kernel.models.work_order
Responsibility: ORM persistence for the Work Order root of every import.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Work order id and name are unique among persisted work orders unless an
      import explicitly allows duplicates, in which case the import rewrites
      both to generated unique variants before insert.  The name is not
      constrained at the database level; the duplicate check owns it.
    - Every child collection is owned through ``work_order_id``; deleting a
      work order cascades to its products, hardware, detached products and
      nest sheets.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopfloor_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from shopfloor_kernel.models.detached_product import DetachedProduct
    from shopfloor_kernel.models.hardware import Hardware
    from shopfloor_kernel.models.nest_sheet import NestSheet
    from shopfloor_kernel.models.product import Product


class WorkOrder(TrackedBase):
    """
    Top-level unit of shop work created by one import commit.

    Guarantees:
        - id is the export's work order LinkID (or its reimport variant).
        - imported_date is stamped from the import's Clock.
        - is_archived starts False.
    """

    __tablename__ = "work_orders"

    __table_args__ = (
        Index("idx_work_order_name", "name"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    imported_date: Mapped[datetime] = mapped_column(nullable=False)

    is_archived: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    archived_date: Mapped[datetime | None] = mapped_column(nullable=True)

    products: Mapped[list["Product"]] = relationship(
        back_populates="work_order",
        cascade="all",
    )

    hardware: Mapped[list["Hardware"]] = relationship(
        back_populates="work_order",
        cascade="all",
    )

    detached_products: Mapped[list["DetachedProduct"]] = relationship(
        back_populates="work_order",
        cascade="all",
    )

    nest_sheets: Mapped[list["NestSheet"]] = relationship(
        back_populates="work_order",
        cascade="all",
        order_by="NestSheet.created_date",
    )

    def __repr__(self) -> str:
        return f"<WorkOrder {self.id}: {self.name}>"
