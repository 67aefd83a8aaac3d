"""
Module: shopfloor_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel; every model file imports from here.  MUST NOT import from
    models/, selectors/ or the ingestion package.

Invariants enforced:
    - String primary keys: shop-floor entities keep the identifiers issued by
      the CAD export (``LinkID``), suffixed where quantity expansion or
      collision resolution requires it.  Each model declares its own ``id``.
    - Decimal dimensions: ``Decimal`` maps to Numeric(18, 4); millimetre
      dimensions never pass through float.
    - Audit timestamps: TrackedBase provides created_at / updated_at.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import DateTime, Integer, Numeric, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base for all shop-floor models.

    Guarantees:
        - Decimal maps to Numeric(18, 4).
        - datetime maps to DateTime(timezone=True).
        - int maps to Integer (quantities are small).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(18, 4),
        datetime: DateTime(timezone=True),
        int: Integer,
    }


class TrackedBase(Base):
    """
    Abstract base with audit timestamps.

    created_at is set by the server on INSERT; updated_at also refreshes on
    every UPDATE.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
