"""
Module: ledger_kernel.db.base
Responsibility: Declarative base classes for the SQLAlchemy ORM models of the
    external transaction store.  Provides the string primary key convention,
    the type annotation map for consistent column types, and the TrackedBase
    mixin for row timestamps.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the persistence adapter.  ALL model files import from here.  This
    module MUST NOT import from models/, services/, selectors/ or domain/.

Invariants enforced:
    - String primary keys: transaction and account identifiers are opaque
      strings owned by the external system; a uuid4 string is generated when
      the caller supplies none.
    - Decimal precision: type_annotation_map maps Python Decimal to
      Numeric(18, 2), the two-decimal currency precision of the engine.
      NEVER use float for monetary amounts.

Failure modes:
    - IntegrityError if a caller inserts a duplicate identifier.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar
from uuid import uuid4

from sqlalchemy import Date, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is a String(64); defaults to a uuid4 string.
        - Decimal maps to Numeric(18, 2) -- currency precision.
        - date maps to Date, datetime to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(18, 2),
        date: Date,
        datetime: DateTime(timezone=True),
    }

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=_new_id,
    )


class TrackedBase(Base):
    """
    Abstract base with row timestamps.

    Guarantees:
        - created_at is set to server NOW() on INSERT and never changes.
        - updated_at is set on INSERT and auto-updates on every UPDATE.
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
