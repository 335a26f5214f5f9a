"""
Module: ledger_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors over the
    external transaction store.
Architecture position: Kernel > Selectors.  May import from db/base.py,
    models/ and domain/ (to return domain snapshots).

Invariants enforced:
    - Read-only access: Selectors accept a Session from the caller but MUST NOT
      call session.add(), session.delete(), session.commit(), or session.flush().
    - Snapshot return convention: Selectors return frozen domain values, NOT
      ORM model instances.
    - Session ownership: the caller owns the session and its transaction scope.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return domain values.  They MUST NOT mutate any data.
    """

    def __init__(self, session: Session):
        self.session = session
