"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write-side service.  Services flush within the caller's
    transaction and never commit.

Invariants enforced:
    Transaction boundaries -- services never call ``session.commit()`` or
    ``session.rollback()`` on the outer transaction.  Operations that must be
    all-or-nothing (synchronize, apply, cancel) run inside
    ``session.begin_nested()`` so a failure rolls back only their own
    SAVEPOINT and leaves the caller's transaction as it was.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide read-model queries -- those belong in
          ``ledger_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
