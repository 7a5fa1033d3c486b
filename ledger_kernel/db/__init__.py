"""Database layer - engine, sessions, base classes."""

from ledger_kernel.db.base import UUID, Base, TimestampedBase, TrackedBase, UUIDString
from ledger_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "Base",
    "TimestampedBase",
    "TrackedBase",
    "UUIDString",
    "UUID",
]
