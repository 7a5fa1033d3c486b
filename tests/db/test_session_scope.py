"""
session_scope(): commit on success, roll back and re-raise on failure.

The module-level session factory is pointed at a connection holding an
outer transaction, so whatever session_scope commits is still undone at
teardown.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from ledger_kernel.db import engine as engine_module
from ledger_kernel.db.engine import session_scope
from ledger_kernel.models.account import Account


@pytest.fixture
def connection(db_tables, db_engine, monkeypatch):
    conn = db_engine.connect()
    trans = conn.begin()
    monkeypatch.setattr(
        engine_module,
        "_SessionFactory",
        sessionmaker(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False),
    )
    yield conn
    trans.rollback()
    conn.close()


def _accounts_named(conn, name: str) -> int:
    with Session(bind=conn, join_transaction_mode="create_savepoint") as check:
        return check.execute(
            select(func.count()).select_from(Account).where(Account.name == name)
        ).scalar_one()


class TestSessionScope:
    def test_commits_on_success(self, connection):
        with session_scope() as session:
            session.add(Account(name="Household"))

        assert _accounts_named(connection, "Household") == 1

    def test_rolls_back_and_reraises(self, connection, captured_logs):
        with pytest.raises(RuntimeError, match="abandoned"):
            with session_scope() as session:
                session.add(Account(name="Scratch"))
                session.flush()
                raise RuntimeError("abandoned")

        assert _accounts_named(connection, "Scratch") == 0
        rolled_back = [r for r in captured_logs() if r["message"] == "transaction_rolled_back"]
        assert len(rolled_back) == 1
        assert rolled_back[0]["exc_type"] == "RuntimeError"

    def test_session_closed_afterwards(self, connection):
        with session_scope() as session:
            session.add(Account(name="Closed"))

        assert not session.in_transaction()
        assert list(session) == []
