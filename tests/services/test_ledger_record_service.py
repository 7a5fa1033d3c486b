"""Ledger collaborator: building, persisting and destroying income/expense records."""

from dataclasses import replace
from datetime import date
from uuid import uuid4

import pytest

from ledger_kernel.domain.ledger_record import LedgerRecordSpec
from ledger_kernel.domain.values import EntryKind
from ledger_kernel.exceptions import LedgerRecordError
from ledger_kernel.models.ledger import Expense, Income
from ledger_kernel.services.ledger_record_service import (
    LedgerRecordService,
    build_ledger_record,
    record_model_for,
)


@pytest.fixture
def service(session) -> LedgerRecordService:
    return LedgerRecordService(session)


@pytest.fixture
def expense_spec(account, expense_category, test_actor_id) -> LedgerRecordSpec:
    return LedgerRecordSpec(
        kind=EntryKind.EXPENSE,
        account_id=account.id,
        category_id=expense_category.id,
        user_id=test_actor_id,
        title="Groceries",
        amount=12_000,
        memo=None,
        transacted_on=date(2025, 3, 4),
    )


class TestBuildLedgerRecord:
    def test_expense_spec_builds_expense(self, expense_spec):
        record = build_ledger_record(expense_spec)
        assert isinstance(record, Expense)
        assert record.spent_on == date(2025, 3, 4)
        assert record.transacted_on == date(2025, 3, 4)

    def test_income_spec_builds_income(self, expense_spec):
        record = build_ledger_record(replace(expense_spec, kind=EntryKind.INCOME))
        assert isinstance(record, Income)
        assert record.received_on == date(2025, 3, 4)

    def test_record_model_for(self):
        assert record_model_for(EntryKind.INCOME) is Income
        assert record_model_for("expense") is Expense


class TestLedgerRecordService:
    def test_create_and_get(self, service, expense_spec):
        record = service.create(expense_spec)

        assert service.get(EntryKind.EXPENSE, record.id) is record
        assert service.get(EntryKind.INCOME, record.id) is None

    def test_invalid_spec_rejected_before_insert(self, service, expense_spec):
        with pytest.raises(LedgerRecordError) as exc_info:
            service.create(replace(expense_spec, amount=0, title=""))

        assert exc_info.value.code == "LEDGER_RECORD_INVALID"
        assert "amount" in exc_info.value.reason
        assert "title" in exc_info.value.reason

    def test_database_rejection_is_typed(self, session, service, expense_spec):
        with pytest.raises(LedgerRecordError):
            with session.begin_nested():
                service.create(replace(expense_spec, category_id=uuid4()))

    def test_destroy(self, session, service, expense_spec):
        record = service.create(expense_spec)

        assert service.destroy(EntryKind.EXPENSE, record.id) is True
        assert session.get(Expense, record.id) is None

    def test_destroy_missing_record(self, service, captured_logs):
        assert service.destroy(EntryKind.INCOME, uuid4()) is False
        assert any(r["message"] == "ledger_record_missing" for r in captured_logs())
