"""
Module: ledger_kernel.models.ledger
Responsibility: The income and expense records of the general ledger -- the
    external collaborator the applier books occurrences into.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - amount > 0 (CHECK constraint on both tables).
    - account and category must exist (foreign keys).

Audit relevance:
    A record created by applying an occurrence is owned by that occurrence
    only while it stays applied.  Canceling the occurrence deletes the
    record; pruning an applied occurrence leaves the record in place.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import BigInteger, CheckConstraint, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TimestampedBase, UUIDString


class Income(TimestampedBase):
    """Money received."""

    __tablename__ = "incomes"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_income_amount_positive"),
        Index("idx_income_account_date", "account_id", "received_on"),
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    category_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("categories.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    received_on: Mapped[date] = mapped_column(Date, nullable=False)

    @property
    def transacted_on(self) -> date:
        return self.received_on

    def __repr__(self) -> str:
        return f"<Income {self.title} {self.amount} on {self.received_on}>"


class Expense(TimestampedBase):
    """Money spent."""

    __tablename__ = "expenses"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
        Index("idx_expense_account_date", "account_id", "spent_on"),
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    category_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("categories.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    spent_on: Mapped[date] = mapped_column(Date, nullable=False)

    @property
    def transacted_on(self) -> date:
        return self.spent_on

    def __repr__(self) -> str:
        return f"<Expense {self.title} {self.amount} on {self.spent_on}>"
