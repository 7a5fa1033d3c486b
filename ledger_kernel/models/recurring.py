"""
Module: ledger_kernel.models.recurring
Responsibility: ORM persistence for recurring entry templates and their
    monthly occurrences.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ only.

Invariants enforced:
    - One occurrence per (template, period_month):
      UNIQUE(template_id, period_month) (uq_occurrence_template_month).
    - An occurrence never links both an income and an expense
      (ck_occurrence_single_record).
    - Occurrences are owned by their template: deleting the template deletes
      them (ORM cascade plus ON DELETE CASCADE).
    - Status changes follow domain.values.VALID_TRANSITIONS
      (mark_applied / mark_canceled).

Failure modes:
    - IntegrityError on a duplicate (template_id, period_month) insert.
    - ValueError from mark_applied / mark_canceled on a transition outside
      VALID_TRANSITIONS.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TimestampedBase, TrackedBase, UUIDString, enum_values
from ledger_kernel.domain.months import month_start
from ledger_kernel.domain.values import EntryKind, OccurrenceStatus, can_transition
from ledger_kernel.models.account import Account, Category


class RecurringEntryTemplate(TrackedBase):
    """
    User-authored monthly recurrence ("rent, 80,000, on the 5th").

    Contract:
        Every create/update goes through RecurringTemplateService, which
        validates the fields and then runs the synchronizer in the same
        transaction.

    Guarantees:
        - effective_from is NOT NULL and stored as the first of a month.
        - effective_to, when set, is the first of a month.

    Non-goals:
        - Sub-monthly schedules.
    """

    __tablename__ = "recurring_entry_templates"

    __table_args__ = (
        Index("idx_template_account", "account_id"),
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    category_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("categories.id"),
        nullable=False,
    )

    kind: Mapped[EntryKind] = mapped_column(
        Enum(EntryKind, native_enum=False, length=20, values_callable=enum_values),
        default=EntryKind.EXPENSE,
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)

    memo: Mapped[str | None] = mapped_column(Text, nullable=True)

    # 1-31; see domain.months.occurs_on for clamping
    day_of_month: Mapped[int] = mapped_column(Integer, nullable=False)

    use_end_of_month: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    effective_from: Mapped[date] = mapped_column(Date, nullable=False)

    # NULL = open-ended, bounded by the rolling horizon
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)

    account: Mapped[Account] = relationship()
    category: Mapped[Category] = relationship()

    occurrences: Mapped[list["RecurringEntryOccurrence"]] = relationship(
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RecurringEntryOccurrence.period_month",
    )

    def __repr__(self) -> str:
        return f"<RecurringEntryTemplate {self.title}: {self.kind.value} {self.amount}>"

    @property
    def is_open_ended(self) -> bool:
        return self.effective_to is None


class RecurringEntryOccurrence(TimestampedBase):
    """
    One month's instance of a template.

    Contract:
        Created, re-dated and pruned by the synchronizer; moved between
        scheduled/applied/canceled by the applier (and by the synchronizer's
        prune step for applied rows that fall out of range).

    Guarantees:
        - income_id / expense_id are set only while status is APPLIED, and
          at most one of them is set.
        - applied_at is set only while status is APPLIED.
    """

    __tablename__ = "recurring_entry_occurrences"

    __table_args__ = (
        UniqueConstraint("template_id", "period_month", name="uq_occurrence_template_month"),
        CheckConstraint(
            "income_id IS NULL OR expense_id IS NULL",
            name="ck_occurrence_single_record",
        ),
        Index("idx_occurrence_period_month", "period_month"),
        Index("idx_occurrence_status", "status"),
    )

    template_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("recurring_entry_templates.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Always the first of the month
    period_month: Mapped[date] = mapped_column(Date, nullable=False)

    occurs_on: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[OccurrenceStatus] = mapped_column(
        Enum(OccurrenceStatus, native_enum=False, length=20, values_callable=enum_values),
        default=OccurrenceStatus.SCHEDULED,
        nullable=False,
    )

    applied_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    income_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("incomes.id"),
        nullable=True,
    )

    expense_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("expenses.id"),
        nullable=True,
    )

    template: Mapped[RecurringEntryTemplate] = relationship(back_populates="occurrences")

    def __repr__(self) -> str:
        return f"<RecurringEntryOccurrence {self.period_month}: {self.status}>"

    @property
    def is_applied(self) -> bool:
        return self.status == OccurrenceStatus.APPLIED

    @property
    def ledger_record_id(self) -> UUID | None:
        """Id of the linked income or expense, if any."""
        return self.income_id or self.expense_id

    def mark_applied(self, kind: EntryKind, record_id: UUID, applied_at: datetime) -> None:
        """Link a freshly created ledger record and move to APPLIED.

        Note: Requires applied_at from an injected clock.
        """
        self._check_transition(OccurrenceStatus.APPLIED)
        self.status = OccurrenceStatus.APPLIED
        self.applied_at = applied_at
        self.income_id = record_id if kind == EntryKind.INCOME else None
        self.expense_id = record_id if kind == EntryKind.EXPENSE else None

    def mark_canceled(self) -> None:
        """Move to CANCELED and drop every link to the ledger.

        Does not touch the ledger record itself; the caller decides whether
        it is destroyed.
        """
        self._check_transition(OccurrenceStatus.CANCELED)
        self.status = OccurrenceStatus.CANCELED
        self.applied_at = None
        self.income_id = None
        self.expense_id = None

    def validate_dates(self) -> list[str]:
        """Row-level date rules. Empty when valid."""
        problems: list[str] = []
        if self.period_month is not None and self.period_month.day != 1:
            problems.append("period_month must be the first day of a month")
        if (
            self.period_month is not None
            and self.occurs_on is not None
            and month_start(self.occurs_on) != month_start(self.period_month)
        ):
            problems.append("occurs_on must fall in period_month")
        return problems

    def _check_transition(self, target: OccurrenceStatus) -> None:
        current = self.status or OccurrenceStatus.SCHEDULED
        if not can_transition(current, target):
            raise ValueError(
                f"Occurrence {self.id} cannot move from {OccurrenceStatus(current).value} "
                f"to {target.value}"
            )
