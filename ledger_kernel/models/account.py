"""
Module: ledger_kernel.models.account
Responsibility: Minimal persistence for the account/category collaborators
    that recurring templates and ledger records point at.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - Category names are unique per (account, kind).
    - A category has a kind (income or expense); templates and records must
      use a category of their own kind (checked by the template service).

Non-goals:
    - Membership, invitations and authorization live outside this package.
"""

from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TimestampedBase, UUIDString, enum_values
from ledger_kernel.domain.values import EntryKind


class Account(TimestampedBase):
    """A household or team ledger that owns categories, templates and records."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    categories: Mapped[list["Category"]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Account {self.name}>"


class Category(TimestampedBase):
    """Income or expense category within one account."""

    __tablename__ = "categories"

    __table_args__ = (
        UniqueConstraint("account_id", "kind", "name", name="uq_category_account_kind_name"),
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    kind: Mapped[EntryKind] = mapped_column(
        Enum(EntryKind, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    account: Mapped[Account] = relationship(back_populates="categories")

    def __repr__(self) -> str:
        return f"<Category {self.kind.value}:{self.name}>"
