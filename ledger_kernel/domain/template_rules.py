"""
Template rules -- field validation and normalization for recurring templates.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  The template service looks up the
    category and hands its account/kind in; no ORM objects enter here.

Rules:
    - kind is income or expense.
    - title present, amount > 0.
    - day_of_month in 1-31; days past 28 only with use_end_of_month, so a
      fixed-day template never silently moves within a month.
    - effective_from present; effective_to not before effective_from.
    - category belongs to the template's account and has the template's kind.
"""

from dataclasses import replace
from uuid import UUID

from ledger_kernel.domain.dtos import TemplateDraft
from ledger_kernel.domain.months import month_start
from ledger_kernel.domain.values import EntryKind

MAX_FIXED_DAY = 28


def parse_kind(value: object) -> EntryKind | None:
    """``value`` as an EntryKind, or None if it names neither side."""
    try:
        return EntryKind(value)
    except ValueError:
        return None


def normalize_draft(draft: TemplateDraft) -> TemplateDraft:
    """Snap effective_from / effective_to to the first of their month and coerce kind.

    An unrecognized kind is left as given for ``template_problems`` to report.
    """
    return replace(
        draft,
        kind=parse_kind(draft.kind) or draft.kind,
        title=draft.title.strip() if draft.title else draft.title,
        effective_from=month_start(draft.effective_from) if draft.effective_from else None,
        effective_to=month_start(draft.effective_to) if draft.effective_to else None,
    )


def template_problems(
    draft: TemplateDraft,
    category_account_id: UUID | None,
    category_kind: EntryKind | None,
) -> list[dict[str, str]]:
    """Every rule ``draft`` breaks, as {"field", "message"} dicts.

    ``category_account_id``/``category_kind`` are None when the category
    does not exist.
    """
    errors: list[dict[str, str]] = []

    def add(field: str, message: str) -> None:
        errors.append({"field": field, "message": message})

    kind = parse_kind(draft.kind)
    if kind is None:
        add("kind", "must be income or expense")

    if not draft.title or not draft.title.strip():
        add("title", "is required")

    if draft.amount is None or draft.amount <= 0:
        add("amount", "must be greater than 0")

    if draft.day_of_month is None or not 1 <= draft.day_of_month <= 31:
        add("day_of_month", "must be between 1 and 31")
    elif draft.day_of_month > MAX_FIXED_DAY and not draft.use_end_of_month:
        add(
            "day_of_month",
            f"must be between 1 and {MAX_FIXED_DAY} unless use_end_of_month is set",
        )

    if draft.effective_from is None:
        add("effective_from", "is required")
    elif draft.effective_to is not None and draft.effective_to < draft.effective_from:
        add("effective_to", "must not be before effective_from")

    if category_account_id is None:
        add("category_id", "does not exist")
    else:
        if category_account_id != draft.account_id:
            add("category_id", "does not belong to the account")
        if kind is not None and category_kind is not None and EntryKind(category_kind) != kind:
            add("category_id", f"is not an {kind.value} category")

    return errors
