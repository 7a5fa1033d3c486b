"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the recurring engine (an API layer, a batch job, tests) need to
tell "the template is malformed" apart from "another request created that
month first" without parsing messages.  Every error therefore:
  1. Has its own class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example:
    try:
        synchronizer.synchronize(template)
    except OccurrenceConflictError as e:
        retry_later(template_id=e.template_id)
    except ValidationError as e:
        api_response(code=e.code, errors=getattr(e, "field_errors", []))

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LedgerKernelError:

    LedgerKernelError (base)
    |
    +-- ValidationError
    |   +-- MissingEffectiveFromError
    |   +-- TemplateValidationError
    |
    +-- ApplierError
    |   +-- OccurrenceRequiredError
    |   +-- ActorRequiredError
    |
    +-- LedgerRecordError
    |
    +-- ConflictError
    |   +-- OccurrenceConflictError
    |
    +-- NotFoundError
    |   +-- TemplateNotFoundError
    |   +-- OccurrenceNotFoundError
    |
    +-- InvalidOccurrenceTransitionError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|-------------------------------------
Validation      | MISSING_EFFECTIVE_FROM        | Template has no effective_from
                | TEMPLATE_INVALID              | Template fields fail validation
----------------|-------------------------------|-------------------------------------
Applier         | OCCURRENCE_REQUIRED           | apply/cancel called without occurrence
                | ACTOR_REQUIRED                | apply called without acting user
----------------|-------------------------------|-------------------------------------
Ledger record   | LEDGER_RECORD_INVALID         | Income/expense could not be persisted
----------------|-------------------------------|-------------------------------------
Conflict        | OCCURRENCE_CONFLICT           | Duplicate (template, period_month)
----------------|-------------------------------|-------------------------------------
Not found       | TEMPLATE_NOT_FOUND            | Template id doesn't exist
                | OCCURRENCE_NOT_FOUND          | Occurrence id doesn't exist
----------------|-------------------------------|-------------------------------------
State machine   | INVALID_OCCURRENCE_TRANSITION | Status change not in the transition map

===============================================================================
HANDLING PATTERNS
===============================================================================

1. ConflictError is retryable: the unit of work was rolled back in full and
   the same call can simply be repeated.

2. ApplierError and ValidationError are caller mistakes: nothing was written.

3. LedgerRecordError means the ledger collaborator rejected the record; the
   occurrence is left exactly as it was before apply().
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Validation exceptions


class ValidationError(LedgerKernelError):
    """Base exception for invalid input to the recurring engine."""

    code: str = "VALIDATION_ERROR"


class MissingEffectiveFromError(ValidationError):
    """Template cannot be synchronized without an effective_from month."""

    code: str = "MISSING_EFFECTIVE_FROM"

    def __init__(self, template_id: str | None):
        self.template_id = template_id
        super().__init__(f"effective_from is required (template {template_id})")


class TemplateValidationError(ValidationError):
    """
    One or more template fields are invalid.

    field_errors is a list of {"field": ..., "message": ...} dicts so that
    an API layer can map each problem back to a form input.
    """

    code: str = "TEMPLATE_INVALID"

    def __init__(self, field_errors: list[dict[str, str]]):
        self.field_errors = field_errors
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in field_errors)
        super().__init__(f"Invalid recurring template: {summary}")


# Applier exceptions


class ApplierError(LedgerKernelError):
    """Base exception for apply/cancel precondition failures."""

    code: str = "APPLIER_ERROR"


class OccurrenceRequiredError(ApplierError):
    """apply() or cancel() was called without an occurrence."""

    code: str = "OCCURRENCE_REQUIRED"

    def __init__(self) -> None:
        super().__init__("occurrence is required")


class ActorRequiredError(ApplierError):
    """apply() was called without the acting user."""

    code: str = "ACTOR_REQUIRED"

    def __init__(self, occurrence_id: str | None):
        self.occurrence_id = occurrence_id
        super().__init__(f"user is required to apply occurrence {occurrence_id}")


# Ledger record exceptions


class LedgerRecordError(LedgerKernelError):
    """The income/expense record built for an occurrence could not be saved."""

    code: str = "LEDGER_RECORD_INVALID"

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot persist {kind} record: {reason}")


# Conflict exceptions


class ConflictError(LedgerKernelError):
    """Base exception for storage-level conflicts. Safe to retry."""

    code: str = "CONFLICT"


class OccurrenceConflictError(ConflictError):
    """
    Another writer created an occurrence for the same (template, month).

    Raised when the UNIQUE(template_id, period_month) constraint rejects an
    insert.  The synchronize call that hit it has been rolled back in full.
    """

    code: str = "OCCURRENCE_CONFLICT"

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(
            f"Concurrent occurrence write for template {template_id}; retry synchronize"
        )


# Lookup exceptions


class NotFoundError(LedgerKernelError):
    """Base exception for missing entities."""

    code: str = "NOT_FOUND"


class TemplateNotFoundError(NotFoundError):
    """Recurring template with given ID was not found."""

    code: str = "TEMPLATE_NOT_FOUND"

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Recurring template not found: {template_id}")


class OccurrenceNotFoundError(NotFoundError):
    """Occurrence with given ID was not found."""

    code: str = "OCCURRENCE_NOT_FOUND"

    def __init__(self, occurrence_id: str):
        self.occurrence_id = occurrence_id
        super().__init__(f"Occurrence not found: {occurrence_id}")


# State machine exceptions


class InvalidOccurrenceTransitionError(LedgerKernelError):
    """Requested status change is not allowed by the occurrence state machine."""

    code: str = "INVALID_OCCURRENCE_TRANSITION"

    def __init__(self, occurrence_id: str, from_status: str, to_status: str):
        self.occurrence_id = occurrence_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Occurrence {occurrence_id} cannot move from {from_status} to {to_status}"
        )
