# invoice_dashboard/core/errors.py
"""
Error taxonomy of the dashboard core.

Repositories and services raise these exceptions; the form actions turn
them into caller-facing state. Validation failures carry per-field
messages so a form can render them next to each input.
"""

from typing import Dict, List, Optional


class DashboardError(Exception):
    """Base class for every failure raised by the dashboard core."""
    pass


class ValidationError(DashboardError):
    """Bad input shape or range, attributed to fields."""

    def __init__(self, field_errors: Dict[str, List[str]], message: str = "Invalid fields."):
        super().__init__(message)
        self.field_errors = field_errors
        self.message = message


class NotFoundError(DashboardError):
    """An id has no matching row."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} '{entity_id}' not found.")
        self.entity = entity
        self.entity_id = entity_id


class UniqueConstraintError(DashboardError):
    """A unique key would be duplicated."""

    def __init__(self, field: str, value: Optional[str] = None):
        if value is None:
            super().__init__(f"Duplicate {field}.")
        else:
            super().__init__(f"{field} '{value}' is already in use.")
        self.field = field
        self.value = value


class ForeignKeyViolationError(DashboardError):
    """A referenced row is missing, or a referenced row would be orphaned."""
    pass


class CustomerHasInvoicesError(ForeignKeyViolationError):
    """A customer still owns invoices and cannot be deleted."""

    def __init__(self, customer_id: str, invoice_count: int):
        super().__init__(
            f"Customer '{customer_id}' still has {invoice_count} invoice(s)."
        )
        self.customer_id = customer_id
        self.invoice_count = invoice_count


class InvalidCredentialsError(DashboardError):
    """Sign-in check failed. Carries no detail on which part failed."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Invalid credentials.")


class StoreUnavailableError(DashboardError):
    """The backing store could not be reached."""
    pass


class StoreError(DashboardError):
    """The store rejected a statement, for example a value out of range for its column."""
    pass
