# invoice_dashboard/schemas/invoice.py
import datetime as dt
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from invoice_dashboard.models.invoice import InvoiceStatus
from invoice_dashboard.utils.money import MAX_CENTS, to_cents, to_display, to_major


class InvoiceForm(BaseModel):
    """
    Create/update payload. `amount` is in major units (dollars); the date
    is not part of the payload, it is set once at creation.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_id: str = Field(..., min_length=1, validation_alias=AliasChoices("customer_id", "customerId"))
    amount: Decimal = Field(..., gt=0, le=to_major(MAX_CENTS))
    status: InvoiceStatus

    @field_validator("amount")
    @classmethod
    def at_least_one_cent(cls, v: Decimal) -> Decimal:
        if to_cents(v) < 1:
            raise ValueError("amount rounds to zero cents")
        return v


class InvoiceRead(BaseModel):
    """Stored invoice; amount in cents."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_id: str
    amount: int
    status: InvoiceStatus
    date: dt.date


class InvoiceDetail(BaseModel):
    """Invoice as loaded into an edit form; amount back in major units."""
    id: str
    customer_id: str
    amount: Decimal
    status: InvoiceStatus


class InvoiceCustomer(BaseModel):
    name: str
    email: str
    image_url: str


class LatestInvoice(BaseModel):
    id: str
    amount: str  # pre-formatted, e.g. "$1,500.00"
    customer: InvoiceCustomer


class InvoiceRow(BaseModel):
    """One row of the filtered invoices table."""
    id: str
    amount: int
    date: dt.date
    status: InvoiceStatus
    customer: InvoiceCustomer

    @property
    def amount_display(self) -> str:
        return to_display(self.amount)


class CardSummary(BaseModel):
    """Dashboard cards. Totals are over every invoice, not the filtered set."""
    invoice_count: int
    customer_count: int
    total_paid: int
    total_pending: int

    @property
    def total_paid_display(self) -> str:
        return to_display(self.total_paid)

    @property
    def total_pending_display(self) -> str:
        return to_display(self.total_pending)
