# invoice_dashboard/schemas/customer.py
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from invoice_dashboard.utils.money import to_display


class CustomerForm(BaseModel):
    """Create/update payload. The id is never part of the payload."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    email: EmailStr
    image_url: str = Field(..., min_length=1, validation_alias=AliasChoices("image_url", "imageUrl"))


class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    image_url: str


class CustomerField(BaseModel):
    """id/name pair for selection controls."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class CustomerSummary(BaseModel):
    """Customer plus invoice totals in cents. Derived on every query, never stored."""
    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int = 0
    total_pending: int = 0
    total_paid: int = 0

    @property
    def total_pending_display(self) -> str:
        return to_display(self.total_pending)

    @property
    def total_paid_display(self) -> str:
        return to_display(self.total_paid)
