from invoice_dashboard.db.base import Base

# Import models so they register on Base.metadata
from .customer import Customer
from .invoice import Invoice, InvoiceStatus
from .user import User
from .revenue import Revenue

__all__ = [
    "Customer",
    "Invoice",
    "InvoiceStatus",
    "User",
    "Revenue",
    "Base",
]
