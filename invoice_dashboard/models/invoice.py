# invoice_dashboard/models/invoice.py
import enum

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from invoice_dashboard.db.base import Base
from invoice_dashboard.models.customer import new_id


class InvoiceStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    # Always integer cents
    amount = Column(Integer, nullable=False)
    # Plain string column so the raw-SQL backends compare the same text
    status = Column(String(16), nullable=False)
    date = Column(Date, nullable=False)

    customer = relationship("Customer", back_populates="invoices", lazy="joined")

    __table_args__ = (
        Index("ix_invoices_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, amount={self.amount}, status='{self.status}')>"
