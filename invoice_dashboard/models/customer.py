# invoice_dashboard/models/customer.py
import uuid

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from invoice_dashboard.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True)
    image_url = Column(String(255), nullable=False)

    invoices = relationship("Invoice", back_populates="customer", lazy="select")

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.name}')>"
