# invoice_dashboard/models/user.py
"""
Auth principal. Provisioned outside the request path; read-only here.
"""
from sqlalchemy import Column, String

from invoice_dashboard.db.base import Base
from invoice_dashboard.models.customer import new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
