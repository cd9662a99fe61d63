# invoice_dashboard/models/revenue.py
from sqlalchemy import Column, Integer, String

from invoice_dashboard.db.base import Base


class Revenue(Base):
    __tablename__ = "revenue"

    month = Column(String(4), primary_key=True)
    revenue = Column(Integer, nullable=False)
