# invoice_dashboard/schemas/revenue.py
from pydantic import BaseModel, ConfigDict


class RevenueSample(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    revenue: int
