# invoice_dashboard/services/aggregation.py
"""
Per-customer invoice totals.

One grouped pass over customers LEFT JOIN invoices, grouped by customer id:

    total_invoices = COUNT(invoices.id)
    total_pending  = SUM(amount WHERE status = 'pending'), 0 when none
    total_paid     = SUM(amount WHERE status = 'paid'),    0 when none

The left join keeps customers that have no invoices; their three totals are
zero-filled. The same aggregation is available as ORM expressions, as a SQL
fragment for the raw-SQL backends, and in memory for rows already loaded.
"""

from collections import OrderedDict
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import case, func

from invoice_dashboard.models.customer import Customer
from invoice_dashboard.models.invoice import Invoice, InvoiceStatus
from invoice_dashboard.schemas.customer import CustomerSummary
from invoice_dashboard.utils.pagination import PageWindow
from invoice_dashboard.utils.search import SearchFilter

# Columns selected alongside the customer columns, in this order
TOTALS_SQL = (
    "COUNT(i.id) AS total_invoices, "
    "COALESCE(SUM(CASE WHEN i.status = 'pending' THEN i.amount ELSE 0 END), 0) AS total_pending, "
    "COALESCE(SUM(CASE WHEN i.status = 'paid' THEN i.amount ELSE 0 END), 0) AS total_paid"
)


def _sum_for(status: InvoiceStatus):
    return func.coalesce(
        func.sum(case((Invoice.status == status.value, Invoice.amount), else_=0)), 0
    )


def totals_columns():
    """ORM column expressions for the three aggregates."""
    return (
        func.count(Invoice.id).label("total_invoices"),
        _sum_for(InvoiceStatus.pending).label("total_pending"),
        _sum_for(InvoiceStatus.paid).label("total_paid"),
    )


def customer_group_by():
    return (Customer.id, Customer.name, Customer.email, Customer.image_url)


def summary_from_row(row: Mapping[str, Any]) -> CustomerSummary:
    """Maps one grouped row to a CustomerSummary, zero-filling NULL aggregates."""
    return CustomerSummary(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        image_url=row["image_url"],
        total_invoices=int(row["total_invoices"] or 0),
        total_pending=int(row["total_pending"] or 0),
        total_paid=int(row["total_paid"] or 0),
    )


def aggregate_in_memory(
    customers: Iterable[Mapping[str, Any]],
    invoices: Iterable[Mapping[str, Any]],
    search: Optional[SearchFilter] = None,
    window: Optional[PageWindow] = None,
) -> List[CustomerSummary]:
    """
    Same result as the grouped query, computed over already-loaded rows.

    No service reads through this; it is the reference the grouped ORM and
    SQL queries are checked against.

    Args:
        customers: mappings with id, name, email, image_url
        invoices: mappings with id, customer_id, amount, status

    Returns:
        Summaries of matching customers, by name ascending then id
    """
    search = search or SearchFilter()
    totals = OrderedDict()
    for customer in customers:
        if not search.matches_customer(customer["name"], customer["email"]):
            continue
        totals[customer["id"]] = {
            "id": customer["id"],
            "name": customer["name"],
            "email": customer["email"],
            "image_url": customer["image_url"],
            "total_invoices": 0,
            "total_pending": 0,
            "total_paid": 0,
        }

    for invoice in invoices:
        entry = totals.get(invoice["customer_id"])
        if entry is None:
            continue
        status = getattr(invoice["status"], "value", invoice["status"])
        entry["total_invoices"] += 1
        if status == InvoiceStatus.pending.value:
            entry["total_pending"] += int(invoice["amount"])
        elif status == InvoiceStatus.paid.value:
            entry["total_paid"] += int(invoice["amount"])

    rows = sorted(totals.values(), key=lambda r: (r["name"], r["id"]))
    if window is not None:
        rows = rows[window.offset:window.offset + window.limit]
    return [summary_from_row(r) for r in rows]
