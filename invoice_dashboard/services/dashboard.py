# invoice_dashboard/services/dashboard.py
"""
Read side of the dashboard: the query helpers a page renderer calls.

Each helper takes the raw query string and 1-based page number from the
request, builds the SearchFilter and the page window, and delegates to
the configured repositories. Failures are logged with context and
re-raised unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from invoice_dashboard.core.config import Settings, get_settings
from invoice_dashboard.core.errors import DashboardError, NotFoundError
from invoice_dashboard.crud.factory import Repositories
from invoice_dashboard.schemas.customer import CustomerField, CustomerRead, CustomerSummary
from invoice_dashboard.schemas.invoice import CardSummary, InvoiceDetail, InvoiceRow, LatestInvoice
from invoice_dashboard.schemas.revenue import RevenueSample
from invoice_dashboard.utils.pagination import Pager
from invoice_dashboard.utils.search import SearchFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DashboardCards:
    """Card values, amounts already formatted."""
    invoice_count: int
    customer_count: int
    total_paid: str
    total_pending: str

    @classmethod
    def from_summary(cls, summary: CardSummary) -> "DashboardCards":
        return cls(
            invoice_count=summary.invoice_count,
            customer_count=summary.customer_count,
            total_paid=summary.total_paid_display,
            total_pending=summary.total_pending_display,
        )


class DashboardService:

    def __init__(self, repositories: Repositories, settings: Optional[Settings] = None):
        self.repositories = repositories
        self.settings = settings or get_settings()
        self.pager = Pager(self.settings.items_per_page)

    def _run(self, what: str, query: Callable[[], T]) -> T:
        try:
            return query()
        except NotFoundError:
            # already logged at WARNING by the repository
            raise
        except DashboardError:
            logger.exception("Failed to fetch %s", what)
            raise

    # -----------------------------------------------------
    # Overview
    # -----------------------------------------------------
    def revenue(self) -> List[RevenueSample]:
        return self._run("revenue", self.repositories.revenue.list_all)

    def latest_invoices(self) -> List[LatestInvoice]:
        limit = self.settings.latest_invoices_limit
        return self._run("latest invoices", lambda: self.repositories.invoices.list_latest(limit))

    def card_data(self) -> DashboardCards:
        workers = self.settings.summary_workers
        summary = self._run("card data", lambda: self.repositories.invoices.card_summary(workers))
        return DashboardCards.from_summary(summary)

    # -----------------------------------------------------
    # Invoices
    # -----------------------------------------------------
    def filtered_invoices(self, query: Optional[str], page: int = 1) -> List[InvoiceRow]:
        search = SearchFilter.build(query)
        window = self.pager.window(page)
        logger.debug("Invoices query=%r page=%s", search.term, page)
        return self._run("invoices", lambda: self.repositories.invoices.list_filtered(search, window))

    def invoice_pages(self, query: Optional[str]) -> int:
        search = SearchFilter.build(query)
        return self._run("invoice pages", lambda: self.repositories.invoices.total_pages(search, self.pager))

    def invoice_by_id(self, invoice_id: str) -> InvoiceDetail:
        return self._run("invoice", lambda: self.repositories.invoices.get_by_id(invoice_id))

    # -----------------------------------------------------
    # Customers
    # -----------------------------------------------------
    def customers(self) -> List[CustomerField]:
        return self._run("customers", self.repositories.customers.list_all)

    def customer_by_id(self, customer_id: str) -> CustomerRead:
        return self._run("customer", lambda: self.repositories.customers.get_by_id(customer_id))

    def filtered_customers(self, query: Optional[str], page: int = 1) -> List[CustomerSummary]:
        search = SearchFilter.build(query)
        window = self.pager.window(page)
        logger.debug("Customers query=%r page=%s", search.term, page)
        return self._run(
            "customer table", lambda: self.repositories.customers.list_filtered_with_totals(search, window)
        )

    def customer_pages(self, query: Optional[str]) -> int:
        search = SearchFilter.build(query)
        return self._run("customer pages", lambda: self.repositories.customers.total_pages(search, self.pager))
