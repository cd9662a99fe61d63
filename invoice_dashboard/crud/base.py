# invoice_dashboard/crud/base.py
"""
Repository contract.

Every backend (ORM query builder, raw SQL through SQLAlchemy text(), raw SQL
through a DB-API driver) subclasses these and must return the same rows for
the same store contents. Failures are raised from core.errors; nothing here
returns an error sentinel.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import List, Optional

from invoice_dashboard.models.invoice import InvoiceStatus
from invoice_dashboard.schemas.customer import CustomerField, CustomerForm, CustomerRead, CustomerSummary
from invoice_dashboard.schemas.invoice import (
    CardSummary,
    InvoiceDetail,
    InvoiceForm,
    InvoiceRead,
    InvoiceRow,
    LatestInvoice,
)
from invoice_dashboard.schemas.revenue import RevenueSample
from invoice_dashboard.schemas.user import UserRecord
from invoice_dashboard.utils.pagination import PageWindow, Pager
from invoice_dashboard.utils.search import SearchFilter

logger = logging.getLogger(__name__)


class CustomerRepository(ABC):

    @abstractmethod
    def create(self, form: CustomerForm) -> CustomerRead:
        """Raises UniqueConstraintError when the email is taken."""

    @abstractmethod
    def update(self, customer_id: str, form: CustomerForm) -> None:
        """Raises NotFoundError, UniqueConstraintError."""

    @abstractmethod
    def delete(self, customer_id: str) -> None:
        """
        Raises NotFoundError, or CustomerHasInvoicesError when the customer
        still owns invoices (deletion is restricted, never cascaded).
        """

    @abstractmethod
    def get_by_id(self, customer_id: str) -> CustomerRead:
        """Raises NotFoundError."""

    @abstractmethod
    def list_all(self) -> List[CustomerField]:
        """id/name of every customer, by name ascending."""

    @abstractmethod
    def list_filtered_with_totals(
        self, search: SearchFilter, window: Optional[PageWindow] = None
    ) -> List[CustomerSummary]:
        """
        Customers whose name or email matches, by name ascending, each with
        invoice count and pending/paid sums. Customers without invoices are
        included with zeros.
        """

    @abstractmethod
    def count_filtered(self, search: SearchFilter) -> int:
        pass

    def total_pages(self, search: SearchFilter, pager: Pager) -> int:
        return pager.total_pages(self.count_filtered(search))


class InvoiceRepository(ABC):

    @abstractmethod
    def create(self, form: InvoiceForm, today: Optional[date] = None) -> InvoiceRead:
        """
        Stores `form.amount` as cents and the date as `today` (defaults to the
        current date). Raises ForeignKeyViolationError for an unknown customer.
        """

    @abstractmethod
    def update(self, invoice_id: str, form: InvoiceForm) -> None:
        """Date is immutable. Raises NotFoundError, ForeignKeyViolationError."""

    @abstractmethod
    def delete(self, invoice_id: str) -> None:
        """Raises NotFoundError."""

    @abstractmethod
    def get_by_id(self, invoice_id: str) -> InvoiceDetail:
        """Amount converted back to major units. Raises NotFoundError."""

    @abstractmethod
    def list_latest(self, limit: int = 5) -> List[LatestInvoice]:
        """Most recent invoices by date, amount pre-formatted."""

    @abstractmethod
    def list_filtered(self, search: SearchFilter, window: Optional[PageWindow] = None) -> List[InvoiceRow]:
        """Invoices joined to their customer, by date descending."""

    @abstractmethod
    def count_filtered(self, search: SearchFilter) -> int:
        pass

    # -----------------------------------------------------
    # Card sub-queries (independent of each other)
    # -----------------------------------------------------
    @abstractmethod
    def count_all(self) -> int:
        pass

    @abstractmethod
    def count_customers(self) -> int:
        pass

    @abstractmethod
    def total_by_status(self, status: InvoiceStatus) -> int:
        """SUM(amount) over every invoice with `status`; 0 when none match."""

    def total_pages(self, search: SearchFilter, pager: Pager) -> int:
        return pager.total_pages(self.count_filtered(search))

    def card_summary(self, max_workers: int = 4) -> CardSummary:
        """
        Runs the four sub-queries concurrently, each on its own connection,
        and joins them. The first failure is re-raised.
        """
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="card-summary") as executor:
            invoice_count = executor.submit(self.count_all)
            customer_count = executor.submit(self.count_customers)
            total_paid = executor.submit(self.total_by_status, InvoiceStatus.paid)
            total_pending = executor.submit(self.total_by_status, InvoiceStatus.pending)

            summary = CardSummary(
                invoice_count=invoice_count.result(),
                customer_count=customer_count.result(),
                total_paid=total_paid.result(),
                total_pending=total_pending.result(),
            )
        logger.debug("Card summary computed: %s", summary)
        return summary


class UserRepository(ABC):

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserRecord]:
        pass


class RevenueRepository(ABC):

    @abstractmethod
    def list_all(self) -> List[RevenueSample]:
        pass
