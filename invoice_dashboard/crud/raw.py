# invoice_dashboard/crud/raw.py
"""
Repositories over hand-written SQL.

The SQL lives in `statements`; how it reaches the database is a `SqlRunner`.
The text() backend and the DB-API backend each provide a runner, so the two
raw-SQL strategies share these classes and differ only in the driver path.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from invoice_dashboard.core.errors import (
    CustomerHasInvoicesError,
    ForeignKeyViolationError,
    NotFoundError,
    UniqueConstraintError,
)
from invoice_dashboard.crud import statements as sql
from invoice_dashboard.crud.base import (
    CustomerRepository,
    InvoiceRepository,
    RevenueRepository,
    UserRepository,
)
from invoice_dashboard.models.customer import new_id
from invoice_dashboard.models.invoice import InvoiceStatus
from invoice_dashboard.schemas.customer import CustomerField, CustomerForm, CustomerRead, CustomerSummary
from invoice_dashboard.schemas.invoice import (
    InvoiceCustomer,
    InvoiceDetail,
    InvoiceForm,
    InvoiceRead,
    InvoiceRow,
    LatestInvoice,
)
from invoice_dashboard.schemas.revenue import RevenueSample
from invoice_dashboard.schemas.user import UserRecord
from invoice_dashboard.services.aggregation import summary_from_row
from invoice_dashboard.utils.money import to_cents, to_display, to_major
from invoice_dashboard.utils.pagination import PageWindow
from invoice_dashboard.utils.search import SearchFilter

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class SqlTransaction(ABC):
    """Statement execution inside one open transaction."""

    @abstractmethod
    def all(self, statement: str, params: Optional[Dict[str, Any]] = None) -> List[Row]:
        pass

    @abstractmethod
    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> int:
        """Runs a write; returns the affected row count."""

    def first(self, statement: str, params: Optional[Dict[str, Any]] = None) -> Optional[Row]:
        rows = self.all(statement, params)
        return rows[0] if rows else None

    def scalar(self, statement: str, params: Optional[Dict[str, Any]] = None) -> Any:
        row = self.first(statement, params)
        if row is None:
            return None
        return next(iter(row.values()))


class SqlRunner(ABC):
    dialect_name: str

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[SqlTransaction]:
        """One connection, one transaction; committed on success, rolled back on error."""

    @property
    @abstractmethod
    def integrity_errors(self) -> Tuple[Type[Exception], ...]:
        pass


def _window_params(window: PageWindow) -> Dict[str, int]:
    return {"limit": window.limit, "offset": window.offset}


# -----------------------------------------------------
# Customers
# -----------------------------------------------------
class RawCustomerRepository(CustomerRepository):

    def __init__(self, runner: SqlRunner):
        self.runner = runner

    def _ensure_email_free(self, tx: SqlTransaction, email: str, exclude_id: Optional[str] = None) -> None:
        owner = tx.first(sql.CUSTOMER_EMAIL_OWNER, {"email": email})
        if owner is not None and owner["id"] != exclude_id:
            raise UniqueConstraintError("email", email)

    def create(self, form: CustomerForm) -> CustomerRead:
        customer = CustomerRead(id=new_id(), name=form.name, email=form.email, image_url=form.image_url)
        with self.runner.transaction() as tx:
            self._ensure_email_free(tx, form.email)
            try:
                tx.execute(sql.CUSTOMER_INSERT, customer.model_dump())
            except self.runner.integrity_errors as exc:
                raise UniqueConstraintError("email", form.email) from exc
        logger.info("Customer created: %s", customer.id)
        return customer

    def update(self, customer_id: str, form: CustomerForm) -> None:
        with self.runner.transaction() as tx:
            if tx.first(sql.CUSTOMER_BY_ID, {"id": customer_id}) is None:
                raise NotFoundError("Customer", customer_id)
            self._ensure_email_free(tx, form.email, exclude_id=customer_id)
            params = {"id": customer_id, "name": form.name, "email": form.email, "image_url": form.image_url}
            try:
                tx.execute(sql.CUSTOMER_UPDATE, params)
            except self.runner.integrity_errors as exc:
                raise UniqueConstraintError("email", form.email) from exc
        logger.info("Customer updated: %s", customer_id)

    def delete(self, customer_id: str) -> None:
        with self.runner.transaction() as tx:
            if tx.first(sql.CUSTOMER_BY_ID, {"id": customer_id}) is None:
                raise NotFoundError("Customer", customer_id)
            invoice_count = int(tx.scalar(sql.CUSTOMER_INVOICE_COUNT, {"id": customer_id}) or 0)
            if invoice_count:
                raise CustomerHasInvoicesError(customer_id, invoice_count)
            tx.execute(sql.CUSTOMER_DELETE, {"id": customer_id})
        logger.info("Customer deleted: %s", customer_id)

    def get_by_id(self, customer_id: str) -> CustomerRead:
        with self.runner.transaction() as tx:
            row = tx.first(sql.CUSTOMER_BY_ID, {"id": customer_id})
        if row is None:
            logger.warning("Customer not found: %s", customer_id)
            raise NotFoundError("Customer", customer_id)
        return CustomerRead(**row)

    def list_all(self) -> List[CustomerField]:
        with self.runner.transaction() as tx:
            return [CustomerField(**r) for r in tx.all(sql.CUSTOMERS_ALL)]

    def list_filtered_with_totals(
        self, search: SearchFilter, window: Optional[PageWindow] = None
    ) -> List[CustomerSummary]:
        params = {"pattern": search.pattern}
        if window is not None:
            params.update(_window_params(window))
        with self.runner.transaction() as tx:
            rows = tx.all(sql.customers_with_totals(paged=window is not None), params)
        return [summary_from_row(r) for r in rows]

    def count_filtered(self, search: SearchFilter) -> int:
        with self.runner.transaction() as tx:
            return int(tx.scalar(sql.customers_count(), {"pattern": search.pattern}) or 0)


# -----------------------------------------------------
# Invoices
# -----------------------------------------------------
class RawInvoiceRepository(InvoiceRepository):

    def __init__(self, runner: SqlRunner):
        self.runner = runner

    def _ensure_customer(self, tx: SqlTransaction, customer_id: str) -> None:
        if tx.first(sql.CUSTOMER_BY_ID, {"id": customer_id}) is None:
            raise ForeignKeyViolationError(f"Customer '{customer_id}' does not exist.")

    def create(self, form: InvoiceForm, today: Optional[date] = None) -> InvoiceRead:
        invoice = InvoiceRead(
            id=new_id(),
            customer_id=form.customer_id,
            amount=to_cents(form.amount),
            status=form.status,
            date=today or date.today(),
        )
        params = {
            "id": invoice.id,
            "customer_id": invoice.customer_id,
            "amount": invoice.amount,
            "status": invoice.status.value,
            "date": invoice.date.isoformat(),
        }
        with self.runner.transaction() as tx:
            self._ensure_customer(tx, form.customer_id)
            try:
                tx.execute(sql.INVOICE_INSERT, params)
            except self.runner.integrity_errors as exc:
                raise ForeignKeyViolationError(str(exc)) from exc
        logger.info("Invoice created: %s (%s cents)", invoice.id, invoice.amount)
        return invoice

    def update(self, invoice_id: str, form: InvoiceForm) -> None:
        params = {
            "id": invoice_id,
            "customer_id": form.customer_id,
            "amount": to_cents(form.amount),
            "status": form.status.value,
        }
        with self.runner.transaction() as tx:
            if tx.first(sql.INVOICE_BY_ID, {"id": invoice_id}) is None:
                raise NotFoundError("Invoice", invoice_id)
            self._ensure_customer(tx, form.customer_id)
            try:
                tx.execute(sql.INVOICE_UPDATE, params)
            except self.runner.integrity_errors as exc:
                raise ForeignKeyViolationError(str(exc)) from exc
        logger.info("Invoice updated: %s", invoice_id)

    def delete(self, invoice_id: str) -> None:
        with self.runner.transaction() as tx:
            if tx.first(sql.INVOICE_BY_ID, {"id": invoice_id}) is None:
                raise NotFoundError("Invoice", invoice_id)
            tx.execute(sql.INVOICE_DELETE, {"id": invoice_id})
        logger.info("Invoice deleted: %s", invoice_id)

    def get_by_id(self, invoice_id: str) -> InvoiceDetail:
        with self.runner.transaction() as tx:
            row = tx.first(sql.INVOICE_BY_ID, {"id": invoice_id})
        if row is None:
            logger.warning("Invoice not found: %s", invoice_id)
            raise NotFoundError("Invoice", invoice_id)
        return InvoiceDetail(
            id=row["id"], customer_id=row["customer_id"], amount=to_major(row["amount"]), status=row["status"]
        )

    def list_latest(self, limit: int = 5) -> List[LatestInvoice]:
        with self.runner.transaction() as tx:
            rows = tx.all(sql.INVOICES_LATEST, {"limit": limit})
        return [
            LatestInvoice(
                id=r["id"],
                amount=to_display(r["amount"]),
                customer=InvoiceCustomer(name=r["name"], email=r["email"], image_url=r["image_url"]),
            )
            for r in rows
        ]

    def list_filtered(self, search: SearchFilter, window: Optional[PageWindow] = None) -> List[InvoiceRow]:
        statement = sql.invoices_filtered(self.runner.dialect_name, paged=window is not None)
        params = {"pattern": search.pattern}
        if window is not None:
            params.update(_window_params(window))
        with self.runner.transaction() as tx:
            rows = tx.all(statement, params)
        return [
            InvoiceRow(
                id=r["id"],
                amount=r["amount"],
                date=r["date"],
                status=r["status"],
                customer=InvoiceCustomer(name=r["name"], email=r["email"], image_url=r["image_url"]),
            )
            for r in rows
        ]

    def count_filtered(self, search: SearchFilter) -> int:
        statement = sql.invoices_count(self.runner.dialect_name)
        with self.runner.transaction() as tx:
            return int(tx.scalar(statement, {"pattern": search.pattern}) or 0)

    def count_all(self) -> int:
        with self.runner.transaction() as tx:
            return int(tx.scalar(sql.INVOICE_COUNT_ALL) or 0)

    def count_customers(self) -> int:
        with self.runner.transaction() as tx:
            return int(tx.scalar(sql.CUSTOMER_COUNT_ALL) or 0)

    def total_by_status(self, status: InvoiceStatus) -> int:
        with self.runner.transaction() as tx:
            return int(tx.scalar(sql.INVOICE_TOTAL_BY_STATUS, {"status": status.value}) or 0)


# -----------------------------------------------------
# Users / Revenue
# -----------------------------------------------------
class RawUserRepository(UserRepository):

    def __init__(self, runner: SqlRunner):
        self.runner = runner

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self.runner.transaction() as tx:
            row = tx.first(sql.USER_BY_EMAIL, {"email": email})
        if row is None:
            return None
        return UserRecord(id=row["id"], name=row["name"], email=row["email"], password_hash=row["password"])


class RawRevenueRepository(RevenueRepository):

    def __init__(self, runner: SqlRunner):
        self.runner = runner

    def list_all(self) -> List[RevenueSample]:
        with self.runner.transaction() as tx:
            return [RevenueSample(**r) for r in tx.all(sql.REVENUE_ALL)]
