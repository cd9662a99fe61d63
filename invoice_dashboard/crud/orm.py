# invoice_dashboard/crud/orm.py
"""
Query-builder backend: SQLAlchemy ORM statements over `Database.session()`.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.exc import IntegrityError

from invoice_dashboard.core.database import Database
from invoice_dashboard.core.errors import (
    CustomerHasInvoicesError,
    ForeignKeyViolationError,
    NotFoundError,
    UniqueConstraintError,
)
from invoice_dashboard.crud.base import (
    CustomerRepository,
    InvoiceRepository,
    RevenueRepository,
    UserRepository,
)
from invoice_dashboard.models.customer import Customer, new_id
from invoice_dashboard.models.invoice import Invoice, InvoiceStatus
from invoice_dashboard.models.revenue import Revenue
from invoice_dashboard.models.user import User
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
from invoice_dashboard.services.aggregation import customer_group_by, summary_from_row, totals_columns
from invoice_dashboard.utils.money import to_cents, to_display, to_major
from invoice_dashboard.utils.pagination import PageWindow
from invoice_dashboard.utils.search import LIKE_ESCAPE, SearchFilter

logger = logging.getLogger(__name__)


def _ilike(column, search: SearchFilter):
    return func.lower(cast(column, String)).like(search.pattern, escape=LIKE_ESCAPE)


def customer_search_clause(search: SearchFilter):
    return or_(_ilike(Customer.name, search), _ilike(Customer.email, search))


def invoice_search_clause(search: SearchFilter):
    return or_(
        _ilike(Customer.name, search),
        _ilike(Customer.email, search),
        _ilike(Invoice.amount, search),
        _ilike(Invoice.date, search),
        _ilike(Invoice.status, search),
    )


def _apply_window(stmt, window: Optional[PageWindow]):
    if window is None:
        return stmt
    return stmt.offset(window.offset).limit(window.limit)


# -----------------------------------------------------
# Customers
# -----------------------------------------------------
class OrmCustomerRepository(CustomerRepository):

    def __init__(self, database: Database):
        self.database = database

    def _ensure_email_free(self, session, email: str, exclude_id: Optional[str] = None) -> None:
        stmt = select(Customer.id).where(Customer.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Customer.id != exclude_id)
        if session.execute(stmt).first() is not None:
            raise UniqueConstraintError("email", email)

    def create(self, form: CustomerForm) -> CustomerRead:
        with self.database.session() as session:
            self._ensure_email_free(session, form.email)
            customer = Customer(id=new_id(), name=form.name, email=form.email, image_url=form.image_url)
            session.add(customer)
            try:
                session.flush()
            except IntegrityError as exc:
                raise UniqueConstraintError("email", form.email) from exc
            logger.info("Customer created: %s", customer.id)
            return CustomerRead.model_validate(customer)

    def update(self, customer_id: str, form: CustomerForm) -> None:
        with self.database.session() as session:
            customer = session.get(Customer, customer_id)
            if customer is None:
                raise NotFoundError("Customer", customer_id)
            self._ensure_email_free(session, form.email, exclude_id=customer_id)
            customer.name = form.name
            customer.email = form.email
            customer.image_url = form.image_url
            try:
                session.flush()
            except IntegrityError as exc:
                raise UniqueConstraintError("email", form.email) from exc
            logger.info("Customer updated: %s", customer_id)

    def delete(self, customer_id: str) -> None:
        with self.database.session() as session:
            customer = session.get(Customer, customer_id)
            if customer is None:
                raise NotFoundError("Customer", customer_id)
            invoice_count = session.scalar(
                select(func.count(Invoice.id)).where(Invoice.customer_id == customer_id)
            )
            if invoice_count:
                raise CustomerHasInvoicesError(customer_id, invoice_count)
            session.delete(customer)
            logger.info("Customer deleted: %s", customer_id)

    def get_by_id(self, customer_id: str) -> CustomerRead:
        with self.database.session() as session:
            customer = session.get(Customer, customer_id)
            if customer is None:
                logger.warning("Customer not found: %s", customer_id)
                raise NotFoundError("Customer", customer_id)
            return CustomerRead.model_validate(customer)

    def list_all(self) -> List[CustomerField]:
        stmt = select(Customer.id, Customer.name).order_by(Customer.name.asc(), Customer.id.asc())
        with self.database.session() as session:
            return [CustomerField(id=r.id, name=r.name) for r in session.execute(stmt)]

    def list_filtered_with_totals(
        self, search: SearchFilter, window: Optional[PageWindow] = None
    ) -> List[CustomerSummary]:
        stmt = (
            select(*customer_group_by(), *totals_columns())
            .select_from(Customer)
            .outerjoin(Invoice, Invoice.customer_id == Customer.id)
            .where(customer_search_clause(search))
            .group_by(*customer_group_by())
            .order_by(Customer.name.asc(), Customer.id.asc())
        )
        stmt = _apply_window(stmt, window)
        with self.database.session() as session:
            return [summary_from_row(r._mapping) for r in session.execute(stmt)]

    def count_filtered(self, search: SearchFilter) -> int:
        stmt = select(func.count(Customer.id)).where(customer_search_clause(search))
        with self.database.session() as session:
            return int(session.scalar(stmt) or 0)


# -----------------------------------------------------
# Invoices
# -----------------------------------------------------
class OrmInvoiceRepository(InvoiceRepository):

    def __init__(self, database: Database):
        self.database = database

    def _ensure_customer(self, session, customer_id: str) -> None:
        if session.get(Customer, customer_id) is None:
            raise ForeignKeyViolationError(f"Customer '{customer_id}' does not exist.")

    def create(self, form: InvoiceForm, today: Optional[date] = None) -> InvoiceRead:
        with self.database.session() as session:
            self._ensure_customer(session, form.customer_id)
            invoice = Invoice(
                id=new_id(),
                customer_id=form.customer_id,
                amount=to_cents(form.amount),
                status=form.status.value,
                date=today or date.today(),
            )
            session.add(invoice)
            try:
                session.flush()
            except IntegrityError as exc:
                raise ForeignKeyViolationError(str(exc.orig)) from exc
            logger.info("Invoice created: %s (%s cents)", invoice.id, invoice.amount)
            return InvoiceRead.model_validate(invoice)

    def update(self, invoice_id: str, form: InvoiceForm) -> None:
        with self.database.session() as session:
            invoice = session.get(Invoice, invoice_id)
            if invoice is None:
                raise NotFoundError("Invoice", invoice_id)
            self._ensure_customer(session, form.customer_id)
            invoice.customer_id = form.customer_id
            invoice.amount = to_cents(form.amount)
            invoice.status = form.status.value
            try:
                session.flush()
            except IntegrityError as exc:
                raise ForeignKeyViolationError(str(exc.orig)) from exc
            logger.info("Invoice updated: %s", invoice_id)

    def delete(self, invoice_id: str) -> None:
        with self.database.session() as session:
            invoice = session.get(Invoice, invoice_id)
            if invoice is None:
                raise NotFoundError("Invoice", invoice_id)
            session.delete(invoice)
            logger.info("Invoice deleted: %s", invoice_id)

    def get_by_id(self, invoice_id: str) -> InvoiceDetail:
        stmt = select(Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status).where(
            Invoice.id == invoice_id
        )
        with self.database.session() as session:
            row = session.execute(stmt).first()
        if row is None:
            logger.warning("Invoice not found: %s", invoice_id)
            raise NotFoundError("Invoice", invoice_id)
        return InvoiceDetail(
            id=row.id, customer_id=row.customer_id, amount=to_major(row.amount), status=row.status
        )

    def _joined(self, *columns):
        return select(*columns).select_from(Invoice).join(Customer, Invoice.customer_id == Customer.id)

    def list_latest(self, limit: int = 5) -> List[LatestInvoice]:
        stmt = (
            self._joined(Invoice.id, Invoice.amount, Customer.name, Customer.email, Customer.image_url)
            .order_by(Invoice.date.desc(), Invoice.id.desc())
            .limit(limit)
        )
        with self.database.session() as session:
            rows = session.execute(stmt).all()
        return [
            LatestInvoice(
                id=r.id,
                amount=to_display(r.amount),
                customer=InvoiceCustomer(name=r.name, email=r.email, image_url=r.image_url),
            )
            for r in rows
        ]

    def list_filtered(self, search: SearchFilter, window: Optional[PageWindow] = None) -> List[InvoiceRow]:
        stmt = (
            self._joined(
                Invoice.id, Invoice.amount, Invoice.date, Invoice.status,
                Customer.name, Customer.email, Customer.image_url,
            )
            .where(invoice_search_clause(search))
            .order_by(Invoice.date.desc(), Invoice.id.desc())
        )
        stmt = _apply_window(stmt, window)
        with self.database.session() as session:
            rows = session.execute(stmt).all()
        return [
            InvoiceRow(
                id=r.id,
                amount=r.amount,
                date=r.date,
                status=r.status,
                customer=InvoiceCustomer(name=r.name, email=r.email, image_url=r.image_url),
            )
            for r in rows
        ]

    def count_filtered(self, search: SearchFilter) -> int:
        stmt = self._joined(func.count(Invoice.id)).where(invoice_search_clause(search))
        with self.database.session() as session:
            return int(session.scalar(stmt) or 0)

    def count_all(self) -> int:
        with self.database.session() as session:
            return int(session.scalar(select(func.count(Invoice.id))) or 0)

    def count_customers(self) -> int:
        with self.database.session() as session:
            return int(session.scalar(select(func.count(Customer.id))) or 0)

    def total_by_status(self, status: InvoiceStatus) -> int:
        stmt = select(func.coalesce(func.sum(Invoice.amount), 0)).where(Invoice.status == status.value)
        with self.database.session() as session:
            return int(session.scalar(stmt) or 0)


# -----------------------------------------------------
# Users / Revenue
# -----------------------------------------------------
class OrmUserRepository(UserRepository):

    def __init__(self, database: Database):
        self.database = database

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self.database.session() as session:
            user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if user is None:
                return None
            return UserRecord(id=user.id, name=user.name, email=user.email, password_hash=user.password)


class OrmRevenueRepository(RevenueRepository):

    def __init__(self, database: Database):
        self.database = database

    def list_all(self) -> List[RevenueSample]:
        with self.database.session() as session:
            return [RevenueSample.model_validate(r) for r in session.execute(select(Revenue)).scalars()]
