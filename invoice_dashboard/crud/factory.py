# invoice_dashboard/crud/factory.py
import logging
from dataclasses import dataclass
from typing import Optional

from invoice_dashboard.core.config import Backends, Settings
from invoice_dashboard.core.database import Database, DbApiConnector
from invoice_dashboard.crud.base import (
    CustomerRepository,
    InvoiceRepository,
    RevenueRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    customers: CustomerRepository
    invoices: InvoiceRepository
    users: UserRepository
    revenue: RevenueRepository
    backend: str


def build_repositories(
    settings: Settings,
    database: Optional[Database] = None,
    connector: Optional[DbApiConnector] = None,
) -> Repositories:
    """
    Builds the repositories of the backend named by `settings.database_backend`.

    Args:
        settings: configuration
        database: engine handle to reuse (orm, sql); created from settings if omitted
        connector: DB-API handle to reuse (dbapi); created from settings if omitted

    Raises:
        ValueError: unknown backend name
    """
    backend = settings.database_backend
    logger.info("Using repository backend: %s", backend)

    if backend == Backends.ORM:
        from invoice_dashboard.crud.orm import (
            OrmCustomerRepository,
            OrmInvoiceRepository,
            OrmRevenueRepository,
            OrmUserRepository,
        )

        database = database or Database.from_settings(settings)
        return Repositories(
            customers=OrmCustomerRepository(database),
            invoices=OrmInvoiceRepository(database),
            users=OrmUserRepository(database),
            revenue=OrmRevenueRepository(database),
            backend=backend,
        )

    if backend in (Backends.SQL, Backends.DBAPI):
        from invoice_dashboard.crud.raw import (
            RawCustomerRepository,
            RawInvoiceRepository,
            RawRevenueRepository,
            RawUserRepository,
        )

        if backend == Backends.SQL:
            from invoice_dashboard.crud.sql_text import TextSqlRunner

            runner = TextSqlRunner(database or Database.from_settings(settings))
        else:
            from invoice_dashboard.crud.dbapi import DbApiRunner

            runner = DbApiRunner(connector or DbApiConnector.from_settings(settings))

        return Repositories(
            customers=RawCustomerRepository(runner),
            invoices=RawInvoiceRepository(runner),
            users=RawUserRepository(runner),
            revenue=RawRevenueRepository(runner),
            backend=backend,
        )

    raise ValueError(f"Unknown repository backend '{backend}'")
