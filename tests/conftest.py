"""
Shared fixtures.

Every test gets its own file-backed SQLite database. The `repositories`
fixture is parametrized over the three backends, so each repository test
runs once per backend against identical data.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict

import pytest

from invoice_dashboard.core.config import Backends, Settings
from invoice_dashboard.core.database import Database
from invoice_dashboard.core.security import hash_password
from invoice_dashboard.crud.factory import Repositories, build_repositories
from invoice_dashboard.db.session import create_schema
from invoice_dashboard.models import Revenue, User
from invoice_dashboard.models.invoice import InvoiceStatus
from invoice_dashboard.schemas.customer import CustomerForm, CustomerRead
from invoice_dashboard.schemas.invoice import InvoiceForm, InvoiceRead

TEST_BCRYPT_ROUNDS = 4

USER_EMAIL = "user@nextmail.com"
USER_PASSWORD = "123456"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'dashboard.db'}",
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


@pytest.fixture
def database(settings):
    database = Database.from_settings(settings)
    create_schema(database)
    yield database
    database.dispose()


@pytest.fixture(params=Backends.ALL)
def repositories(request, settings, database) -> Repositories:
    backend_settings = settings.model_copy(update={"database_backend": request.param})
    return build_repositories(backend_settings, database=database)


@dataclass
class Dataset:
    evil: CustomerRead
    delba: CustomerRead
    lee: CustomerRead
    invoices: Dict[str, InvoiceRead]


@pytest.fixture
def dataset(repositories) -> Dataset:
    """
    Three customers, four invoices. Lee Robinson has no invoices.

    | key          | customer | amount (cents) | status  | date       |
    |--------------|----------|----------------|---------|------------|
    | evil_old     | Evil     | 15795          | pending | 2022-12-06 |
    | evil_new     | Evil     | 666            | pending | 2023-06-27 |
    | delba_old    | Delba    | 20348          | pending | 2022-11-14 |
    | delba_new    | Delba    | 500            | paid    | 2023-08-19 |
    """
    customers = repositories.customers
    evil = customers.create(CustomerForm(
        name="Evil Rabbit", email="evil@rabbit.com", image_url="/customers/evil-rabbit.png"
    ))
    delba = customers.create(CustomerForm(
        name="Delba de Oliveira", email="delba@oliveira.com", image_url="/customers/delba-de-oliveira.png"
    ))
    lee = customers.create(CustomerForm(
        name="Lee Robinson", email="lee@robinson.com", image_url="/customers/lee-robinson.png"
    ))

    def invoice(customer, amount, status, day):
        form = InvoiceForm(customer_id=customer.id, amount=Decimal(amount), status=status)
        return repositories.invoices.create(form, today=day)

    invoices = {
        "evil_old": invoice(evil, "157.95", InvoiceStatus.pending, date(2022, 12, 6)),
        "evil_new": invoice(evil, "6.66", InvoiceStatus.pending, date(2023, 6, 27)),
        "delba_old": invoice(delba, "203.48", InvoiceStatus.pending, date(2022, 11, 14)),
        "delba_new": invoice(delba, "5.00", InvoiceStatus.paid, date(2023, 8, 19)),
    }
    return Dataset(evil=evil, delba=delba, lee=lee, invoices=invoices)


@pytest.fixture
def user(database):
    """Sign-in principal, written directly through the ORM."""
    with database.session() as session:
        session.add(User(
            id="410544b2-4001-4271-9855-fec4b6a6442a",
            name="User",
            email=USER_EMAIL,
            password=hash_password(USER_PASSWORD, TEST_BCRYPT_ROUNDS),
        ))
    return {"email": USER_EMAIL, "password": USER_PASSWORD}


@pytest.fixture
def revenue(database):
    samples = [("Jan", 2000), ("Feb", 1800), ("Mar", 2200)]
    with database.session() as session:
        for month, amount in samples:
            session.add(Revenue(month=month, revenue=amount))
    return samples
