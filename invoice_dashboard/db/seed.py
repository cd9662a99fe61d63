# invoice_dashboard/db/seed.py
"""
Seeds the dashboard tables with placeholder data.

Usage:
    python -m invoice_dashboard.db.seed
    python -m invoice_dashboard.db.seed --database-url sqlite:///./dashboard.db --reset

Re-running is safe: rows whose key already exists are skipped.
"""

import argparse
import logging
import sys
from datetime import date
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from invoice_dashboard.core.config import Settings, get_settings
from invoice_dashboard.core.database import Database
from invoice_dashboard.core.errors import DashboardError
from invoice_dashboard.core.security import hash_password
from invoice_dashboard.db import placeholder_data
from invoice_dashboard.db.session import create_schema, drop_schema
from invoice_dashboard.models import Customer, Invoice, Revenue, User
from invoice_dashboard.models.customer import new_id
from invoice_dashboard.utils.logger import configure_logging

logger = logging.getLogger(__name__)


def seed_users(session: Session, rounds: Optional[int] = None) -> int:
    inserted = 0
    for user in placeholder_data.users:
        if session.get(User, user["id"]) is not None:
            continue
        session.add(User(
            id=user["id"],
            name=user["name"],
            email=user["email"],
            password=hash_password(user["password"], rounds),
        ))
        inserted += 1
    return inserted


def seed_customers(session: Session) -> int:
    inserted = 0
    for customer in placeholder_data.customers:
        if session.get(Customer, customer["id"]) is not None:
            continue
        session.add(Customer(**customer))
        inserted += 1
    return inserted


def seed_invoices(session: Session) -> int:
    # No natural key: an invoice is "the same" when every column matches
    inserted = 0
    for invoice in placeholder_data.invoices:
        invoice_date = date.fromisoformat(invoice["date"])
        existing = session.execute(
            select(Invoice.id).where(
                Invoice.customer_id == invoice["customer_id"],
                Invoice.amount == invoice["amount"],
                Invoice.status == invoice["status"],
                Invoice.date == invoice_date,
            )
        ).first()
        if existing is not None:
            continue
        session.add(Invoice(
            id=new_id(),
            customer_id=invoice["customer_id"],
            amount=invoice["amount"],
            status=invoice["status"],
            date=invoice_date,
        ))
        inserted += 1
    return inserted


def seed_revenue(session: Session) -> int:
    inserted = 0
    for sample in placeholder_data.revenue:
        if session.get(Revenue, sample["month"]) is not None:
            continue
        session.add(Revenue(**sample))
        inserted += 1
    return inserted


def seed(database: Database, settings: Settings, reset: bool = False) -> Dict[str, int]:
    """
    Creates the schema and inserts the placeholder rows in one transaction.

    Returns:
        Inserted row count per table
    """
    if reset:
        drop_schema(database)
    create_schema(database)

    with database.session() as session:
        counts = {"users": seed_users(session, settings.bcrypt_rounds)}
        counts["customers"] = seed_customers(session)
        # customers must exist before their invoices
        session.flush()
        counts["invoices"] = seed_invoices(session)
        counts["revenue"] = seed_revenue(session)

    for table, count in counts.items():
        logger.info("Seeded %s %s", count, table)
    return counts


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the invoice dashboard database with placeholder data")
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy URL; defaults to DATABASE_URL from the environment",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop every table before seeding",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})
    configure_logging(settings.log_level)

    database = Database.from_settings(settings)
    try:
        seed(database, settings, reset=args.reset)
    except DashboardError as exc:
        logger.error("An error occurred while attempting to seed the database: %s", exc)
        return 1
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
