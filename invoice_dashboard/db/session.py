# invoice_dashboard/db/session.py
import logging

from invoice_dashboard.core.database import Database
from invoice_dashboard.db.base import Base

# Import models so they register on Base.metadata
import invoice_dashboard.models  # noqa: F401

logger = logging.getLogger(__name__)


def create_schema(database: Database) -> None:
    """Creates the four tables if they do not exist."""
    Base.metadata.create_all(bind=database.engine)
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


def drop_schema(database: Database) -> None:
    Base.metadata.drop_all(bind=database.engine)
    logger.warning("Schema dropped")
