"""Query layer for the customers and invoices dashboard."""

__version__ = "1.0.0"
