import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("invoice_dashboard")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the package logger. Safe to call twice."""
    if not any(getattr(h, "_invoice_dashboard", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._invoice_dashboard = True
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
