"""
Logging configuration for the sync service and scripts
"""

import logging
import sys
from typing import Optional
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every statement or request at INFO
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "apscheduler",
)


class ContextFormatter(logging.Formatter):
    """
    Appends the ``error_context`` passed through ``extra=`` to the line, so
    crawl and enrichment failures keep their source/url in plain-text logs.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "error_context", None)
        if context:
            pairs = ", ".join(f"{k}={v}" for k, v in context.items() if k != "error_timestamp")
            if pairs:
                line = f"{line} | {pairs}"
        return line


def setup_logging(level: Optional[str] = None):
    """Configure the root logger once; later calls replace the handler."""
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured at {level_name} level")
