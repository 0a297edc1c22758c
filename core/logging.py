"""
Logging configuration
"""

import logging
import sys
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "apscheduler")


class ErrorContextFormatter(logging.Formatter):
    """
    Appends the ``error_context`` extra (an ``IngestionException.to_dict()``)
    so a storage or upstream failure logs its context on the same line.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        error_context = getattr(record, "error_context", None)
        if not error_context:
            return message

        details = error_context.get("context") or {}
        pairs = " ".join(
            f"{key}={value}" for key, value in details.items() if key != "error_timestamp"
        )
        error_type = error_context.get("error_type", "error")
        return f"{message} | {error_type} {pairs}".rstrip()


def setup_logging(level: str = None):
    """Configure application logging from LOG_LEVEL (or an explicit level)"""
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ErrorContextFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logging.basicConfig(level=log_level, handlers=[handler])

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured at {level_name} level")
