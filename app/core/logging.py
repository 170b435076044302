"""
Logging configuration for the Echelon backend
"""
import logging
import sys
from typing import Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx")


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger once for the whole process

    Args:
        level: Logging level name (overrides settings.log_level)

    Returns:
        The application logger
    """
    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stdout)

    # Reduce noise from external libraries
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.INFO if settings.database_echo and name == "sqlalchemy.engine" else logging.WARNING
        )

    logger = logging.getLogger("app")
    logger.setLevel(numeric_level)
    return logger
