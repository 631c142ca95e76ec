"""Logging configuration."""

import logging
import sys
from datetime import datetime
from typing import Optional

from papertrade.config.settings import Settings, get_settings
from papertrade.core.timezone import EASTERN_TZ

LOG_FORMAT = "%(asctime)s ET - %(name)s - %(levelname)s - %(message)s"


class EasternFormatter(logging.Formatter):
    """Formatter that stamps records in US/Eastern, the time trades are recorded in."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.fromtimestamp(record.created, EASTERN_TZ)
        return stamp.strftime(datefmt or "%Y-%m-%d %H:%M:%S")


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure application logging."""
    settings = settings or get_settings()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(EasternFormatter(LOG_FORMAT))
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        handlers=[handler],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("yfinance").setLevel(logging.WARNING)
