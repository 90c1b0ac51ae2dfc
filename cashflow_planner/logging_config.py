"""
Logging configuration for the cash flow planner
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from . import config

PLANNER_LOG = "planner.log"

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: Optional[str] = None, logs_dir: Optional[Path] = None) -> logging.Logger:
    """Configure console and rotating file logging for the planner package.

    Safe to call on every Streamlit rerun; handlers are only added once.
    """
    logger = logging.getLogger('cashflow_planner')
    logger.setLevel(level or config.LOG_LEVEL)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    target_dir = Path(logs_dir) if logs_dir is not None else config.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        target_dir / PLANNER_LOG,
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding='utf-8',
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.propagate = False
    return logger
