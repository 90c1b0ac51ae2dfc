"""Configuration management for the cash flow planner.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path

# Base project root - assumes this file is in cashflow_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("CASHFLOW_DATA_DIR", _PROJECT_ROOT / "data"))
LOGS_DIR = DATA_DIR / "logs"

# Key-value plan store, one record per month
PLAN_PATH = Path(
    os.getenv("CASHFLOW_PLAN_PATH", DATA_DIR / "cashflow_plans.json")
).resolve()

LOG_LEVEL = os.getenv("CASHFLOW_LOG_LEVEL", "INFO").upper()

# Transfers are suggested in whole multiples of this amount
TRANSFER_INCREMENT = Decimal("100")

# Non-negative balances below this are flagged as low
LOW_BALANCE_THRESHOLD = Decimal("100")

CURRENCY_SYMBOL = "$"
OPENING_BALANCE_LABEL = "Starting Balance"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, LOGS_DIR, PLAN_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)
