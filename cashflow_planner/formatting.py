"""Formatting utilities for currency, dates and balance display."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Union

from .config import CURRENCY_SYMBOL, LOW_BALANCE_THRESHOLD

Amount = Union[Decimal, float, int]

NO_CHANGE = '—'


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not start LaTeX math.

    Example:
        >>> escape_dollar_for_markdown('$1,234.56')
        '\\\\$1,234.56'
    """
    return text.replace("$", "\\$")


def format_currency(amount: Amount, include_sign: bool = True) -> str:
    """Format a currency amount with thousands separators and two decimals.

    Args:
        amount: The amount to format
        include_sign: Whether to include the currency symbol

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "-$1,234.56")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-500, include_sign=False)
        '-500.00'
    """
    value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    formatted = f"{abs(value):,.2f}"
    if include_sign:
        formatted = f"{CURRENCY_SYMBOL}{formatted}"
    return f"-{formatted}" if value < 0 else formatted


def format_change(change: Amount) -> str:
    """Format a timeline change with an explicit sign, or a dash for zero."""
    if change == 0:
        return NO_CHANGE
    prefix = '+' if change > 0 else ''
    return f"{prefix}{format_currency(change)}"


def format_short_date(day: date) -> str:
    """Format a date as e.g. ``Mar 5``."""
    return f"{day:%b} {day.day}"


def balance_status(balance: Amount, low_threshold: Amount = LOW_BALANCE_THRESHOLD) -> str:
    """Classify a balance as ``negative``, ``low`` or ``ok``."""
    if balance < 0:
        return 'negative'
    if balance < low_threshold:
        return 'low'
    return 'ok'
