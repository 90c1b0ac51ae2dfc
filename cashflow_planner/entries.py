"""Entry creation, validation and collection edits.

This is the boundary between user input (forms, stored JSON) and the
ledger engine.  Amounts and dates are checked here so the engine can
assume clean data: finite, non-negative amounts and real calendar dates.
Collections are tuples; edits return a new tuple.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Optional, Tuple
from uuid import uuid4

from .models import Entry
from .period import Period

CENT = Decimal("0.01")


class EntryValidationError(ValueError):
    """Raised when user input cannot be turned into an Entry."""


def new_entry_id() -> str:
    return uuid4().hex


def parse_amount(value: Any, allow_negative: bool = False) -> Decimal:
    """Convert ``value`` to an amount rounded to cents.

    Entry amounts must be non-negative; pass ``allow_negative=True`` for
    balances, which may start the month overdrawn.
    """
    if isinstance(value, bool):
        raise EntryValidationError(f"Invalid amount: {value!r}")
    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            amount = Decimal(value.strip().replace(',', ''))
        else:
            amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise EntryValidationError(f"Invalid amount: {value!r}") from exc

    if not amount.is_finite():
        raise EntryValidationError(f"Amount must be finite, got {value!r}")
    if amount < 0 and not allow_negative:
        raise EntryValidationError(f"Amount cannot be negative, got {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # more digits than the decimal context can hold at cent precision
        raise EntryValidationError(f"Amount is too large: {value!r}") from exc


def parse_date(value: Any) -> date:
    """Accept a ``date``, a ``datetime`` (time dropped) or an ISO date string.

    Strings are ``YYYY-MM-DD``, optionally followed by an ISO ``T`` time.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text:
                return datetime.fromisoformat(text).date()
            return datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError as exc:
            raise EntryValidationError(f"Invalid date: {value!r}") from exc
    raise EntryValidationError(f"Invalid date: {value!r}")


def create_entry(name: str, amount: Any, entry_date: Any, entry_id: Optional[str] = None) -> Entry:
    """Build a validated Entry, assigning a fresh id unless one is given."""
    if name is not None and not isinstance(name, str):
        raise EntryValidationError(f"Entry name must be text, got {name!r}")
    if entry_id is not None and not isinstance(entry_id, str):
        raise EntryValidationError(f"Entry id must be text, got {entry_id!r}")
    clean_name = (name or '').strip()
    if not clean_name:
        raise EntryValidationError("Entry name cannot be empty")
    return Entry(
        id=entry_id or new_entry_id(),
        name=clean_name,
        amount=parse_amount(amount),
        date=parse_date(entry_date),
    )


def add_entry(entries: Tuple[Entry, ...], entry: Entry) -> Tuple[Entry, ...]:
    if any(existing.id == entry.id for existing in entries):
        raise EntryValidationError(f"Duplicate entry id: {entry.id}")
    return entries + (entry,)


def delete_entry(entries: Tuple[Entry, ...], entry_id: str) -> Tuple[Entry, ...]:
    return tuple(e for e in entries if e.id != entry_id)


def sorted_entries(entries: Iterable[Entry]) -> Tuple[Entry, ...]:
    return tuple(sorted(entries, key=lambda e: e.date))


def entries_outside_period(entries: Iterable[Entry], period: Period) -> Tuple[Entry, ...]:
    return tuple(e for e in entries if not period.contains(e.date))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def entry_to_dict(entry: Entry) -> Dict[str, str]:
    return {
        'id': entry.id,
        'name': entry.name,
        'amount': str(entry.amount),
        'date': entry.date.isoformat(),
    }


def entry_from_dict(data: Dict[str, Any]) -> Entry:
    if not isinstance(data, dict):
        raise EntryValidationError(f"Entry record must be a mapping, got {type(data).__name__}")
    return create_entry(
        data.get('name', ''),
        data.get('amount'),
        data.get('date'),
        entry_id=data.get('id') or None,
    )
