"""Data records shared by the ledger engine, the entry layer and storage.

Every record is a frozen dataclass: entries are created once by the
boundary layer and never edited, and the engine builds fresh rows on
every computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Tuple

ZERO = Decimal("0")


class EventKind(str, Enum):
    OPENING_BALANCE = 'balance'
    INCOME = 'income'
    EXPENSE = 'expense'


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Entry:
    id: str
    name: str
    amount: Decimal  # always non-negative, the collection decides the sign
    date: date


@dataclass(frozen=True)
class MonthPlan:
    """Everything the user entered for one month."""

    starting_balance: Decimal = ZERO
    incomes: Tuple[Entry, ...] = ()
    expenses: Tuple[Entry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.starting_balance == ZERO and not self.incomes and not self.expenses


# ---------------------------------------------------------------------------
# Engine outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Event:
    date: date
    description: str
    kind: EventKind
    amount: Decimal

    @property
    def signed_amount(self) -> Decimal:
        """Delta this event applies to a running balance."""
        if self.kind is EventKind.INCOME:
            return self.amount
        if self.kind is EventKind.EXPENSE:
            return -self.amount
        return ZERO


@dataclass(frozen=True)
class TimelineRow:
    date: date
    description: str
    kind: EventKind
    change: Decimal
    balance_after: Decimal

    @property
    def is_negative(self) -> bool:
        return self.balance_after < 0


@dataclass(frozen=True)
class TransferRecommendation:
    date: date
    before_event: str
    amount: Decimal


@dataclass(frozen=True)
class Stats:
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    end_balance: Decimal = ZERO
    transfer_needed: Decimal = ZERO


@dataclass(frozen=True)
class LedgerResult:
    timeline: Tuple[TimelineRow, ...] = ()
    transfers: Tuple[TransferRecommendation, ...] = ()
    stats: Stats = field(default_factory=Stats)

    @property
    def has_shortfall(self) -> bool:
        return any(row.is_negative for row in self.timeline)
