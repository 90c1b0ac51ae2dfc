"""Ledger engine: running balance and savings transfer recommendations.

The engine turns a month's opening balance and its income/expense entries
into a chronological timeline.  It works in three steps:

* ``build_events`` merges the opening balance and the entries into one
  list and stable-sorts it by date;
* ``running_balance_pass`` walks that list and records the balance after
  every event;
* ``recommend_transfers`` walks it again and greedily suggests top-up
  transfers, rounded up to the next 100, on each date the balance dips
  below zero.

``aggregate_transfer_need`` is a separate figure: the single transfer
that would cover the worst point of the *unadjusted* balance.  It is not
reconciled with the itemised transfers and the two can disagree: when a
second expense on an already-flagged date deepens the shortfall, that
date's recommendation is only raised to the new rounded shortfall, so the
itemised total can fall short of the aggregate.

All functions are pure.  Inputs are never mutated and nothing is cached
between calls.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import Dict, Iterable, List, NamedTuple, Sequence, Union

import pandas as pd

from .config import OPENING_BALANCE_LABEL, TRANSFER_INCREMENT
from .models import (
    ZERO,
    Entry,
    Event,
    EventKind,
    LedgerResult,
    Stats,
    TimelineRow,
    TransferRecommendation,
)

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

TIMELINE_COLUMNS = ['Date', 'Description', 'Type', 'Change', 'Balance', 'Is Negative']
TRANSFER_COLUMNS = ['Date', 'Before', 'Amount']


class BalancePass(NamedTuple):
    rows: List[TimelineRow]
    total_income: Decimal
    total_expenses: Decimal
    end_balance: Decimal
    min_balance: Decimal


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_up_to_increment(value: Number, increment: Decimal = TRANSFER_INCREMENT) -> Decimal:
    """Round ``|value|`` up to the next multiple of ``increment``.

    >>> round_up_to_increment(Decimal('-1000.01'))
    Decimal('1100')
    """
    magnitude = abs(_as_decimal(value))
    return (magnitude / increment).to_integral_value(rounding=ROUND_CEILING) * increment


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


def build_events(
    opening_balance: Number,
    incomes: Iterable[Entry],
    expenses: Iterable[Entry],
    period_start: date,
) -> List[Event]:
    """Return the opening balance plus every entry as events sorted by date.

    The sort is stable, so same-day events keep the order opening balance,
    incomes, expenses, each in collection order.
    """
    events = [
        Event(
            date=period_start,
            description=OPENING_BALANCE_LABEL,
            kind=EventKind.OPENING_BALANCE,
            amount=_as_decimal(opening_balance),
        )
    ]
    events.extend(
        Event(date=e.date, description=e.name, kind=EventKind.INCOME, amount=_as_decimal(e.amount))
        for e in incomes
    )
    events.extend(
        Event(date=e.date, description=e.name, kind=EventKind.EXPENSE, amount=_as_decimal(e.amount))
        for e in expenses
    )
    return sorted(events, key=lambda event: event.date)


def running_balance_pass(events: Sequence[Event]) -> BalancePass:
    """Compute the balance after every event and the month totals."""
    balance = ZERO
    total_income = ZERO
    total_expenses = ZERO
    min_balance = Decimal('Infinity')
    rows: List[TimelineRow] = []

    for event in events:
        change = ZERO
        if event.kind is EventKind.OPENING_BALANCE:
            # the opening amount becomes the balance, it is not a change
            balance = event.amount
        elif event.kind is EventKind.INCOME:
            change = event.amount
            balance += event.amount
            total_income += event.amount
        elif event.kind is EventKind.EXPENSE:
            change = -event.amount
            balance -= event.amount
            total_expenses += event.amount

        if balance < min_balance:
            min_balance = balance

        rows.append(
            TimelineRow(
                date=event.date,
                description=event.description,
                kind=event.kind,
                change=change,
                balance_after=balance,
            )
        )

    return BalancePass(rows, total_income, total_expenses, balance, min_balance)


def recommend_transfers(
    opening_balance: Number, events: Sequence[Event]
) -> List[TransferRecommendation]:
    """Greedily suggest top-up transfers that keep the balance non-negative.

    Each transfer is assumed to land on the date that triggered it, so it
    is added back into the running balance before the next event.  At most
    one recommendation exists per date; a deeper shortfall later the same
    day raises it, never lowers it.  Earlier recommendations are not
    revisited when later income would have covered them.
    """
    running = _as_decimal(opening_balance)
    transfers: List[TransferRecommendation] = []
    index_by_date: Dict[date, int] = {}

    for event in events:
        running += event.signed_amount
        if running >= 0:
            continue

        needed = round_up_to_increment(running)
        idx = index_by_date.get(event.date)
        if idx is None:
            index_by_date[event.date] = len(transfers)
            transfers.append(
                TransferRecommendation(date=event.date, before_event=event.description, amount=needed)
            )
            running += needed
        elif needed > transfers[idx].amount:
            delta = needed - transfers[idx].amount
            transfers[idx] = replace(transfers[idx], amount=needed)
            running += delta

    return transfers


def aggregate_transfer_need(min_balance: Decimal) -> Decimal:
    """Single transfer covering the lowest unadjusted balance of the month."""
    if min_balance < 0:
        return round_up_to_increment(min_balance)
    return ZERO


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def compute_timeline(
    opening_balance: Number,
    incomes: Iterable[Entry],
    expenses: Iterable[Entry],
    period_start: date,
) -> LedgerResult:
    """Compute the timeline, transfer recommendations and stats for a month.

    Parameters
    ----------
    opening_balance : Decimal
        Checking balance on ``period_start``.  Any sign is accepted.
    incomes, expenses : iterable of Entry
        Entries with non-negative amounts.  They are not validated here.
    period_start : datetime.date
        First day of the planned month; dates the opening balance row.

    Returns
    -------
    LedgerResult
        ``timeline`` has ``1 + len(incomes) + len(expenses)`` rows.
    """
    events = build_events(opening_balance, incomes, expenses, period_start)
    balances = running_balance_pass(events)
    transfers = recommend_transfers(opening_balance, events)

    stats = Stats(
        total_income=balances.total_income,
        total_expenses=balances.total_expenses,
        end_balance=balances.end_balance,
        transfer_needed=aggregate_transfer_need(balances.min_balance),
    )
    logger.debug(
        "Computed %d timeline rows for %s: end balance %s, %d transfer(s), transfer needed %s",
        len(balances.rows),
        period_start.isoformat(),
        stats.end_balance,
        len(transfers),
        stats.transfer_needed,
    )
    return LedgerResult(timeline=tuple(balances.rows), transfers=tuple(transfers), stats=stats)


# ---------------------------------------------------------------------------
# DataFrame views
# ---------------------------------------------------------------------------


def timeline_frame(result: LedgerResult) -> pd.DataFrame:
    """Return the timeline as a DataFrame for tables and charts."""
    if not result.timeline:
        return pd.DataFrame(columns=TIMELINE_COLUMNS)
    df = pd.DataFrame(
        [
            {
                'Date': row.date,
                'Description': row.description,
                'Type': row.kind.value,
                'Change': float(row.change),
                'Balance': float(row.balance_after),
                'Is Negative': row.is_negative,
            }
            for row in result.timeline
        ],
        columns=TIMELINE_COLUMNS,
    )
    df['Date'] = pd.to_datetime(df['Date'])
    return df


def transfers_frame(result: LedgerResult) -> pd.DataFrame:
    """Return the transfer recommendations as a DataFrame."""
    if not result.transfers:
        return pd.DataFrame(columns=TRANSFER_COLUMNS)
    df = pd.DataFrame(
        [
            {'Date': t.date, 'Before': t.before_event, 'Amount': float(t.amount)}
            for t in result.transfers
        ],
        columns=TRANSFER_COLUMNS,
    )
    df['Date'] = pd.to_datetime(df['Date'])
    return df
