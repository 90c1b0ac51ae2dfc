"""Streamlit app for the cash flow planner.

The page lets the user pick a month, enter the starting checking balance
and add or delete income and expense entries.  Every change is saved to
the plan store and the ledger is recomputed from scratch, so the summary,
the recommended savings transfers, the timeline table and the balance
chart always reflect the stored plan.

To run the planner from the command line::

    streamlit run cashflow_planner/dashboard.py
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import replace
from datetime import date
from typing import Tuple

import pandas as pd
import streamlit as st

# Conditional imports to support ``streamlit run cashflow_planner/dashboard.py``
# as well as importing the module from the package.
if __package__:
    from . import formatting as fmt
    from . import visualization as viz
    from .entries import EntryValidationError, add_entry, create_entry, delete_entry, sorted_entries
    from .entries import entries_outside_period, parse_amount
    from .ledger import compute_timeline, timeline_frame
    from .config import ensure_data_directories
    from .logging_config import setup_logging
    from .models import Entry, EventKind, LedgerResult, MonthPlan
    from .period import MONTH_NAMES, Period, selectable_years
    from .plan_storage import PlanStore
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from cashflow_planner import formatting as fmt  # type: ignore
    from cashflow_planner import visualization as viz  # type: ignore
    from cashflow_planner.entries import (  # type: ignore
        EntryValidationError,
        add_entry,
        create_entry,
        delete_entry,
        entries_outside_period,
        parse_amount,
        sorted_entries,
    )
    from cashflow_planner.ledger import compute_timeline, timeline_frame  # type: ignore
    from cashflow_planner.config import ensure_data_directories  # type: ignore
    from cashflow_planner.logging_config import setup_logging  # type: ignore
    from cashflow_planner.models import Entry, EventKind, LedgerResult, MonthPlan  # type: ignore
    from cashflow_planner.period import MONTH_NAMES, Period, selectable_years  # type: ignore
    from cashflow_planner.plan_storage import PlanStore  # type: ignore

logger = logging.getLogger(__name__)

PLAN_STATE_KEY = 'month_plan'
LOADED_PERIOD_KEY = 'loaded_period'


# ---------------------------------------------------------------------------
# Session state helpers
# ---------------------------------------------------------------------------


def _rerun() -> None:
    rerun_fn = getattr(st, 'rerun', None) or getattr(st, 'experimental_rerun', None)
    if rerun_fn:
        rerun_fn()


def _ensure_month_state(period: Period, store: PlanStore) -> MonthPlan:
    """Load the stored plan when the selected month changes."""
    if st.session_state.get(LOADED_PERIOD_KEY) != period.key:
        st.session_state[PLAN_STATE_KEY] = store.load(period)
        st.session_state[LOADED_PERIOD_KEY] = period.key
    return st.session_state[PLAN_STATE_KEY]


def _persist_month_state(period: Period, plan: MonthPlan, store: PlanStore) -> bool:
    """Keep ``plan`` in the session and write it to the store."""
    st.session_state[PLAN_STATE_KEY] = plan
    st.session_state[LOADED_PERIOD_KEY] = period.key
    try:
        store.save(period, plan)
    except OSError as exc:
        logger.error("Could not save %s: %s", period.key, exc)
        st.error(f"Could not save your plan: {exc}")
        return False
    return True


def _collection(plan: MonthPlan, kind: EventKind) -> Tuple[Entry, ...]:
    return plan.incomes if kind is EventKind.INCOME else plan.expenses


def _with_collection(plan: MonthPlan, kind: EventKind, entries: Tuple[Entry, ...]) -> MonthPlan:
    if kind is EventKind.INCOME:
        return replace(plan, incomes=entries)
    return replace(plan, expenses=entries)


def _display_timeline(result: LedgerResult) -> pd.DataFrame:
    df = timeline_frame(result)
    if df.empty:
        return df
    return pd.DataFrame(
        {
            'Date': [fmt.format_short_date(row.date) for row in result.timeline],
            'Description': df['Description'],
            'Type': df['Type'],
            'Change': [fmt.format_change(row.change) for row in result.timeline],
            'Balance': [fmt.format_currency(row.balance_after) for row in result.timeline],
            'Status': [fmt.balance_status(row.balance_after) for row in result.timeline],
        }
    )


# ---------------------------------------------------------------------------
# UI sections
# ---------------------------------------------------------------------------


def _select_period() -> Period:  # pragma: no cover - UI only
    today = date.today()
    col_month, col_year = st.columns(2)
    month_name = col_month.selectbox("Month", MONTH_NAMES, index=today.month - 1)
    years = selectable_years(today)
    year = col_year.selectbox("Year", years, index=years.index(today.year))
    return Period(int(year), MONTH_NAMES.index(month_name) + 1)


def _render_summary(result: LedgerResult) -> None:  # pragma: no cover - UI only
    stats = result.stats
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Income", fmt.format_currency(stats.total_income))
    c2.metric("Total Expenses", fmt.format_currency(stats.total_expenses))
    c3.metric("End Balance", fmt.format_currency(stats.end_balance))
    c4.metric("Transfer Needed", fmt.format_currency(stats.transfer_needed))


def _render_entry_card(
    title: str, kind: EventKind, period: Period, plan: MonthPlan, store: PlanStore
) -> None:  # pragma: no cover - UI only
    st.subheader(title)
    entries = _collection(plan, kind)

    with st.form(f"add_{kind.value}", clear_on_submit=True):
        name = st.text_input("Description", key=f"{kind.value}_name")
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f", key=f"{kind.value}_amount")
        entry_date = st.date_input(
            "Date", value=period.start, min_value=period.start, max_value=period.end, key=f"{kind.value}_date"
        )
        submitted = st.form_submit_button("Add")

    if submitted:
        try:
            entry = create_entry(name, amount, entry_date)
            updated = add_entry(entries, entry)
        except EntryValidationError as exc:
            st.error(str(exc))
        else:
            if _persist_month_state(period, _with_collection(plan, kind, updated), store):
                _rerun()

    if not entries:
        st.caption(f"No {kind.value} entries yet")
        return

    outside = entries_outside_period(entries, period)
    if outside:
        st.warning(f"{len(outside)} {kind.value} entr{'y is' if len(outside) == 1 else 'ies are'} dated outside {period.label}.")

    sign = '+' if kind is EventKind.INCOME else '-'
    for entry in sorted_entries(entries):
        info, amount_col, action = st.columns([4, 2, 1])
        info.markdown(f"**{entry.name}**  \n{fmt.format_short_date(entry.date)}")
        amount_col.markdown(fmt.escape_dollar_for_markdown(f"{sign}{fmt.format_currency(entry.amount)}"))
        if action.button("✕", key=f"delete_{entry.id}", help="Delete entry"):
            updated = delete_entry(entries, entry.id)
            if _persist_month_state(period, _with_collection(plan, kind, updated), store):
                _rerun()


def _render_transfers(result: LedgerResult) -> None:  # pragma: no cover - UI only
    if not result.transfers:
        return
    lines = [
        f"- By **{fmt.format_short_date(t.date)}** (before {t.before_event}): "
        f"{fmt.escape_dollar_for_markdown(fmt.format_currency(t.amount))}"
        for t in result.transfers
    ]
    st.warning(
        "**Recommended Savings Transfers**\n\n"
        "Transfer these amounts before the listed dates to avoid a negative balance:\n\n"
        + "\n".join(lines)
    )


def _render_timeline(result: LedgerResult) -> None:  # pragma: no cover - UI only
    st.subheader("Cash Flow Timeline")
    if len(result.timeline) <= 1:
        st.info("Add income and expenses to see your cash flow timeline")
        return
    st.dataframe(_display_timeline(result), hide_index=True, use_container_width=True)
    st.plotly_chart(viz.create_balance_chart(result), use_container_width=True)


def main() -> None:  # pragma: no cover - UI only
    """Entry point for the Streamlit app."""
    ensure_data_directories()
    setup_logging()
    st.set_page_config(page_title="Cash Flow Planner", layout="wide")
    st.title("Cash Flow Planner")
    st.caption("Plan your checking account & savings transfers")

    store = PlanStore()
    period = _select_period()
    plan = _ensure_month_state(period, store)

    balance = st.number_input(
        "Starting Checking Balance",
        value=float(plan.starting_balance),
        step=0.01,
        format="%.2f",
        key=f"balance_{period.key}",
    )
    new_balance = parse_amount(balance, allow_negative=True)
    if new_balance != plan.starting_balance:
        plan = replace(plan, starting_balance=new_balance)
        _persist_month_state(period, plan, store)

    result = compute_timeline(plan.starting_balance, plan.incomes, plan.expenses, period.start)
    _render_summary(result)

    col_income, col_expense = st.columns(2)
    with col_income:
        _render_entry_card("Income", EventKind.INCOME, period, plan, store)
    with col_expense:
        _render_entry_card("Expenses", EventKind.EXPENSE, period, plan, store)

    _render_transfers(result)
    _render_timeline(result)


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
