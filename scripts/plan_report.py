#!/usr/bin/env python3
"""Print the cash flow timeline and transfer plan for a stored month."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cashflow_planner.formatting import format_change, format_currency, format_short_date  # noqa: E402
from cashflow_planner.ledger import compute_timeline  # noqa: E402
from cashflow_planner.models import LedgerResult  # noqa: E402
from cashflow_planner.period import Period  # noqa: E402
from cashflow_planner.plan_storage import PlanStore  # noqa: E402


def render_report(period: Period, result: LedgerResult) -> List[str]:
    stats = result.stats
    lines = [
        f"Cash flow for {period.label}",
        f"  Total income:    {format_currency(stats.total_income)}",
        f"  Total expenses:  {format_currency(stats.total_expenses)}",
        f"  End balance:     {format_currency(stats.end_balance)}",
        f"  Transfer needed: {format_currency(stats.transfer_needed)}",
        "",
    ]

    if result.transfers:
        lines.append("Recommended savings transfers:")
        for t in result.transfers:
            lines.append(
                f"  By {format_short_date(t.date):<7} {format_currency(t.amount):>12}  before {t.before_event}"
            )
        lines.append("")

    lines.append("Timeline:")
    for row in result.timeline:
        marker = "  !" if row.is_negative else ""
        lines.append(
            f"  {format_short_date(row.date):<7} {row.description:<24.24} "
            f"{format_change(row.change):>12} {format_currency(row.balance_after):>12}{marker}"
        )
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("year", type=int)
    parser.add_argument("month", type=int, help="1-12")
    parser.add_argument("--store", type=Path, default=None, help="Plan store JSON file")
    args = parser.parse_args(argv)

    try:
        period = Period(args.year, args.month)
    except ValueError as exc:
        parser.error(str(exc))

    plan = PlanStore(args.store).load(period)
    result = compute_timeline(plan.starting_balance, plan.incomes, plan.expenses, period.start)
    print("\n".join(render_report(period, result)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
