from __future__ import annotations

from datetime import date
from decimal import Decimal

import plotly.graph_objects as go

from cashflow_planner import visualization as viz
from cashflow_planner.ledger import compute_timeline
from cashflow_planner.models import Entry

START = date(2025, 3, 1)


def _entry(name, amount, day):
    return Entry(id=name, name=name, amount=Decimal(amount), date=date(2025, 3, day))


def test_balance_chart_with_only_opening_row_is_empty() -> None:
    fig = viz.create_balance_chart(compute_timeline(500, (), (), START))

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 0
    assert fig.layout.title.text == 'No data to display'


def test_balance_chart_marks_negative_points_and_transfers() -> None:
    result = compute_timeline(
        Decimal('1000'), (_entry('Paycheck', '500', 10),), (_entry('Rent', '2000', 5),), START
    )
    fig = viz.create_balance_chart(result, title='March')

    assert fig.layout.title.text == 'March'
    balance, transfers = fig.data
    assert list(balance.y) == [1000.0, -1000.0, -500.0]
    assert list(balance.marker.color) == [viz.POSITIVE_COLOR, viz.NEGATIVE_COLOR, viz.NEGATIVE_COLOR]
    assert balance.line.shape == 'hv'
    assert len(transfers.x) == 1
    assert 'Transfer $1,000.00 before Rent' in transfers.text[0]


def test_balance_chart_without_transfers_has_single_trace() -> None:
    result = compute_timeline(1000, (_entry('Paycheck', '500', 10),), (), START)
    fig = viz.create_balance_chart(result)

    assert len(fig.data) == 1
    assert fig.layout.title.text == 'Running Balance'
