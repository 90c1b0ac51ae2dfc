"""Plotly figures for the cash flow timeline.

Functions accept a :class:`~cashflow_planner.models.LedgerResult` and
return a ``plotly.graph_objects.Figure`` that Streamlit renders via
``st.plotly_chart``.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from .formatting import format_currency
from .ledger import timeline_frame, transfers_frame
from .models import LedgerResult

POSITIVE_COLOR = '#2e7d32'
NEGATIVE_COLOR = '#c62828'
TRANSFER_COLOR = '#f9a825'


def create_balance_chart(result: LedgerResult, title: str | None = None) -> go.Figure:
    """Plot the running balance as a step line.

    Parameters
    ----------
    result : LedgerResult
        Output of :func:`~cashflow_planner.ledger.compute_timeline`.
    title : str, optional
        Chart title.  Defaults to "Running Balance".

    Returns
    -------
    plotly.graph_objects.Figure
        Step chart with negative points in red, a zero reference line and
        one marker per recommended transfer.
    """
    if len(result.timeline) <= 1:
        fig = go.Figure()
        fig.update_layout(title="No data to display")
        return fig

    df = timeline_frame(result)
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df['Date'],
            y=df['Balance'],
            mode='lines+markers',
            line={'shape': 'hv', 'color': POSITIVE_COLOR},
            marker={
                'color': np.where(df['Is Negative'], NEGATIVE_COLOR, POSITIVE_COLOR),
                'size': 8,
            },
            text=df['Description'],
            hovertemplate='%{x|%b %d}<br>%{text}<br>Balance: %{y:$,.2f}<extra></extra>',
            name='Balance',
        )
    )

    transfers = transfers_frame(result)
    if not transfers.empty:
        fig.add_trace(
            go.Scatter(
                x=transfers['Date'],
                y=[0.0] * len(transfers),
                mode='markers',
                marker={'symbol': 'triangle-up', 'size': 14, 'color': TRANSFER_COLOR},
                text=[
                    f"Transfer {format_currency(t.amount)} before {t.before_event}"
                    for t in result.transfers
                ],
                hovertemplate='%{x|%b %d}<br>%{text}<extra></extra>',
                name='Recommended transfer',
            )
        )

    fig.add_hline(y=0, line_dash='dash', line_color=NEGATIVE_COLOR, opacity=0.6)
    fig.update_layout(
        title=title or "Running Balance",
        xaxis_title="Date",
        yaxis_title="Balance",
        hovermode='closest',
        legend={'orientation': 'h', 'y': -0.2},
    )
    return fig
