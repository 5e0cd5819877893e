"""
Plotly figure builders for the dashboard charts.

Builders read aggregated rows and interaction state and return a figure;
they never modify either.
"""

import logging

import pandas as pd
import plotly.graph_objects as go

from .config import CHART_COLORS, REGION_BAR_COLOR
from .interaction import ChartSelectionState, HoverState

logger = logging.getLogger(__name__)

_SELECTION_FILL = "rgba(0, 0, 0, 0.08)"
_PENDING_FILL = "rgba(0, 0, 0, 0.04)"
_FADED_OPACITY = 0.35

BAR_HOVERTEMPLATE = (
    "<b>%{customdata[0]}</b><br>"
    "Teachers: %{y}<br>"
    "Percentage: %{customdata[1]:.1f}%"
    "<extra></extra>"
)

PIE_HOVERTEMPLATE = (
    "<b>%{label}</b><br>"
    "Teachers: %{value}<br>"
    "Percentage: %{customdata[0]:.1f}%"
    "<extra></extra>"
)


def _bar_opacity(n_rows: int, selection: ChartSelectionState) -> list[float]:
    bounds = selection.bounds
    if bounds is None:
        return [1.0] * n_rows
    left, right = bounds
    return [1.0 if left <= i <= right else _FADED_OPACITY for i in range(n_rows)]


def build_distribution_bar(
    rows: pd.DataFrame,
    key: str,
    selection: ChartSelectionState | None = None,
    color: str = REGION_BAR_COLOR,
    title: str = "",
) -> go.Figure:
    """Bar chart of teacher counts per category with selection overlays.

    Parameters
    ----------
    rows : AggregatedRow DataFrame (key, label, count, total, percentage).
    key : Name of the grouping column (``lga``, ``qualification``, ...),
          shown in full in the tooltip.
    selection : Drag state of this chart. Committed bounds are shaded and
                bars outside them faded; pending anchors get a lighter shade.
    """
    selection = selection or ChartSelectionState()
    fig = go.Figure()

    if rows.empty:
        logger.warning("No rows for chart '%s'", title)
        fig.update_layout(
            title=title,
            height=400,
            plot_bgcolor="rgba(0,0,0,0)",
            annotations=[dict(text="No teachers recorded", showarrow=False, x=0.5, y=0.5,
                              xref="paper", yref="paper")],
        )
        return fig

    customdata = list(zip(rows[key].astype(str), rows["percentage"].astype(float)))

    # One x position per row; labels are tick text only
    positions = list(range(len(rows)))

    fig.add_trace(go.Bar(
        x=positions,
        y=rows["count"],
        name="Teachers",
        marker_color=color,
        marker_opacity=_bar_opacity(len(rows), selection),
        text=rows["count"],
        textposition="outside",
        customdata=customdata,
        hovertemplate=BAR_HOVERTEMPLATE,
    ))

    if selection.bounds is not None:
        left, right = selection.bounds
        fig.add_vrect(x0=left - 0.5, x1=right + 0.5, fillcolor=_SELECTION_FILL, line_width=0, layer="below")

    if selection.pending_bounds is not None:
        left, right = selection.pending_bounds
        fig.add_vrect(x0=left - 0.5, x1=right + 0.5, fillcolor=_PENDING_FILL,
                      line_width=1, line_dash="dot", layer="below")

    fig.update_layout(
        title=title,
        yaxis_title="Number of Teachers",
        xaxis_tickangle=-45,
        height=400,
        dragmode="select",
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=20, r=30, t=40, b=90),
    )
    fig.update_xaxes(tickmode="array", tickvals=positions, ticktext=rows["label"].tolist(),
                     range=[-0.5, len(rows) - 0.5])
    fig.update_yaxes(gridcolor="#eee", rangemode="tozero")
    return fig


def build_subject_pie(
    rows: pd.DataFrame,
    hover: HoverState | None = None,
    title: str = "",
) -> go.Figure:
    """Donut chart of the top subjects; the active slice is pulled out."""
    hover = hover or HoverState()
    fig = go.Figure()

    if rows.empty:
        logger.warning("No rows for chart '%s'", title)
        fig.update_layout(title=title, height=400)
        return fig

    active = hover.active_index
    if active is not None and not 0 <= active < len(rows):
        active = None

    pull = [0.08 if i == active else 0.0 for i in range(len(rows))]
    colors = [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(rows))]

    fig.add_trace(go.Pie(
        labels=rows["label"],
        values=rows["count"],
        hole=0.6,
        pull=pull,
        sort=False,
        direction="clockwise",
        marker=dict(colors=colors, line=dict(color="#fff", width=1)),
        textinfo="none",
        customdata=rows[["percentage"]].astype(float).to_numpy(),
        hovertemplate=PIE_HOVERTEMPLATE,
    ))

    annotations = []
    if active is not None:
        row = rows.iloc[active]
        annotations.append(dict(
            text=f"<b>{row['label']}</b><br>{int(row['count'])} ({float(row['percentage']):.1f}%)",
            showarrow=False,
            x=0.5,
            y=0.5,
            font=dict(size=12, color="#333"),
        ))

    fig.update_layout(
        title=title,
        height=400,
        annotations=annotations,
        legend=dict(orientation="v", x=1.02, y=0.5, font=dict(size=12)),
        margin=dict(l=20, r=100, t=40, b=20),
    )
    return fig


def selection_indices(event) -> list[int]:
    """Extract selected point indices from a streamlit plotly selection event.

    Accepts the attribute-style event object or its dict form; returns []
    when nothing is selected.
    """
    if not event:
        return []
    selection = event.get("selection") if isinstance(event, dict) else getattr(event, "selection", None)
    if not selection:
        return []
    points = selection.get("points") if isinstance(selection, dict) else getattr(selection, "points", None)
    if not points:
        return []
    indices = []
    for point in points:
        idx = point.get("point_index", point.get("point_number"))
        if idx is not None:
            indices.append(int(idx))
    return sorted(set(indices))
