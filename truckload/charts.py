from __future__ import annotations

from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from truckload.aggregation import DailyCount, StatusPercentage, daily_counts_frame
from truckload.records import STATUS_COLORS, STATUS_LABELS, STATUS_ORDER

alt.data_transformers.disable_max_rows()

_STATUS_SCALE = alt.Scale(
    domain=[STATUS_LABELS[s] for s in STATUS_ORDER],
    range=[STATUS_COLORS[s] for s in STATUS_ORDER],
)


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def daily_trend_chart(daily: Sequence[DailyCount]) -> alt.Chart:
    df = daily_counts_frame(daily)
    return (
        alt.Chart(df)
        .mark_line(point={"filled": True, "size": 60}, color=STATUS_COLORS[STATUS_ORDER[0]])
        .encode(
            x=alt.X("date:T", title="Dia", axis=alt.Axis(format="%d/%m", grid=False)),
            y=alt.Y("count:Q", title="Carregamentos", axis=alt.Axis(format="d", gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip("date:T", title="Dia", format="%d/%m/%Y"), alt.Tooltip("count:Q", title="Carregamentos")],
        )
        .properties(height=240)
    )


def _status_frame(percentages: Sequence[StatusPercentage]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"label": p.label, "count": p.count, "percentage": p.percentage / 100} for p in percentages],
        columns=["label", "count", "percentage"],
    )


def status_bar_chart(percentages: Sequence[StatusPercentage]) -> alt.Chart:
    df = _status_frame(percentages)
    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=alt.X("label:N", title=None, sort=None),
            y=alt.Y("count:Q", title="Carregamentos", axis=alt.Axis(format="d")),
            color=alt.Color("label:N", scale=_STATUS_SCALE, legend=None),
            tooltip=["label", "count"],
        )
        .properties(height=250)
    )


def status_pie_chart(percentages: Sequence[StatusPercentage]) -> alt.Chart:
    df = _status_frame(percentages)
    return (
        alt.Chart(df)
        .mark_arc(stroke="white", strokeWidth=2)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("label:N", scale=_STATUS_SCALE, title="Status"),
            tooltip=["label", "count", alt.Tooltip("percentage:Q", format=".1%")],
        )
        .properties(height=240)
    )
