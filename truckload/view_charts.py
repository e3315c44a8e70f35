from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List

from truckload.aggregation import compute_daily_counts, compute_status_counts, compute_status_percentages
from truckload.charts import daily_trend_chart, status_bar_chart, status_pie_chart, to_vega_spec
from truckload.geometry import BarInput, PieInput, bar_geometry, line_geometry, pie_geometry, render_svg
from truckload.records import BAR_LABELS, STATUS_COLORS, STATUS_ORDER, LoadingRecord, LoadingStatus


def bar_inputs(counts) -> List[BarInput]:
    return [BarInput(label=BAR_LABELS[s], value=counts.get(s), color=STATUS_COLORS[s]) for s in STATUS_ORDER]


def pie_inputs(percentages) -> List[PieInput]:
    return [
        PieInput(
            label=p.label,
            value=p.count,
            percentage=p.percentage,
            color=STATUS_COLORS[LoadingStatus(p.status)],
        )
        for p in percentages
    ]


def compute_charts(records: Iterable[LoadingRecord]) -> Dict[str, Any]:
    records = list(records)
    daily = compute_daily_counts(records)
    counts = compute_status_counts(records)
    percentages = compute_status_percentages(counts)

    line = line_geometry(daily) if daily else None
    bar = bar_geometry(bar_inputs(counts))
    pie = pie_geometry(pie_inputs(percentages))

    svg = {
        "daily": render_svg(line) if line is not None else None,
        "status_bar": render_svg(bar),
        "status_pie": render_svg(pie) if not pie.is_empty else None,
    }
    charts = {
        "daily_trend": to_vega_spec(daily_trend_chart(daily)) if daily else None,
        "status_bar": to_vega_spec(status_bar_chart(percentages)),
        "status_pie": to_vega_spec(status_pie_chart(percentages)) if counts.total else None,
    }

    return {
        "daily": [asdict(d) for d in daily],
        "status_counts": asdict(counts),
        "total": counts.total,
        "percentages": [asdict(p) for p in percentages],
        "geometry": {
            "daily": asdict(line) if line is not None else None,
            "status_bar": asdict(bar),
            "status_pie": asdict(pie),
        },
        "svg": svg,
        "charts": charts,
    }
