"""Hand-drawn chart geometry (line, bar, pie) for the charts page.

Every generator is a pure function from an aggregate to plain coordinates; the
``*_svg`` helpers turn a geometry into markup for the rendering layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from html import escape
from typing import List, Sequence, Union

import numpy as np

from truckload.aggregation import DailyCount
from truckload.dates import parse_iso_date

GRID_RATIOS = (0.0, 0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class Padding:
    top: float
    right: float
    bottom: float
    left: float


LINE_WIDTH = 600
LINE_HEIGHT = 200
LINE_PADDING = Padding(top=20, right=20, bottom=40, left=50)

BAR_HEIGHT = 250
BAR_WIDTH = 80
BAR_SPACING = 40
BAR_PADDING = Padding(top=20, right=40, bottom=60, left=60)

PIE_CENTER_X = 150
PIE_CENTER_Y = 120
PIE_RADIUS = 80


@dataclass(frozen=True)
class GridLine:
    y: float
    x1: float
    x2: float
    label: str
    label_x: float
    label_y: float


@dataclass(frozen=True)
class PlotPoint:
    x: float
    y: float
    count: int


@dataclass(frozen=True)
class AxisLabel:
    x: float
    y: float
    text: str


@dataclass(frozen=True)
class LineGeometry:
    width: float
    height: float
    padding: Padding
    plot_width: float
    plot_height: float
    max_value: int
    points: List[PlotPoint]
    path: str
    labels: List[AxisLabel]
    gridlines: List[GridLine]


@dataclass(frozen=True)
class BarInput:
    label: str
    value: float
    color: str


@dataclass(frozen=True)
class BarRect:
    label: str
    value: float
    color: str
    x: float
    y: float
    width: float
    height: float
    value_label_y: float
    label_y: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


@dataclass(frozen=True)
class BarGeometry:
    width: float
    height: float
    padding: Padding
    plot_height: float
    max_value: float
    bars: List[BarRect]
    gridlines: List[GridLine]


@dataclass(frozen=True)
class PieInput:
    label: str
    value: float
    percentage: float
    color: str


@dataclass(frozen=True)
class Sector:
    label: str
    value: float
    percentage: float
    color: str
    start_angle: float
    end_angle: float
    large_arc: bool
    path: str


@dataclass(frozen=True)
class PieGeometry:
    center_x: float
    center_y: float
    radius: float
    total: float
    sectors: List[Sector] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sectors


def _num(value: float) -> str:
    text = "%.2f" % (round(value, 2) + 0.0)
    return text.rstrip("0").rstrip(".")


def _gridlines(max_value: float, padding: Padding, plot_height: float, x2: float) -> List[GridLine]:
    lines = []
    for ratio in GRID_RATIOS:
        y = padding.top + plot_height * (1 - ratio)
        lines.append(
            GridLine(
                y=y,
                x1=padding.left,
                x2=x2,
                label=str(int(math.floor(max_value * ratio + 0.5))),
                label_x=padding.left - 10,
                label_y=y + 4,
            )
        )
    return lines


def line_geometry(series: Sequence[DailyCount]) -> LineGeometry:
    """Plot coordinates for a daily series.

    Raises ``ValueError`` on an empty series; callers show a placeholder instead.
    """
    if not series:
        raise ValueError("line_geometry needs at least one point")

    padding = LINE_PADDING
    plot_width = LINE_WIDTH - padding.left - padding.right
    plot_height = LINE_HEIGHT - padding.top - padding.bottom
    max_value = max(max(p.count for p in series), 1)

    # linspace of a single sample is the left edge
    xs = np.linspace(padding.left, padding.left + plot_width, num=len(series))
    points = [
        PlotPoint(x=float(x), y=padding.top + plot_height - (p.count / max_value) * plot_height, count=p.count)
        for x, p in zip(xs, series)
    ]
    path = " ".join(f"{'M' if i == 0 else 'L'} {_num(p.x)} {_num(p.y)}" for i, p in enumerate(points))

    label_y = padding.top + plot_height + 20
    labels = []
    for x, p in zip(xs, series):
        day = parse_iso_date(p.date)
        labels.append(AxisLabel(x=float(x), y=label_y, text=f"{day.day}/{day.month}"))

    return LineGeometry(
        width=LINE_WIDTH,
        height=LINE_HEIGHT,
        padding=padding,
        plot_width=plot_width,
        plot_height=plot_height,
        max_value=max_value,
        points=points,
        path=path,
        labels=labels,
        gridlines=_gridlines(max_value, padding, plot_height, LINE_WIDTH - padding.right),
    )


def bar_geometry(data: Sequence[BarInput]) -> BarGeometry:
    padding = BAR_PADDING
    plot_height = BAR_HEIGHT - padding.top - padding.bottom
    width = len(data) * (BAR_WIDTH + BAR_SPACING) + 100
    max_value = max([d.value for d in data] + [1])

    bars = []
    for i, item in enumerate(data):
        x = padding.left + i * (BAR_WIDTH + BAR_SPACING) + BAR_SPACING
        height = (item.value / max_value) * plot_height
        y = padding.top + plot_height - height
        bars.append(
            BarRect(
                label=item.label,
                value=item.value,
                color=item.color,
                x=x,
                y=y,
                width=BAR_WIDTH,
                height=height,
                value_label_y=y - 8,
                label_y=padding.top + plot_height + 25,
            )
        )

    return BarGeometry(
        width=width,
        height=BAR_HEIGHT,
        padding=padding,
        plot_height=plot_height,
        max_value=max_value,
        bars=bars,
        gridlines=_gridlines(max_value, padding, plot_height, width - padding.right),
    )


def _arc_point(cx: float, cy: float, radius: float, angle_deg: float):
    rad = math.radians(angle_deg)
    return cx + radius * math.cos(rad), cy + radius * math.sin(rad)


def pie_geometry(data: Sequence[PieInput]) -> PieGeometry:
    cx, cy, r = PIE_CENTER_X, PIE_CENTER_Y, PIE_RADIUS
    total = sum(d.value for d in data)
    if total == 0:
        return PieGeometry(center_x=cx, center_y=cy, radius=r, total=0)

    sectors = []
    current = -90.0
    for item in data:
        sweep = (item.value / total) * 360
        start, end = current, current + sweep
        x1, y1 = _arc_point(cx, cy, r, start)
        x2, y2 = _arc_point(cx, cy, r, end)
        large_arc = sweep > 180
        if sweep >= 360:
            # a single arc whose endpoints coincide draws nothing
            mx, my = _arc_point(cx, cy, r, start + 180)
            arc = f"A {r} {r} 0 1 1 {_num(mx)} {_num(my)} A {r} {r} 0 1 1 {_num(x2)} {_num(y2)}"
        else:
            arc = f"A {r} {r} 0 {1 if large_arc else 0} 1 {_num(x2)} {_num(y2)}"
        path = " ".join([f"M {cx} {cy}", f"L {_num(x1)} {_num(y1)}", arc, "Z"])
        sectors.append(
            Sector(
                label=item.label,
                value=item.value,
                percentage=item.percentage,
                color=item.color,
                start_angle=start,
                end_angle=end,
                large_arc=large_arc,
                path=path,
            )
        )
        current = end

    return PieGeometry(center_x=cx, center_y=cy, radius=r, total=total, sectors=sectors)


def _grid_svg(lines: Sequence[GridLine], dashed: bool) -> List[str]:
    dash = ' stroke-dasharray="4"' if dashed else ""
    out = []
    for g in lines:
        out.append(
            f'<line x1="{_num(g.x1)}" y1="{_num(g.y)}" x2="{_num(g.x2)}" y2="{_num(g.y)}" '
            f'stroke="#f3f4f6" stroke-width="1"{dash}/>'
        )
        out.append(
            f'<text x="{_num(g.label_x)}" y="{_num(g.label_y)}" text-anchor="end" font-size="12" '
            f'fill="#6b7280">{g.label}</text>'
        )
    return out


def _axes_svg(padding: Padding, plot_height: float, right: float) -> List[str]:
    bottom = padding.top + plot_height
    return [
        f'<line x1="{_num(padding.left)}" y1="{_num(padding.top)}" x2="{_num(padding.left)}" y2="{_num(bottom)}" stroke="#e5e7eb" stroke-width="2"/>',
        f'<line x1="{_num(padding.left)}" y1="{_num(bottom)}" x2="{_num(right)}" y2="{_num(bottom)}" stroke="#e5e7eb" stroke-width="2"/>',
    ]


def line_svg(geom: LineGeometry) -> str:
    height = geom.height + 40
    parts = [f'<svg width="100%" height="{_num(height)}" viewBox="0 0 {_num(geom.width)} {_num(height)}" xmlns="http://www.w3.org/2000/svg">']
    parts += _axes_svg(geom.padding, geom.plot_height, geom.width - geom.padding.right)
    parts += _grid_svg(geom.gridlines, dashed=False)
    parts.append(f'<path d="{geom.path}" fill="none" stroke="#3b82f6" stroke-width="3"/>')
    for p in geom.points:
        parts.append(f'<circle cx="{_num(p.x)}" cy="{_num(p.y)}" r="5" fill="#3b82f6"/>')
        parts.append(f'<circle cx="{_num(p.x)}" cy="{_num(p.y)}" r="3" fill="white"/>')
    for label in geom.labels:
        parts.append(
            f'<text x="{_num(label.x)}" y="{_num(label.y)}" text-anchor="middle" font-size="11" '
            f'fill="#6b7280">{escape(label.text)}</text>'
        )
    parts.append("</svg>")
    return "".join(parts)


def bar_svg(geom: BarGeometry) -> str:
    height = geom.height + 20
    parts = [f'<svg width="100%" height="{_num(height)}" viewBox="0 0 {_num(geom.width)} {_num(height)}" xmlns="http://www.w3.org/2000/svg">']
    parts += _axes_svg(geom.padding, geom.plot_height, geom.width - geom.padding.right)
    parts += _grid_svg(geom.gridlines, dashed=True)
    for bar in geom.bars:
        parts.append(
            f'<rect x="{_num(bar.x)}" y="{_num(bar.y)}" width="{_num(bar.width)}" height="{_num(bar.height)}" '
            f'fill="{escape(bar.color)}" rx="4"/>'
        )
        parts.append(
            f'<text x="{_num(bar.center_x)}" y="{_num(bar.value_label_y)}" text-anchor="middle" font-size="14" '
            f'font-weight="bold" fill="#374151">{_num(bar.value)}</text>'
        )
        parts.append(
            f'<text x="{_num(bar.center_x)}" y="{_num(bar.label_y)}" text-anchor="middle" font-size="13" '
            f'fill="#6b7280" font-weight="500">{escape(bar.label)}</text>'
        )
    parts.append("</svg>")
    return "".join(parts)


def pie_svg(geom: PieGeometry) -> str:
    parts = ['<svg width="300" height="240" viewBox="0 0 300 240" xmlns="http://www.w3.org/2000/svg">']
    for sector in geom.sectors:
        parts.append(f'<path d="{sector.path}" fill="{escape(sector.color)}" stroke="white" stroke-width="2"/>')
    parts.append("</svg>")
    return "".join(parts)


def render_svg(geom: Union[LineGeometry, BarGeometry, PieGeometry]) -> str:
    if isinstance(geom, LineGeometry):
        return line_svg(geom)
    if isinstance(geom, BarGeometry):
        return bar_svg(geom)
    if isinstance(geom, PieGeometry):
        return pie_svg(geom)
    raise TypeError(f"Unsupported geometry: {type(geom).__name__}")
