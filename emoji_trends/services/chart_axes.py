"""Chart configuration and axis/tooltip format decisions for the renderer."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from typing import Optional

from emoji_trends.config.settings import settings
from emoji_trends.models.timeseries import ALL_YEARS, Granularity, YearFilter
from emoji_trends.services.timeseries.filters import is_all_years

# d3.schemeCategory10
DEFAULT_COLOR_PALETTE: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


@dataclass(frozen=True, slots=True)
class Margins:
    top: int = field(default_factory=lambda: getattr(settings, "CHART_MARGIN_TOP", 20))
    right: int = field(default_factory=lambda: getattr(settings, "CHART_MARGIN_RIGHT", 150))
    bottom: int = field(default_factory=lambda: getattr(settings, "CHART_MARGIN_BOTTOM", 50))
    left: int = field(default_factory=lambda: getattr(settings, "CHART_MARGIN_LEFT", 60))


@dataclass(frozen=True, slots=True)
class YearContext:
    """Active year (and optional month, 1-12) the chart is scoped to."""

    year: YearFilter = ALL_YEARS
    month: Optional[int] = None

    @property
    def has_year(self) -> bool:
        return not is_all_years(self.year)

    @property
    def has_month(self) -> bool:
        return self.has_year and self.month is not None


@dataclass(frozen=True, slots=True)
class ChartConfig:
    """Explicit time-series chart configuration.

    Defaults: 800x500 canvas, margins 20/150/50/60 (top/right/bottom/left),
    the category-10 palette, day granularity and no year scope.
    """

    width: int = field(default_factory=lambda: getattr(settings, "CHART_WIDTH", 800))
    height: int = field(default_factory=lambda: getattr(settings, "CHART_HEIGHT", 500))
    margins: Margins = field(default_factory=Margins)
    color_palette: tuple[str, ...] = DEFAULT_COLOR_PALETTE
    granularity: Granularity = Granularity.DAY
    year_context: YearContext = field(default_factory=YearContext)

    @property
    def inner_width(self) -> int:
        return self.width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def tick_count(self) -> int:
        return 8 if self.width > 600 else 5

    def color_for(self, index: int) -> str:
        return self.color_palette[index % len(self.color_palette)]


@dataclass(frozen=True, slots=True)
class AxisFormat:
    tick_format: str
    label: str
    tooltip_format: str
    curve: str


def axis_format(granularity: Granularity | str, context: YearContext | None = None) -> AxisFormat:
    """Pick x-axis tick format, label, tooltip format and line curve.

    `granularity` is the effective granularity of the projection.
    """

    effective = Granularity.parse(granularity)
    ctx = context or YearContext()

    if effective == Granularity.DAY:
        if ctx.has_month:
            tick_format = "%d"
            label = f"Date ({calendar.month_name[ctx.month]} {ctx.year})"
        elif ctx.has_year:
            tick_format = "%B"
            label = f"Date ({ctx.year})"
        else:
            tick_format = "%b %d"
            label = "Date"
    elif effective == Granularity.MONTH:
        if ctx.has_year:
            tick_format = "%b"
            label = f"Month ({ctx.year})"
        else:
            tick_format = "%Y"
            label = "Date"
    elif effective == Granularity.WEEK:
        tick_format = "%b %d" if ctx.has_year else "%Y"
        label = f"Week ({ctx.year})" if ctx.has_year else "Week"
    else:
        tick_format = "%Y"
        label = "Year"

    return AxisFormat(
        tick_format=tick_format,
        label=label,
        tooltip_format=tooltip_date_format(effective, ctx),
        curve="linear" if effective == Granularity.YEAR else "monotone",
    )


def tooltip_date_format(granularity: Granularity | str, context: YearContext | None = None) -> str:
    effective = Granularity.parse(granularity)
    ctx = context or YearContext()

    if ctx.has_month:
        return "%A, %B %d"
    if effective == Granularity.MONTH:
        return "%B %Y"
    if effective == Granularity.YEAR:
        return "%Y"
    return "%b %d, %Y"
