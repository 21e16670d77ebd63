from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from indicator_browser.core.pivot import Point, QueryResult, Series

DEFAULT_PALETTE: Tuple[str, ...] = (
    "#8884d8",
    "#82ca9d",
    "#ffc658",
    "#ff7300",
    "#0088fe",
    "#00c49f",
    "#8dd1e1",
)

DEFAULT_SEPARATOR = " - "


@dataclass(frozen=True)
class ChartSeries:
    """
    Chart-ready series handed to a renderer: label, color and data points.
    A point value of None is a gap, not zero.
    """
    key: str
    label: str
    color: str
    points: Tuple[Point, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "color": self.color,
            "points": [p.to_dict() for p in self.points],
        }


class PresentationResolver:
    """
    Assigns colors and labels to the ordered output of the pivot engine.

    - Colors are positional: the i-th series gets palette[i % len(palette)].
      Colors repeat once the palette is exhausted.
    - Labels join the values of the dimensions that vary across the result
      (wildcarded or given a value list; every dimension for a fully
      concrete filter) in `label_order`.
      Aggregate values are dropped from the label unless nothing else is left.

    Pure: the same QueryResult always yields the same ChartSeries list.
    """

    def __init__(
        self,
        palette: Sequence[str] = DEFAULT_PALETTE,
        label_order: Optional[Sequence[str]] = None,
        separator: str = DEFAULT_SEPARATOR,
        aggregates: Optional[Mapping[str, str]] = None,
        value_labels: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> None:
        if not palette:
            raise ValueError("Palette must contain at least one color")
        self.palette: Tuple[str, ...] = tuple(palette)
        self.label_order: Tuple[str, ...] = tuple(label_order or ())
        self.separator = separator
        self.aggregates: Dict[str, str] = dict(aggregates or {})
        self.value_labels: Dict[str, Dict[str, str]] = {
            dim: dict(labels) for dim, labels in (value_labels or {}).items()
        }

    def color_for(self, index: int) -> str:
        return self.palette[index % len(self.palette)]

    def display_value(self, dimension: str, value: str) -> str:
        return self.value_labels.get(dimension, {}).get(value, value)

    def _label_dimensions(self, series: Series, expanded: Sequence[str]) -> List[str]:
        series_dims = [d for d, _ in series.selections]
        ordered = [d for d in self.label_order if d in series_dims]
        ordered += [d for d in series_dims if d not in ordered]
        if expanded:
            return [d for d in ordered if d in expanded]
        return ordered

    def label_for(self, series: Series, expanded: Sequence[str] = ()) -> str:
        parts: List[str] = []
        aggregate_parts: List[str] = []
        for dim in self._label_dimensions(series, expanded):
            value = series.value_for(dim)
            text = self.display_value(dim, value)
            if self.aggregates.get(dim) == value:
                aggregate_parts.append(text)
            else:
                parts.append(text)

        return self.separator.join(parts or aggregate_parts)

    def resolve(self, result: QueryResult) -> List[ChartSeries]:
        return [
            ChartSeries(
                key=series.key,
                label=self.label_for(series, result.expanded),
                color=self.color_for(i),
                points=series.points,
            )
            for i, series in enumerate(result.series)
        ]
