from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from indicator_browser.core.decomposition import WILDCARD
from indicator_browser.core.pivot import selection_values

SelectionValue = Union[str, List[str]]


def _selection_from_raw(value: Any) -> SelectionValue:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return str(value)


@dataclass
class FilterState:
    """
    Represents the current user selection/filters.

    Fields:

    - selections: dimension name -> concrete value, list of values, or the
                  wildcard "All". A dimension that is not listed is "All";
                  so is an empty list.
    - period: target period for cross-sectional views; None means trend mode
    - chart_type: "line", "area" or "bar" for trend views

    """

    # Global context
    dataset_name: str
    view_id: str

    # Core selections
    selections: Dict[str, SelectionValue] = field(default_factory=dict)
    period: Optional[str] = None

    # Display / plotting options
    chart_type: str = "line"

    def selection_for(self, dimension: str) -> SelectionValue:
        value = self.selections.get(dimension)
        if selection_values(value) is None:
            return WILDCARD
        return value

    def is_wildcard(self, dimension: str) -> bool:
        return self.selection_for(dimension) == WILDCARD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dataset_name": self.dataset_name,
            "view_id": self.view_id,
            "selections": {
                dim: list(value) if isinstance(value, (list, tuple)) else value
                for dim, value in self.selections.items()
            },
            "period": self.period,
            "chart_type": self.chart_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterState:
        period = data.get("period")
        return cls(
            dataset_name=data.get("dataset_name"),
            view_id=data.get("view_id"),
            selections={
                str(k): _selection_from_raw(v)
                for k, v in (data.get("selections") or {}).items()
                if v is not None
            },
            period=None if period in (None, "") else str(period),
            chart_type=data.get("chart_type", "line"),
        )


@dataclass
class FilterProfile:
    """
    Represents the widget dependencies for different views.

    :param dimensions: one dropdown per dataset dimension
    :param period: the period dropdown (cross-sectional views)
    :param chart_type: the line/area/bar selector (trend views)
    """
    dimensions: bool = True
    period: bool = False
    chart_type: bool = False
