from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from indicator_browser.core.dataset import Dataset
from indicator_browser.core.decomposition import WILDCARD
from indicator_browser.core.filter_state import FilterProfile, FilterState
from indicator_browser.core.view_registry import ViewRegistry

HIDDEN = {"display": "none"}


def dimension_options(dataset: Dataset, dimension: str) -> List[dict]:
    """
    Options for one multi-select dimension dropdown: the enumerated values in
    dataset order, using display names where configured. Nothing selected
    means "All", so the wildcard is not offered as an option.
    """
    presentation = dataset.presentation
    return [
        {"label": presentation.display_value(dimension, value), "value": value}
        for value in dataset.available_values(dimension)
    ]


def period_options(dataset: Dataset) -> List[dict]:
    return [{"label": str(p), "value": str(p)} for p in dataset.periods]


def view_options(registry: ViewRegistry) -> List[dict]:
    return [{"label": cls.label, "value": cls.id} for cls in registry.all_classes()]


def control_styles(registry: ViewRegistry, view_id: Optional[str]) -> Tuple[dict, dict, dict]:
    """
    Styles for the (dimension, period, chart type) control containers,
    following the FilterProfile of the selected view. Unknown views show
    every control.
    """
    profile = FilterProfile(dimensions=True, period=True, chart_type=True)
    for cls in registry.all_classes():
        if cls.id == view_id:
            profile = cls.filter_profile
            break

    def style(flag: bool) -> dict:
        return {} if flag else dict(HIDDEN)

    return style(profile.dimensions), style(profile.period), style(profile.chart_type)


def _selection_from_control(value: Union[None, str, Sequence[str]]) -> Union[str, List[str]]:
    if value is None or value == "":
        return WILDCARD
    if isinstance(value, str):
        return value
    values = [str(v) for v in value if v]
    return values if values else WILDCARD


def build_filter_state(
    dataset_name: Optional[str],
    view_id: Optional[str],
    dimension_ids: Sequence[Dict[str, Any]],
    dimension_values: Sequence[Union[None, str, Sequence[str]]],
    period: Optional[str],
    chart_type: Optional[str],
) -> Optional[Dict[str, Any]]:
    """
    Collect the current control values into a serialised FilterState.

    `dimension_ids` are the pattern-matching ids of the dimension dropdowns,
    in the same order as `dimension_values`. A cleared dropdown means "All";
    a multi-select with values picked becomes a list selection.
    """
    if not dataset_name or not view_id:
        return None

    selections = {
        id_["dimension"]: _selection_from_control(value)
        for id_, value in zip(dimension_ids, dimension_values)
    }

    state = FilterState(
        dataset_name=dataset_name,
        view_id=view_id,
        selections=selections,
        period=period or None,
        chart_type=chart_type or "line",
    )
    return state.to_dict()
