from __future__ import annotations

__all__ = ["IDs", "dimension_select_id"]


class IDs:
    class Store:
        FILTER_STATE = "filter-state"

    class Control:
        DATASET_SELECT = "dataset-select"
        VIEW_SELECT = "view-select"
        PERIOD_SELECT = "period-select"
        CHART_TYPE_SELECT = "chart-type-select"

        # wrappers shown or hidden by the selected view's FilterProfile
        PERIOD_CONTAINER = "period-container"
        CHART_TYPE_CONTAINER = "chart-type-container"

        DIMENSION_CONTAINER = "dimension-container"
        # pattern-matching id type; one dropdown per dataset dimension
        DIMENSION_SELECT = "dimension-select"

        MAIN_GRAPH = "main-graph"


def dimension_select_id(dimension: str) -> dict:
    return {"type": IDs.Control.DIMENSION_SELECT, "dimension": dimension}
