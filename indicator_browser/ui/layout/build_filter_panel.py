from __future__ import annotations

from typing import List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from indicator_browser.core.dataset import Dataset
from indicator_browser.core.decomposition import WILDCARD
from indicator_browser.core.view_registry import ViewRegistry
from indicator_browser.ui.helpers import control_styles, dimension_options, period_options, view_options
from indicator_browser.ui.ids import IDs, dimension_select_id


def build_dimension_controls(dataset: Optional[Dataset]) -> List:
    """
    One multi-select dropdown per dataset dimension; an empty selection
    means "All".
    Rebuilt by the filter callbacks whenever the dataset changes.
    """
    if dataset is None:
        return [html.P("No dataset selected.", className="text-muted")]

    controls = []
    for dim in dataset.dimensions:
        controls.append(
            html.Div(
                [
                    html.Label(dim.replace("_", " ").title(), className="form-label"),
                    dcc.Dropdown(
                        id=dimension_select_id(dim),
                        options=dimension_options(dataset, dim),
                        value=[],
                        multi=True,
                        placeholder=WILDCARD,
                        clearable=True,
                        className="mb-3",
                    ),
                ]
            )
        )
    return controls


def build_filter_panel(
    dataset_names: List[str],
    default_dataset: Optional[Dataset],
    registry: ViewRegistry,
    default_view: str = "trend",
) -> dbc.Card:
    dimension_style, period_style, chart_type_style = control_styles(registry, default_view)
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("Dataset", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.DATASET_SELECT,
                        options=[{"label": n, "value": n} for n in dataset_names],
                        value=default_dataset.name if default_dataset is not None else None,
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Label("View", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.VIEW_SELECT,
                        options=view_options(registry),
                        value=default_view,
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Hr(),
                    html.Div(
                        id=IDs.Control.DIMENSION_CONTAINER,
                        style=dimension_style,
                        children=build_dimension_controls(default_dataset),
                    ),
                    html.Div(
                        id=IDs.Control.PERIOD_CONTAINER,
                        style=period_style,
                        children=[
                            html.Label("Period", className="form-label"),
                            dcc.Dropdown(
                                id=IDs.Control.PERIOD_SELECT,
                                options=period_options(default_dataset) if default_dataset is not None else [],
                                placeholder="Latest period",
                                className="mb-3",
                            ),
                        ],
                    ),
                    html.Div(
                        id=IDs.Control.CHART_TYPE_CONTAINER,
                        style=chart_type_style,
                        children=[
                            html.Label("Chart type", className="form-label"),
                            dbc.RadioItems(
                                id=IDs.Control.CHART_TYPE_SELECT,
                                options=[
                                    {"label": "Line", "value": "line"},
                                    {"label": "Area", "value": "area"},
                                    {"label": "Bar", "value": "bar"},
                                ],
                                value="line",
                                inline=True,
                            ),
                        ],
                    ),
                ]
            ),
        ],
        className="ib-sidebar",
    )
