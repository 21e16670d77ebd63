from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import dash
from dash import ALL, Input, Output, State

from indicator_browser.core.dataset_loader import DatasetConfigError
from indicator_browser.core.exceptions import ParseError
from indicator_browser.ui.helpers import build_filter_state, control_styles, period_options
from indicator_browser.ui.ids import IDs
from indicator_browser.ui.layout.build_filter_panel import build_dimension_controls

if TYPE_CHECKING:
    from indicator_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Dataset change -> rebuild dimension dropdowns + periods
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DIMENSION_CONTAINER, "children"),
        Output(IDs.Control.PERIOD_SELECT, "options"),
        Output(IDs.Control.PERIOD_SELECT, "value"),
        Input(IDs.Control.DATASET_SELECT, "value"),
        prevent_initial_call=True,
    )
    def update_controls_for_dataset(dataset_name: Optional[str]):
        if not dataset_name:
            return build_dimension_controls(None), [], None

        try:
            ds = ctx.dataset_by_name.get(dataset_name)
        except (DatasetConfigError, ParseError):
            logger.exception("Dataset failed to load for filter controls: %r", dataset_name)
            ds = None

        if ds is None:
            return build_dimension_controls(None), [], None

        return build_dimension_controls(ds), period_options(ds), None

    # ---------------------------------------------------------
    # View change -> show only the controls the view reads
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DIMENSION_CONTAINER, "style"),
        Output(IDs.Control.PERIOD_CONTAINER, "style"),
        Output(IDs.Control.CHART_TYPE_CONTAINER, "style"),
        Input(IDs.Control.VIEW_SELECT, "value"),
    )
    def update_control_visibility(view_id: Optional[str]):
        return control_styles(ctx.registry, view_id)

    # ---------------------------------------------------------
    # Any control -> FilterState store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data"),
        Input(IDs.Control.DATASET_SELECT, "value"),
        Input(IDs.Control.VIEW_SELECT, "value"),
        Input({"type": IDs.Control.DIMENSION_SELECT, "dimension": ALL}, "value"),
        Input(IDs.Control.PERIOD_SELECT, "value"),
        Input(IDs.Control.CHART_TYPE_SELECT, "value"),
        State({"type": IDs.Control.DIMENSION_SELECT, "dimension": ALL}, "id"),
    )
    def update_filter_state(
        dataset_name: Optional[str],
        view_id: Optional[str],
        dimension_values: List[Any],
        period: Optional[str],
        chart_type: Optional[str],
        dimension_ids: List[Dict[str, Any]],
    ):
        return build_filter_state(
            dataset_name,
            view_id,
            dimension_ids or [],
            dimension_values or [],
            period,
            chart_type,
        )
