from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

import dash
import plotly.graph_objs as go
from dash import Input, Output

from indicator_browser.core.base_view import BaseView
from indicator_browser.core.dataset_loader import DatasetConfigError
from indicator_browser.core.exceptions import FilterError, ParseError
from indicator_browser.core.filter_state import FilterState
from indicator_browser.ui.ids import IDs

if TYPE_CHECKING:
    from indicator_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    """Blank axes with a centred note; used instead of raising inside callbacks."""
    fig = go.Figure()
    fig.add_annotation(
        text=title if details is None else f"<b>{title}</b><br><br>{details}",
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        font={"size": 14},
    )
    fig.update_layout(
        xaxis={"visible": False},
        yaxis={"visible": False},
        height=500,
        margin={"l": 40, "r": 40, "t": 40, "b": 40},
    )
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("This chart could not be drawn.", details)


def _view_for_state(ctx: AppConfig, state: FilterState) -> Union[BaseView, go.Figure]:
    """Bind the requested view to its dataset, or return the figure explaining why not."""
    try:
        ds = ctx.dataset_by_name.get(state.dataset_name)
    except (DatasetConfigError, ParseError) as e:
        return _error_figure(f"Dataset '{state.dataset_name}' could not be loaded: {e}")

    if ds is None:
        return _error_figure(
            f"Dataset '{state.dataset_name}' is not available. Pick another dataset or reload."
        )

    # dimension dropdowns of the previous dataset can still be mounted mid-switch
    state.selections = ds.sanitize_selections(state.selections)

    try:
        return ctx.registry.create(state.view_id, ds)
    except KeyError:
        return _error_figure(f"Unknown view '{state.view_id}'.")


def render_state(ctx: AppConfig, fs_data: Optional[dict[str, Any]]) -> go.Figure:
    """
    Serialised FilterState -> figure.

    Never raises: missing state, unloadable datasets, unknown views and bad
    filters all come back as message figures.
    """
    if not fs_data:
        return _message_figure(
            "No dataset/view selected.",
            "Pick a dataset and a view on the left.",
        )

    try:
        state = FilterState.from_dict(fs_data)
    except (TypeError, ValueError, AttributeError):
        logger.exception("Unreadable filter state", extra={"fs_data": repr(fs_data)})
        return _error_figure("The filter state could not be read.")

    view = _view_for_state(ctx, state)
    if isinstance(view, go.Figure):
        return view

    try:
        return view.render_figure(view.compute_data(state), state)
    except FilterError as e:
        return _error_figure(str(e))
    except Exception:
        logger.exception(
            "View failed to render",
            extra={"dataset": state.dataset_name, "view": state.view_id, "selections": state.selections},
        )
        return _error_figure("Unexpected error; details are in the server log.")


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.MAIN_GRAPH, "figure"),
        Input(IDs.Store.FILTER_STATE, "data"),
    )
    def render_main_graph(fs_data: Optional[dict[str, Any]]):
        return render_state(ctx, fs_data)
