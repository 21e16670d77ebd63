from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import dash_bootstrap_components as dbc
from dash import dcc

from indicator_browser.core.dataset import Dataset
from indicator_browser.ui.ids import IDs
from indicator_browser.ui.layout.build_filter_panel import build_filter_panel

if TYPE_CHECKING:
    from indicator_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig):
    default_dataset: Optional[Dataset] = None
    preferred_view: Optional[str] = None
    if ctx.default_dataset_name is not None:
        default_dataset = ctx.dataset_by_name.get(ctx.default_dataset_name)
        cfg = ctx.dataset_by_name.config_for(ctx.default_dataset_name)
        if cfg is not None:
            preferred_view = cfg.default_view
    default_view = ctx.registry.default_view_id(preferred_view)

    filter_panel = build_filter_panel(ctx.dataset_names, default_dataset, ctx.registry, default_view)

    return dbc.Container(
        fluid=True,
        className="ib-root",
        children=[
            dbc.NavbarSimple(brand=ctx.global_config.ui_title, color="primary", dark=True, className="mb-3"),
            # In-memory only: filter choices are not persisted across sessions
            dcc.Store(id=IDs.Store.FILTER_STATE, storage_type="memory"),
            dbc.Row(
                [
                    dbc.Col(filter_panel, md=3),
                    dbc.Col(
                        dbc.Card(dbc.CardBody(dcc.Graph(id=IDs.Control.MAIN_GRAPH))),
                        md=9,
                    ),
                ]
            ),
        ],
    )
