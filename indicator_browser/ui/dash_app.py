from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import dash_bootstrap_components as dbc
from dash import Dash

from indicator_browser.config.loader import load_dataset_registry
from indicator_browser.config.model import DatasetConfig, GlobalConfig
from indicator_browser.core.dataset_loader import DatasetConfigError
from indicator_browser.core.exceptions import ParseError
from indicator_browser.core.view_registry import ViewRegistry
from indicator_browser.services.dataset_service import DatasetManager
from indicator_browser.ui.callbacks.callbacks_filters import register_filter_callbacks
from indicator_browser.ui.callbacks.callbacks_render import register_render_callbacks
from indicator_browser.ui.config import AppConfig
from indicator_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def build_view_registry() -> ViewRegistry:
    from indicator_browser.views import ComparisonView, DistributionView, TrendView

    registry = ViewRegistry()
    registry.register(TrendView)
    registry.register(ComparisonView)
    registry.register(DistributionView)
    return registry


def _choose_default_dataset(
    global_config: GlobalConfig,
    cfg_by_name: Dict[str, DatasetConfig],
    manager: DatasetManager,
) -> Optional[str]:
    """
    First dataset of the default group, else the first by name, skipping any
    that fail to load.
    """
    names = sorted(cfg_by_name.keys())
    preferred = [n for n in names if cfg_by_name[n].group == global_config.default_group]
    for name in preferred + [n for n in names if n not in preferred]:
        try:
            manager[name]
        except (DatasetConfigError, ParseError):
            logger.warning("Default dataset candidate failed to load", extra={"dataset": name})
            continue
        return name
    return None


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_name = load_dataset_registry(config_root)
    if not cfg_by_name:
        raise RuntimeError("No dataset configs were loaded from config")

    # 2) Initialize Service Layer
    dataset_manager = DatasetManager(cfg_by_name, data_root=global_config.data_root)
    registry = build_view_registry()

    # 3) Choose Default Dataset
    default_name = _choose_default_dataset(global_config, cfg_by_name, dataset_manager)

    # 4) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        dataset_names=sorted(cfg_by_name.keys()),
        dataset_by_name=dataset_manager,
        default_dataset_name=default_name,
        registry=registry,
    )
    ctx.validate()

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        suppress_callback_exceptions=True,
    )
    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_filter_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"config_root": str(config_root), "default_dataset": default_name},
    )
    return app
