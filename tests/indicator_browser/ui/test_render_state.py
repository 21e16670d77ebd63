from pathlib import Path

from indicator_browser.config.model import DatasetConfig, GlobalConfig
from indicator_browser.services.dataset_service import DatasetManager
from indicator_browser.ui.callbacks.callbacks_render import render_state
from indicator_browser.ui.config import AppConfig
from indicator_browser.ui.dash_app import build_view_registry

BRIDGE_TEXT = "year,North-State,North-Local,South-State\n2020,0.2,0.3,0.4\n2021,0.25,,0.35\n"


def _make_ctx(tmp_path: Path) -> AppConfig:
    (tmp_path / "bridge.csv").write_text(BRIDGE_TEXT)
    good = DatasetConfig.from_raw(
        {
            "name": "Bridge conditions",
            "file": "bridge.csv",
            "decomposition": {"type": "delimiter", "dimensions": ["region", "ownership"]},
        },
        source_path=tmp_path / "bridge.json",
        index=0,
    )
    broken = DatasetConfig.from_raw(
        {
            "name": "Broken",
            "file": "missing.csv",
            "decomposition": {"type": "delimiter", "dimensions": ["a", "b"]},
        },
        source_path=tmp_path / "broken.json",
        index=1,
    )
    cfg_by_name = {good.name: good, broken.name: broken}
    return AppConfig(
        config_root=tmp_path,
        global_config=GlobalConfig(ui_title="Test", default_group="Default", datasets=[good, broken]),
        dataset_names=list(cfg_by_name),
        dataset_by_name=DatasetManager(cfg_by_name, data_root=tmp_path),
        default_dataset_name=good.name,
        registry=build_view_registry(),
    )


def _state(**overrides) -> dict:
    state = {
        "dataset_name": "Bridge conditions",
        "view_id": "trend",
        "selections": {"region": "All", "ownership": "State"},
        "period": None,
        "chart_type": "line",
    }
    state.update(overrides)
    return state


def _annotation_text(fig) -> str:
    return fig.layout.annotations[0].text


def test_no_state_shows_prompt(tmp_path):
    fig = render_state(_make_ctx(tmp_path), None)

    assert "No dataset/view selected." in _annotation_text(fig)


def test_trend_view_renders_series(tmp_path):
    fig = render_state(_make_ctx(tmp_path), _state())

    assert [t.name for t in fig.data] == ["North", "South"]


def test_stale_selections_are_sanitized(tmp_path):
    fig = render_state(
        _make_ctx(tmp_path),
        _state(selections={"region": "North", "ownership": "Federal", "mode": "sov"}),
    )

    # ownership falls back to All, the unknown dimension is dropped
    assert [t.name for t in fig.data] == ["Local", "State"]


def test_cross_section_view(tmp_path):
    fig = render_state(_make_ctx(tmp_path), _state(view_id="comparison", period="2020"))

    assert list(fig.data[0].y) == [0.2, 0.4]


def test_unknown_dataset_and_view(tmp_path):
    ctx = _make_ctx(tmp_path)

    assert "is not available" in _annotation_text(render_state(ctx, _state(dataset_name="Nope")))
    assert "Unknown view 'heatmap'" in _annotation_text(render_state(ctx, _state(view_id="heatmap")))


def test_dataset_that_fails_to_load(tmp_path):
    fig = render_state(_make_ctx(tmp_path), _state(dataset_name="Broken"))

    assert "could not be loaded" in _annotation_text(fig)
