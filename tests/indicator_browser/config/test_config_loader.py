import json
from pathlib import Path

import pytest

from indicator_browser.config.loader import load_dataset_registry, load_global_config
from indicator_browser.config.model import DatasetConfig
from indicator_browser.core.dataset_loader import from_config
from indicator_browser.core.decomposition import DelimiterRule, PrefixRule
from indicator_browser.core.exceptions import ConfigError


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


def _bridge_raw(name="Bridge conditions") -> dict:
    return {
        "name": name,
        "group": "Transportation",
        "file": "bridge_conditions.csv",
        "decomposition": {"type": "delimiter", "delimiter": "-", "dimensions": ["region", "ownership"]},
        "aggregates": {"region": "Region"},
    }


def _make_config_dir(root: Path, datasets: dict, global_raw: dict = None) -> Path:
    _write_json(root / "global.json", global_raw or {"ui_title": "Test", "default_group": "Transportation"})
    for filename, raw in datasets.items():
        _write_json(root / "datasets" / filename, raw)
    return root


def test_load_global_config_resolves_relative_data_root(tmp_path):
    root = _make_config_dir(
        tmp_path / "config",
        {"bridge.json": _bridge_raw()},
        {"ui_title": "Test", "data_root": "../data"},
    )

    cfg = load_global_config(root)

    assert cfg.ui_title == "Test"
    assert cfg.default_group == "Default"
    assert cfg.data_root == (tmp_path / "data").resolve()
    assert [d.name for d in cfg.datasets] == ["Bridge conditions"]
    assert cfg.datasets[0].source_path == root / "datasets" / "bridge.json"


def test_load_global_config_requires_global_json(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_global_config(tmp_path)


def test_missing_datasets_dir_gives_empty_list(tmp_path):
    _write_json(tmp_path / "global.json", {})

    cfg = load_global_config(tmp_path)

    assert cfg.datasets == []
    assert cfg.ui_title == "Indicator Browser"
    assert cfg.data_root is None


def test_registry_skips_invalid_configs(tmp_path):
    broken = {"name": "Broken", "file": "x.csv"}
    root = _make_config_dir(tmp_path, {"a.json": _bridge_raw(), "b.json": broken})

    global_config, cfg_by_name = load_dataset_registry(root)

    assert list(cfg_by_name) == ["Bridge conditions"]
    assert len(global_config.datasets) == 2


def test_registry_rejects_duplicate_names(tmp_path):
    root = _make_config_dir(tmp_path, {"a.json": _bridge_raw(), "b.json": _bridge_raw()})

    with pytest.raises(ConfigError, match="Duplicate dataset names"):
        load_dataset_registry(root)


def test_dataset_config_defaults():
    cfg = DatasetConfig.from_raw({"file": "x.csv"}, source_path=Path("cfg/x.json"), index=3)

    assert cfg.name == "Dataset 3"
    assert cfg.group == "Default"
    assert cfg.period_column == "year"
    assert cfg.delimiter == ","
    assert cfg.default_view == "trend"
    assert isinstance(cfg.to_rule(), DelimiterRule)


def test_delimiter_rule_from_config():
    cfg = DatasetConfig.from_raw(_bridge_raw(), source_path=Path("x.json"), index=0)

    rule = cfg.to_rule()

    assert rule == DelimiterRule(dimensions=("region", "ownership"), delimiter="-")
    assert cfg.to_presentation().aggregates == {"region": "Region"}


def test_prefix_rule_from_config_with_display_names():
    raw = {
        "file": "commute.csv",
        "decomposition": {
            "type": "prefix",
            "dimensions": ["purpose", "mode"],
            "prefixes": {"hw": "Home to work", "che": "Child care"},
            "vocabulary": {"sov": "Drive alone", "transit": "Transit"},
        },
        "value_labels": {"mode": {"transit": "Public transit"}},
    }
    cfg = DatasetConfig.from_raw(raw, source_path=Path("x.json"), index=0)

    rule = cfg.to_rule()

    assert isinstance(rule, PrefixRule)
    assert rule.prefixes == ("hw", "che")
    assert rule.vocabulary == ("sov", "transit")
    assert cfg.value_labels == {
        "purpose": {"hw": "Home to work", "che": "Child care"},
        "mode": {"sov": "Drive alone", "transit": "Public transit"},
    }


def test_prefix_rule_needs_two_dimensions():
    raw = {"file": "x.csv", "decomposition": {"type": "prefix", "dimensions": ["mode"], "vocabulary": ["sov"]}}
    cfg = DatasetConfig.from_raw(raw, source_path=Path("x.json"), index=0)

    with pytest.raises(ConfigError, match="exactly 2 dimensions"):
        cfg.to_rule()


def test_unknown_rule_type():
    raw = {"file": "x.csv", "decomposition": {"type": "regex", "dimensions": ["a"]}}
    cfg = DatasetConfig.from_raw(raw, source_path=Path("x.json"), index=0)

    with pytest.raises(ConfigError, match="unknown decomposition type"):
        cfg.to_rule()


def test_shipped_config_loads():
    root = Path(__file__).resolve().parents[3] / "config"

    global_config, cfg_by_name = load_dataset_registry(root)

    assert global_config.default_group == "Transportation"
    assert len(cfg_by_name) == len(global_config.datasets)


def test_malformed_global_json_raises(tmp_path):
    (tmp_path / "global.json").write_text("{not json")

    with pytest.raises(ConfigError, match="invalid JSON"):
        load_global_config(tmp_path)


def test_malformed_dataset_file_is_skipped(tmp_path):
    root = _make_config_dir(tmp_path, {"a.json": _bridge_raw()})
    (root / "datasets" / "b.json").write_text("[1, 2]")

    cfg = load_global_config(root)

    assert [d.name for d in cfg.datasets] == ["Bridge conditions"]


def test_shipped_congestion_dataset_splits_location_and_time():
    repo = Path(__file__).resolve().parents[3]
    _, cfg_by_name = load_dataset_registry(repo / "config")

    ds = from_config(cfg_by_name["Local Road Congestion"], data_root=repo / "data")

    assert ds.available_values("location") == ("hw", "ch", "pe", "che", "din", "pg")
    assert ds.available_values("time_of_day") == ("AM", "MD", "PM", "NT", "24")

    series = ds.resolve({"location": ["che", "ch"], "time_of_day": "24"})
    assert [s.label for s in series] == ["Chestnut", "Chelsea"]
    assert series[0].points[0].value == 1.18
