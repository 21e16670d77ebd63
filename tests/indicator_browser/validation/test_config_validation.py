from pathlib import Path

import pytest

from indicator_browser.config.model import DatasetConfig
from indicator_browser.validation.config_validation import validate_dataset_config
from indicator_browser.validation.errors import ValidationError


def _make_cfg(**overrides) -> DatasetConfig:
    raw = {
        "name": "Bridge conditions",
        "file": "bridge_conditions.csv",
        "decomposition": {"type": "delimiter", "dimensions": ["region", "ownership"]},
    }
    raw.update(overrides)
    return DatasetConfig.from_raw(raw, source_path=Path("datasets/bridge.json"), index=0)


def _codes(cfg: DatasetConfig):
    with pytest.raises(ValidationError) as excinfo:
        validate_dataset_config(cfg)
    return excinfo.value.codes


def test_valid_config_passes():
    validate_dataset_config(_make_cfg())


def test_missing_decomposition_stops_early():
    cfg = _make_cfg(decomposition=None, file=None)

    assert _codes(cfg) == ["DATASET_FILE", "DATASET_DECOMPOSITION"]


def test_collects_every_issue():
    cfg = _make_cfg(
        label_order=["region", "color"],
        aggregates={"mode": "Total"},
        ordering="random",
        palette=[],
    )

    assert _codes(cfg) == [
        "DATASET_LABEL_ORDER",
        "DATASET_AGGREGATE",
        "DATASET_ORDERING",
        "DATASET_PALETTE",
    ]


def test_dimension_problems():
    assert _codes(_make_cfg(decomposition={"type": "delimiter", "dimensions": []})) == ["DATASET_DIMENSIONS"]
    assert _codes(
        _make_cfg(decomposition={"type": "delimiter", "dimensions": ["a", "a"]})
    ) == ["DATASET_DIMENSIONS"]


def test_rule_type_and_delimiter():
    assert "DATASET_RULE_TYPE" in _codes(_make_cfg(decomposition={"type": "regex", "dimensions": ["a"]}))
    assert _codes(
        _make_cfg(decomposition={"type": "delimiter", "delimiter": "", "dimensions": ["a", "b"]})
    ) == ["DATASET_DELIMITER"]


def test_prefix_rule_requirements():
    cfg = _make_cfg(decomposition={"type": "prefix", "dimensions": ["mode"], "prefix_length": 0})

    assert _codes(cfg) == ["DATASET_DIMENSIONS", "DATASET_VOCABULARY", "DATASET_PREFIX_LENGTH"]


def test_error_message_lists_codes():
    with pytest.raises(ValidationError, match="DATASET_FILE"):
        validate_dataset_config(_make_cfg(file=""))


def test_file_delimiter_must_be_one_character():
    assert _codes(_make_cfg(delimiter="||")) == ["DATASET_FILE_DELIMITER"]
    assert _codes(_make_cfg(delimiter="")) == ["DATASET_FILE_DELIMITER"]
