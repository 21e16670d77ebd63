from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from indicator_browser.config.model import DatasetConfig, GlobalConfig
from indicator_browser.core.exceptions import ConfigError
from indicator_browser.validation.config_validation import validate_dataset_config
from indicator_browser.validation.errors import ValidationError

logger = logging.getLogger(__name__)

GLOBAL_FILE = "global.json"
DATASETS_DIR = "datasets"


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def _resolve_data_root(root: Path, raw_value: Optional[str]) -> Optional[Path]:
    # relative entries are anchored at the config directory, not the cwd
    if raw_value is None:
        return None
    path = Path(raw_value)
    return path if path.is_absolute() else (root / path).resolve()


def _load_dataset_files(datasets_dir: Path) -> List[DatasetConfig]:
    if not datasets_dir.is_dir():
        logger.warning("No datasets directory", extra={"datasets_dir": str(datasets_dir)})
        return []

    datasets: List[DatasetConfig] = []
    for path in sorted(datasets_dir.glob("*.json")):
        try:
            raw = _read_json(path)
        except ConfigError as e:
            logger.error("Skipping unreadable dataset config", extra={"source": str(path), "error": str(e)})
            continue
        datasets.append(DatasetConfig.from_raw(raw, source_path=path, index=len(datasets)))
    return datasets


def load_global_config(root: Path) -> GlobalConfig:
    """
    Read a config directory:

        root/
            global.json        ui_title, default_group, data_root
            datasets/*.json    one dataset per file, read in file name order

    `data_root` in global.json may be relative to `root`.

    :raises FileNotFoundError: if global.json is missing
    :raises ConfigError: if global.json is not a JSON object
    """
    root = Path(root)
    global_path = root / GLOBAL_FILE
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    raw_global = _read_json(global_path)
    datasets = _load_dataset_files(root / DATASETS_DIR)

    logger.info(
        "Global config read",
        extra={"config_root": str(root), "n_dataset_files": len(datasets)},
    )

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Indicator Browser"),
        default_group=raw_global.get("default_group", "Default"),
        datasets=datasets,
        data_root=_resolve_data_root(root, raw_global.get("data_root")),
    )


def load_dataset_registry(root: Path) -> Tuple[GlobalConfig, Dict[str, DatasetConfig]]:
    """
    Load global config + dataset config objects only (no dataset text is read).

    Invalid dataset configs are logged and skipped so one broken file does not
    take the whole app down.

    :return: (GlobalConfig, mapping of dataset name -> DatasetConfig)
    :raises ConfigError: if two dataset configs share a name
    """
    global_config = load_global_config(root)

    cfg_by_name: Dict[str, DatasetConfig] = {}
    duplicates: List[str] = []

    for ds_cfg in global_config.datasets:
        try:
            validate_dataset_config(ds_cfg)
        except ValidationError as e:
            logger.error(
                "Skipping invalid dataset config",
                extra={
                    "dataset": ds_cfg.name,
                    "source": str(ds_cfg.source_path),
                    "issues": [issue.code for issue in e.issues],
                },
            )
            continue

        if ds_cfg.name in cfg_by_name:
            duplicates.append(ds_cfg.name)
            continue
        cfg_by_name[ds_cfg.name] = ds_cfg

    if duplicates:
        raise ConfigError(f"Duplicate dataset names in config: {sorted(set(duplicates))}")

    if not cfg_by_name:
        logger.warning("No valid datasets configured", extra={"config_root": str(root)})

    logger.info(
        "Dataset registry loaded (lazy mode; datasets not materialised)",
        extra={
            "config_root": str(root),
            "n_dataset_configs": len(cfg_by_name),
            "dataset_names": sorted(cfg_by_name.keys()),
        },
    )

    return global_config, cfg_by_name
