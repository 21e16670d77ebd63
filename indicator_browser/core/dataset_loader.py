from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from indicator_browser.config.model import DatasetConfig
from indicator_browser.core.dataset import Dataset
from indicator_browser.core.parser import parse_table

logger = logging.getLogger(__name__)

DATA_ROOT_ENV = "INDICATOR_BROWSER_DATA_ROOT"


class DatasetConfigError(ValueError):
    """
    Raised when a dataset config is structurally invalid for loading.
    """
    pass


def resolve_data_path(cfg: DatasetConfig, data_root: Optional[Path] = None) -> Path:
    """
    Resolve the dataset 'file' entry.

    Relative paths are resolved against `data_root` (from global.json), then
    against INDICATOR_BROWSER_DATA_ROOT, then against the dataset config's folder.
    """
    path: Path = cfg.path
    if path.is_absolute():
        return path

    roots = []
    if data_root is not None:
        roots.append(Path(data_root))
    env_root = os.environ.get(DATA_ROOT_ENV)
    if env_root:
        roots.append(Path(env_root))
    roots.append(cfg.source_path.parent)

    for root in roots:
        candidate = root / path
        if candidate.is_file():
            return candidate

    return roots[0] / path


def read_text(path: Path) -> str:
    # utf-8-sig drops a leading BOM written by spreadsheet exports
    return path.read_text(encoding="utf-8-sig")


def from_config(
    cfg: DatasetConfig,
    data_root: Optional[Path] = None,
    text: Optional[str] = None,
) -> Dataset:
    """
    Materialise a Dataset from a DatasetConfig.

    :param text: already-fetched raw text; when None the configured file is read
    :raises DatasetConfigError: if the data file does not exist
    :raises ParseError: if the text has no usable header row
    """
    path: Optional[Path] = None
    if text is None:
        path = resolve_data_path(cfg, data_root)
        if not path.is_file():
            msg = f"Dataset '{cfg.name}': data file not found at {path}."
            logger.error(msg, extra={"dataset": cfg.name, "path": str(path)})
            raise DatasetConfigError(msg)
        text = read_text(path)

    table = parse_table(text, period_column=cfg.period_column, delimiter=cfg.delimiter)

    return Dataset(
        name=cfg.name,
        group=cfg.group,
        table=table,
        rule=cfg.to_rule(),
        aggregates=cfg.aggregates,
        ordering=cfg.ordering,
        presentation=cfg.to_presentation(),
        file_path=path,
    )
