from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

from indicator_browser.config.model import DatasetConfig
from indicator_browser.core.dataset import Dataset
from indicator_browser.core.dataset_loader import DatasetConfigError, from_config
from indicator_browser.core.exceptions import ParseError

logger = logging.getLogger(__name__)


class DatasetManager(Mapping[str, Dataset]):
    """
    Process-wide, read-only dataset cache keyed by dataset name.

    A dataset is fetched and parsed on first access only; every later lookup
    returns the same Dataset object. First accesses from concurrent callbacks
    are serialised so the source is read once.
    """

    def __init__(self, cfg_by_name: Dict[str, DatasetConfig], data_root: Optional[Path] = None):
        self._cfg_by_name = dict(cfg_by_name)
        self._data_root = data_root
        self._loaded: Dict[str, Dataset] = {}
        self._lock = threading.Lock()

    def _load(self, cfg: DatasetConfig) -> Dataset:
        logger.info("Loading dataset", extra={"dataset": cfg.name, "file": str(cfg.path)})
        try:
            return from_config(cfg, data_root=self._data_root)
        except (DatasetConfigError, ParseError) as e:
            logger.error("Dataset unusable", extra={"dataset": cfg.name, "error": str(e)})
            raise
        except Exception:
            logger.exception("Dataset load crashed", extra={"dataset": cfg.name})
            raise

    def __getitem__(self, name: str) -> Dataset:
        cached = self._loaded.get(name)
        if cached is not None:
            return cached

        cfg = self._cfg_by_name.get(name)
        if cfg is None:
            raise KeyError(f"Unknown dataset '{name}'")

        with self._lock:
            # another thread may have finished the load while we waited
            if name not in self._loaded:
                self._loaded[name] = self._load(cfg)
            return self._loaded[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cfg_by_name)

    def __len__(self) -> int:
        return len(self._cfg_by_name)

    def get(self, name: str, default: Optional[Dataset] = None) -> Optional[Dataset]:
        """Like Mapping.get; load failures other than an unknown name still raise."""
        if name not in self._cfg_by_name:
            return default
        return self[name]

    def config_for(self, name: str) -> Optional[DatasetConfig]:
        return self._cfg_by_name.get(name)

    def is_loaded(self, name: str) -> bool:
        return name in self._loaded

    def refresh_config(self, new_cfg_by_name: Dict[str, DatasetConfig]) -> None:
        """Swap in new configs and forget every loaded dataset."""
        with self._lock:
            self._cfg_by_name = dict(new_cfg_by_name)
            self._loaded.clear()
