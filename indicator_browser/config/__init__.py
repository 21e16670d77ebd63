"""
Config package for indicator_browser.

Responsible for:
- config models (GlobalConfig, DatasetConfig)
- config I/O helpers (load_global_config / load_dataset_registry)
"""

from .model import GlobalConfig, DatasetConfig
from .loader import load_global_config, load_dataset_registry
