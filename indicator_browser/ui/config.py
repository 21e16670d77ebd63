from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from indicator_browser.config.model import GlobalConfig
from indicator_browser.core.view_registry import ViewRegistry
from indicator_browser.services.dataset_service import DatasetManager


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    dataset_names: List[str] = field(default_factory=list)
    dataset_by_name: Optional[DatasetManager] = None
    default_dataset_name: Optional[str] = None
    registry: Optional[ViewRegistry] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.dataset_by_name is None:
            raise RuntimeError("AppConfig.dataset_by_name must be initialized.")
