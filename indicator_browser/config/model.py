from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from indicator_browser.core.decomposition import (
    ORDERING_LEXICOGRAPHIC,
    DecompositionRule,
    DelimiterRule,
    PrefixRule,
)
from indicator_browser.core.exceptions import ConfigError
from indicator_browser.core.presentation import DEFAULT_PALETTE, DEFAULT_SEPARATOR, PresentationResolver

RULE_DELIMITER = "delimiter"
RULE_PREFIX = "prefix"


def _codes(raw: Any) -> Tuple[str, ...]:
    """Vocabularies may be a list of codes or a {code: display name} mapping."""
    if raw is None:
        return ()
    if isinstance(raw, dict):
        return tuple(str(k) for k in raw)
    return tuple(str(v) for v in raw)


@dataclass
class DatasetConfig:
    """
    Parsed config entry for a single dataset.
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def name(self) -> str:
        return self.raw.get("name", f"Dataset {self.index}")

    @property
    def group(self) -> str:
        return self.raw.get("group", "Default")

    @property
    def path(self) -> Path:
        return Path(self.raw["file"])

    @property
    def delimiter(self) -> str:
        return self.raw.get("delimiter", ",")

    @property
    def period_column(self) -> str:
        return self.raw.get("period_column", "year")

    @property
    def decomposition(self) -> Dict[str, Any]:
        return dict(self.raw.get("decomposition") or {})

    @property
    def dimensions(self) -> Tuple[str, ...]:
        return tuple(str(d) for d in self.decomposition.get("dimensions", []))

    @property
    def ordering(self) -> str:
        return self.raw.get("ordering", ORDERING_LEXICOGRAPHIC)

    @property
    def aggregates(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self.raw.get("aggregates") or {}).items()}

    @property
    def label_order(self) -> Tuple[str, ...]:
        return tuple(self.raw.get("label_order") or self.dimensions)

    @property
    def label_separator(self) -> str:
        return self.raw.get("label_separator", DEFAULT_SEPARATOR)

    @property
    def palette(self) -> Tuple[str, ...]:
        palette = self.raw.get("palette")
        return DEFAULT_PALETTE if palette is None else tuple(palette)

    @property
    def default_view(self) -> str:
        return self.raw.get("default_view", "trend")

    @property
    def value_labels(self) -> Dict[str, Dict[str, str]]:
        """
        Display names per dimension value. Explicit `value_labels` win over
        names given through a dict-form prefix/vocabulary.
        """
        labels: Dict[str, Dict[str, str]] = {}
        dec = self.decomposition
        dims = self.dimensions
        if dec.get("type") == RULE_PREFIX and len(dims) == 2:
            if isinstance(dec.get("prefixes"), dict):
                labels[dims[0]] = {str(k): str(v) for k, v in dec["prefixes"].items()}
            if isinstance(dec.get("vocabulary"), dict):
                labels[dims[1]] = {str(k): str(v) for k, v in dec["vocabulary"].items()}

        for dim, mapping in (self.raw.get("value_labels") or {}).items():
            labels.setdefault(str(dim), {}).update({str(k): str(v) for k, v in mapping.items()})
        return labels

    def to_rule(self) -> DecompositionRule:
        dec = self.decomposition
        rule_type = dec.get("type", RULE_DELIMITER)
        dims = self.dimensions

        if rule_type == RULE_DELIMITER:
            return DelimiterRule(dimensions=dims, delimiter=dec.get("delimiter", "-"))

        if rule_type == RULE_PREFIX:
            if len(dims) != 2:
                raise ConfigError(
                    f"Dataset '{self.name}': prefix rule needs exactly 2 dimensions, got {list(dims)}"
                )
            prefixes = _codes(dec.get("prefixes")) or None
            return PrefixRule(
                dimensions=(dims[0], dims[1]),
                vocabulary=_codes(dec.get("vocabulary")),
                prefix_length=int(dec.get("prefix_length", 2)),
                prefixes=prefixes,
            )

        raise ConfigError(f"Dataset '{self.name}': unknown decomposition type '{rule_type}'")

    def to_presentation(self) -> PresentationResolver:
        return PresentationResolver(
            palette=self.palette,
            label_order=self.label_order,
            separator=self.label_separator,
            aggregates=self.aggregates,
            value_labels=self.value_labels,
        )

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> DatasetConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str
    default_group: str
    datasets: List[DatasetConfig]
    data_root: Optional[Path] = None
