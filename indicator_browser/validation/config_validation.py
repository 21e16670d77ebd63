from __future__ import annotations

from typing import TYPE_CHECKING, List

from indicator_browser.core.decomposition import ORDERING_APPEARANCE, ORDERING_LEXICOGRAPHIC
from indicator_browser.validation.errors import ValidationError, ValidationIssue

if TYPE_CHECKING:
    from indicator_browser.config.model import DatasetConfig

_RULE_TYPES = ("delimiter", "prefix")


def validate_dataset_config(cfg: DatasetConfig) -> None:
    issues: List[ValidationIssue] = []
    raw = cfg.raw

    if not raw.get("file"):
        issues.append(ValidationIssue("DATASET_FILE", "Missing 'file' entry."))

    file_delimiter = raw.get("delimiter", ",")
    if not isinstance(file_delimiter, str) or len(file_delimiter) != 1:
        issues.append(
            ValidationIssue("DATASET_FILE_DELIMITER", f"File delimiter must be one character, got {file_delimiter!r}.")
        )

    dec = raw.get("decomposition")
    if not isinstance(dec, dict):
        issues.append(ValidationIssue("DATASET_DECOMPOSITION", "Missing 'decomposition' block."))
        raise ValidationError(issues)

    rule_type = dec.get("type", "delimiter")
    dims = list(cfg.dimensions)

    if rule_type not in _RULE_TYPES:
        issues.append(
            ValidationIssue("DATASET_RULE_TYPE", f"Unknown decomposition type '{rule_type}'.")
        )

    if not dims:
        issues.append(ValidationIssue("DATASET_DIMENSIONS", "Decomposition declares no dimensions."))
    elif len(set(dims)) != len(dims):
        issues.append(ValidationIssue("DATASET_DIMENSIONS", f"Duplicate dimension names in {dims}."))

    if rule_type == "delimiter" and not dec.get("delimiter", "-"):
        issues.append(ValidationIssue("DATASET_DELIMITER", "Delimiter rule needs a non-empty delimiter."))

    if rule_type == "prefix":
        if len(dims) != 2:
            issues.append(
                ValidationIssue("DATASET_DIMENSIONS", f"Prefix rule needs exactly 2 dimensions, got {dims}.")
            )
        if not dec.get("vocabulary"):
            issues.append(ValidationIssue("DATASET_VOCABULARY", "Prefix rule needs a suffix vocabulary."))
        if not dec.get("prefixes") and int(dec.get("prefix_length", 2)) < 1:
            issues.append(ValidationIssue("DATASET_PREFIX_LENGTH", "prefix_length must be at least 1."))

    for dim in cfg.label_order:
        if dim not in dims:
            issues.append(
                ValidationIssue("DATASET_LABEL_ORDER", f"label_order names unknown dimension '{dim}'.")
            )

    for dim in cfg.aggregates:
        if dim not in dims:
            issues.append(
                ValidationIssue("DATASET_AGGREGATE", f"aggregate given for unknown dimension '{dim}'.")
            )

    if cfg.ordering not in (ORDERING_LEXICOGRAPHIC, ORDERING_APPEARANCE):
        issues.append(ValidationIssue("DATASET_ORDERING", f"Unknown ordering '{cfg.ordering}'."))

    if not cfg.palette:
        issues.append(ValidationIssue("DATASET_PALETTE", "Palette must contain at least one color."))

    if issues:
        raise ValidationError(issues)
