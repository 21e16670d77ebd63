from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

WILDCARD = "All"

ORDERING_LEXICOGRAPHIC = "lexicographic"
ORDERING_APPEARANCE = "appearance"

DimensionKey = Tuple[str, ...]


class DecompositionRule(ABC):
    """
    Abstract rule turning a composite column name into dimension values.

    Every dataset injects exactly one rule; nothing else in the package splits
    column names. A rule returns None for a column it cannot decompose, which
    excludes that column from the dimension map.
    """

    dimensions: Tuple[str, ...]

    @abstractmethod
    def split(self, column: str) -> Optional[DimensionKey]:
        raise NotImplementedError()


@dataclass(frozen=True)
class DelimiterRule(DecompositionRule):
    """
    `<A><delimiter><B>...`: the column must split into exactly one part per
    dimension. Parts are stripped, so `North- State` decomposes like
    `North-State`.
    """
    dimensions: Tuple[str, ...]
    delimiter: str = "-"

    def split(self, column: str) -> Optional[DimensionKey]:
        parts = [p.strip() for p in column.split(self.delimiter)]
        if len(parts) != len(self.dimensions):
            return None
        if any(not p for p in parts):
            return None
        return tuple(parts)


@dataclass(frozen=True)
class PrefixRule(DecompositionRule):
    """
    `<prefix><suffix>` concatenation over two dimensions.

    The prefix is either the first `prefix_length` characters, or, when
    `prefixes` is given, a listed code the column starts with (codes have
    different lengths, e.g. `ch` / `che`; longer codes are tried first).
    The remainder must be in `vocabulary`.
    """
    dimensions: Tuple[str, str]
    vocabulary: Tuple[str, ...]
    prefix_length: int = 2
    prefixes: Optional[Tuple[str, ...]] = None

    def _candidate_prefixes(self, column: str) -> List[str]:
        if self.prefixes:
            matches = [p for p in self.prefixes if column.startswith(p)]
            return sorted(matches, key=len, reverse=True)
        if len(column) <= self.prefix_length:
            return []
        return [column[:self.prefix_length]]

    def split(self, column: str) -> Optional[DimensionKey]:
        for prefix in self._candidate_prefixes(column):
            remainder = column[len(prefix):]
            if remainder in self.vocabulary:
                return prefix, remainder
        return None


@dataclass(frozen=True)
class DimensionMap:
    """
    Dimensions discovered from a dataset's columns.

    - dimensions: dimension names in rule order
    - value_sets: ordered values per dimension (never contains the wildcard)
    - columns_by_key: inverse mapping, dimension key -> raw column name
    - skipped: columns that did not decompose under the rule
    """
    dimensions: Tuple[str, ...]
    value_sets: Mapping[str, Tuple[str, ...]]
    columns_by_key: Mapping[DimensionKey, str]
    aggregates: Mapping[str, str] = field(default_factory=dict)
    skipped: Tuple[str, ...] = ()

    def has_dimension(self, dimension: str) -> bool:
        return dimension in self.value_sets

    def values(self, dimension: str) -> Tuple[str, ...]:
        try:
            return self.value_sets[dimension]
        except KeyError:
            raise KeyError(f"Unknown dimension '{dimension}'")

    def column_for(self, key: DimensionKey) -> Optional[str]:
        return self.columns_by_key.get(tuple(key))


def order_values(
        values: Iterable[str],
        aggregate: Optional[str] = None,
        ordering: str = ORDERING_LEXICOGRAPHIC,
) -> Tuple[str, ...]:
    """
    Deterministic enumeration order for one dimension.

    The aggregate value (if present) always comes first. The rest are either
    sorted by code point (locale independent) or kept in first-appearance order.
    """
    seen: List[str] = []
    for v in values:
        if v not in seen:
            seen.append(v)

    rest = [v for v in seen if v != aggregate]
    if ordering == ORDERING_LEXICOGRAPHIC:
        rest = sorted(rest)
    elif ordering != ORDERING_APPEARANCE:
        raise ValueError(f"Unknown value ordering '{ordering}'")

    head = [aggregate] if aggregate is not None and aggregate in seen else []
    return tuple(head + rest)


def decompose(
        columns: Sequence[str],
        rule: DecompositionRule,
        aggregates: Optional[Mapping[str, str]] = None,
        ordering: str = ORDERING_LEXICOGRAPHIC,
        exclude: Iterable[str] = (),
) -> DimensionMap:
    """
    Build a DimensionMap from column names under the given rule.

    Best effort: columns that do not fit the rule are logged and skipped, never
    raised. `exclude` names columns that are not data columns (the period column).
    """
    aggregates = dict(aggregates or {})
    excluded = set(exclude)

    observed: Dict[str, List[str]] = {d: [] for d in rule.dimensions}
    columns_by_key: Dict[DimensionKey, str] = {}
    skipped: List[str] = []

    for column in columns:
        if column in excluded:
            continue

        key = rule.split(column)
        if key is None:
            skipped.append(column)
            continue

        if WILDCARD in key:
            # "All" is a query-time pseudo value and can never be enumerated
            skipped.append(column)
            continue

        if key in columns_by_key:
            logger.warning(
                "Columns decompose to the same dimension key; keeping first",
                extra={
                    "kept": columns_by_key[key],
                    "dropped": column,
                    "key": list(key),
                },
            )
            continue

        columns_by_key[key] = column
        for dim, value in zip(rule.dimensions, key):
            observed[dim].append(value)

    if skipped:
        logger.info(
            "Columns skipped by decomposition rule",
            extra={"n_skipped": len(skipped), "columns": skipped},
        )

    value_sets = {
        dim: order_values(observed[dim], aggregates.get(dim), ordering)
        for dim in rule.dimensions
    }

    return DimensionMap(
        dimensions=tuple(rule.dimensions),
        value_sets=value_sets,
        columns_by_key=columns_by_key,
        aggregates=aggregates,
        skipped=tuple(skipped),
    )
