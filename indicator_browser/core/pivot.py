from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from indicator_browser.core.decomposition import WILDCARD, DimensionMap
from indicator_browser.core.exceptions import FilterError
from indicator_browser.core.parser import ParsedTable, Period

logger = logging.getLogger(__name__)


class QueryStatus(str, Enum):
    OK = "ok"
    # no selected combination has a column in this dataset
    NO_MATCH = "no_match"
    # cross-sectional query for a period the dataset does not contain
    UNKNOWN_PERIOD = "unknown_period"


@dataclass(frozen=True)
class Point:
    period: Period
    value: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {"period": self.period, "value": self.value}


@dataclass(frozen=True)
class Series:
    """
    One resolved column.

    `key` is the series identity token: derived only from the resolved
    dimension values, so the same filter always yields the same key.
    """
    key: str
    selections: Tuple[Tuple[str, str], ...]
    column: str
    points: Tuple[Point, ...]

    def value_for(self, dimension: str) -> str:
        return dict(self.selections)[dimension]


@dataclass(frozen=True)
class QueryResult:
    """
    - wildcards: dimensions filtered with "All" (or left out)
    - expanded: dimensions that may vary across `series`: the wildcards plus
                dimensions filtered with a list of values
    """
    series: Tuple[Series, ...]
    wildcards: Tuple[str, ...]
    expanded: Tuple[str, ...] = ()
    status: QueryStatus = QueryStatus.OK
    period: Optional[Period] = None

    @property
    def is_empty(self) -> bool:
        return not self.series

    @property
    def is_cross_section(self) -> bool:
        return self.period is not None


_TOKEN_ESCAPES = (("%", "%25"), ("|", "%7C"), ("=", "%3D"))


def _escape_token_part(text: str) -> str:
    # "%" must be replaced first
    for raw, escaped in _TOKEN_ESCAPES:
        text = text.replace(raw, escaped)
    return text


Selection = Union[str, Sequence[str]]


def selection_values(value: Optional[Selection]) -> Optional[Tuple[str, ...]]:
    """
    Concrete values picked by one dimension's selection, or None for the
    wildcard. A single string, a list of strings, "All", "" and an empty list
    are all valid selections; a list containing "All" is the wildcard.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return None if value in ("", WILDCARD) else (value,)
    values = tuple(dict.fromkeys(str(v) for v in value if v not in (None, "")))
    if not values or WILDCARD in values:
        return None
    return values


def series_key(dimensions: Sequence[str], values: Sequence[str]) -> str:
    """`dim=value|dim=value`; separators inside names or values are percent-escaped."""
    return "|".join(
        f"{_escape_token_part(d)}={_escape_token_part(v)}" for d, v in zip(dimensions, values)
    )


class PivotEngine:
    """
    Single query entry point over one parsed dataset.

    Filters give each dimension a concrete value, a list of values or the
    wildcard. Wildcarded dimensions expand to their enumerated values, listed
    ones to the picked subset (DimensionMap order either way, first dimension
    outermost). Combinations without a column are omitted.

    The engine holds no mutable state, so concurrent queries against the same
    dataset need no locking.
    """

    def __init__(self, table: ParsedTable, dimension_map: DimensionMap) -> None:
        self.table = table
        self.dimension_map = dimension_map

    def _candidates(
            self,
            selections: Mapping[str, Selection],
    ) -> Tuple[List[Tuple[str, ...]], Tuple[str, ...], Tuple[str, ...]]:
        unknown = [d for d in selections if not self.dimension_map.has_dimension(d)]
        if unknown:
            raise FilterError(
                f"Unknown dimension(s) {sorted(unknown)}. "
                f"Available dimensions: {list(self.dimension_map.dimensions)}"
            )

        candidates: List[Tuple[str, ...]] = []
        wildcards: List[str] = []
        expanded: List[str] = []
        for dim in self.dimension_map.dimensions:
            value = selections.get(dim)
            picked = selection_values(value)
            if picked is None:
                candidates.append(self.dimension_map.values(dim))
                wildcards.append(dim)
                expanded.append(dim)
            elif isinstance(value, str):
                candidates.append(picked)
            else:
                # a value list expands like the wildcard, restricted to the picked values
                chosen = set(picked)
                candidates.append(tuple(v for v in self.dimension_map.values(dim) if v in chosen))
                expanded.append(dim)
        return candidates, tuple(wildcards), tuple(expanded)

    def _points(self, column: str, period: Optional[Period]) -> Tuple[Point, ...]:
        col = self.table.frame[column]
        if period is not None:
            col = col.loc[[period]]
        return tuple(
            Point(period=p, value=None if np.isnan(v) else float(v))
            for p, v in zip(col.index.tolist(), col.tolist())
        )

    def resolve(
            self,
            selections: Mapping[str, Selection],
            target_period: Any = None,
    ) -> QueryResult:
        """
        Resolve a filter to an ordered series list.

        :param selections: dimension -> value, list of values or "All"; omitted dimensions are "All"
        :param target_period: if given, narrow every series to that single period
        :return: QueryResult; never raises for absent columns or periods
        :raises FilterError: if `selections` names a dimension the dataset does not have
        """
        candidates, wildcards, expanded = self._candidates(selections)

        period = None
        if target_period is not None and target_period != "":
            period = self.table.coerce_period(target_period)
            if period not in self.table.frame.index:
                logger.debug(
                    "Cross-sectional query for unknown period",
                    extra={"period": str(target_period)},
                )
                return QueryResult(
                    series=(),
                    wildcards=wildcards,
                    expanded=expanded,
                    status=QueryStatus.UNKNOWN_PERIOD,
                    period=period,
                )

        dims = self.dimension_map.dimensions
        series: List[Series] = []
        for key in itertools.product(*candidates):
            column = self.dimension_map.column_for(key)
            if column is None:
                continue
            series.append(
                Series(
                    key=series_key(dims, key),
                    selections=tuple(zip(dims, key)),
                    column=column,
                    points=self._points(column, period),
                )
            )

        status = QueryStatus.OK if series else QueryStatus.NO_MATCH
        return QueryResult(
            series=tuple(series),
            wildcards=wildcards,
            expanded=expanded,
            status=status,
            period=period,
        )
