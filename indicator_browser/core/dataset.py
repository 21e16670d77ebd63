from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from indicator_browser.core.decomposition import (
    ORDERING_LEXICOGRAPHIC,
    WILDCARD,
    DecompositionRule,
    DimensionMap,
    decompose,
)
from indicator_browser.core.parser import ParsedTable, Period
from indicator_browser.core.pivot import PivotEngine, QueryResult, Selection, selection_values
from indicator_browser.core.presentation import ChartSeries, PresentationResolver

logger = logging.getLogger(__name__)


class Dataset:
    """
    Unified dataset abstraction used throughout the browser.

    Includes:
    - The parsed table (rows + column inventory)
    - The dimension map derived once from the columns under the injected rule
    - Query access through the pivot engine
    - Chart-ready output through the presentation resolver

    Everything is derived in the constructor and treated as read-only afterwards.
    """

    # -------------------------------------------------------------------------
    # Constructor
    # -------------------------------------------------------------------------
    def __init__(
        self,
        name: str,
        group: str,
        table: ParsedTable,
        rule: DecompositionRule,
        aggregates: Optional[Mapping[str, str]] = None,
        ordering: str = ORDERING_LEXICOGRAPHIC,
        presentation: Optional[PresentationResolver] = None,
        file_path: Optional[Path] = None,
    ) -> None:
        self.name = name
        self.group = group
        self.table = table
        self.rule = rule
        self.file_path = file_path

        self.dimension_map: DimensionMap = decompose(
            table.columns,
            rule,
            aggregates=aggregates,
            ordering=ordering,
            exclude=[table.period_column],
        )
        self.engine = PivotEngine(table, self.dimension_map)
        self.presentation = presentation or PresentationResolver(
            label_order=rule.dimensions,
            aggregates=aggregates,
        )

        logger.info(
            "Dataset ready",
            extra={
                "dataset": name,
                "n_rows": len(table.rows),
                "n_series_columns": len(self.dimension_map.columns_by_key),
                "n_skipped_columns": len(self.dimension_map.skipped),
            },
        )

    # -------------------------------------------------------------------------
    # Filter-control helpers
    # -------------------------------------------------------------------------
    @property
    def dimensions(self) -> Tuple[str, ...]:
        return self.dimension_map.dimensions

    @property
    def periods(self) -> Tuple[Period, ...]:
        return self.table.periods

    def available_values(self, dimension: str, include_wildcard: bool = False) -> Tuple[str, ...]:
        """
        Ordered values for one dimension, for populating filter controls.

        The wildcard is never part of the enumerated set; `include_wildcard`
        prepends it for dropdowns that offer "All".
        """
        values = self.dimension_map.values(dimension)
        if include_wildcard:
            return (WILDCARD,) + values
        return values

    def sanitize_selections(self, selections: Mapping[str, Selection]) -> Dict[str, Selection]:
        """
        Drop unknown dimensions and values this dataset doesn't have. A single
        unknown value, or a list with no known value left, becomes the
        wildcard. Used when the UI switches datasets.
        """
        clean: Dict[str, Selection] = {}
        for dim in self.dimensions:
            value = selections.get(dim)
            known = self.dimension_map.values(dim)
            picked = selection_values(value)
            kept = [v for v in picked if v in known] if picked is not None else []
            if not kept:
                clean[dim] = WILDCARD
            elif isinstance(value, str):
                clean[dim] = kept[0]
            else:
                clean[dim] = kept
        return clean

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def query(self, selections: Mapping[str, Selection], target_period=None) -> QueryResult:
        return self.engine.resolve(selections, target_period)

    def resolve(self, selections: Mapping[str, Selection], target_period=None) -> List[ChartSeries]:
        """
        Resolve a filter straight to chart-ready series (label, color, points).

        Use `query` when the caller needs the status (e.g. "no data for period").
        """
        return self.presentation.resolve(self.query(selections, target_period))
