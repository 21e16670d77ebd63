"""
Core domain layer: parser, dimension decomposition, pivot engine,
series presentation and the dataset abstraction tying them together
"""

from .dataset import Dataset
from .decomposition import WILDCARD, DelimiterRule, DimensionMap, PrefixRule, decompose
from .filter_state import FilterState, FilterProfile
from .parser import ParsedTable, Row, parse_table
from .pivot import PivotEngine, QueryResult, QueryStatus, Series
from .presentation import ChartSeries, PresentationResolver

__all__ = [
    "Dataset",
    "WILDCARD",
    "DelimiterRule",
    "PrefixRule",
    "DimensionMap",
    "decompose",
    "FilterState",
    "FilterProfile",
    "ParsedTable",
    "Row",
    "parse_table",
    "PivotEngine",
    "QueryResult",
    "QueryStatus",
    "Series",
    "ChartSeries",
    "PresentationResolver",
]
