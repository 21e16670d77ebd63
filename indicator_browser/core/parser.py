from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from indicator_browser.core.exceptions import ParseError

logger = logging.getLogger(__name__)

Period = Union[int, float, str]


@dataclass(frozen=True)
class Row:
    """
    One observation period.

    `values` maps column name -> float, or None when the cell was empty or
    failed numeric parsing. None is the missing marker; it is never zero.
    """
    period: Period
    values: Mapping[str, Optional[float]]


@dataclass(frozen=True, eq=False)
class ParsedTable:
    """
    Immutable result of parsing one raw dataset.

    - columns: header order exactly as in the source (period column included)
    - rows: ordered by period ascending, periods unique
    - frame: the same data as a DataFrame indexed by period (NaN = missing),
             used by the pivot engine for column lookups
    """
    period_column: str
    columns: Tuple[str, ...]
    rows: Tuple[Row, ...]
    frame: pd.DataFrame
    period_kind: str = "int"

    @property
    def value_columns(self) -> Tuple[str, ...]:
        return tuple(c for c in self.columns if c != self.period_column)

    @property
    def periods(self) -> Tuple[Period, ...]:
        return tuple(self.frame.index.tolist())

    def has_period(self, period: Any) -> bool:
        return self.coerce_period(period) in self.frame.index

    def coerce_period(self, value: Any) -> Any:
        """
        Normalise a caller-supplied period (e.g. "2020" from a dropdown) to the
        period type of this table. Values that cannot be coerced are returned
        as stripped strings, which simply won't match any row.
        """
        if value is None:
            return None
        text = str(value).strip()
        try:
            if self.period_kind == "int":
                number = float(text)
                return int(number) if number.is_integer() else number
            if self.period_kind == "float":
                return float(text)
        except ValueError:
            return text
        return text


def _read_header(text: str, delimiter: str) -> List[str]:
    first_line = text.splitlines()[0]
    return next(csv.reader([first_line], delimiter=delimiter), [])


def _unique_positions(header: Sequence[str]) -> List[int]:
    """Positions of the first occurrence of each header name."""
    seen: Dict[str, int] = {}
    dropped: List[str] = []
    for pos, name in enumerate(header):
        if name in seen:
            dropped.append(name)
            continue
        seen[name] = pos

    if dropped:
        logger.warning(
            "Duplicate column names in header; keeping first occurrence",
            extra={"duplicates": sorted(set(dropped))},
        )
    return list(seen.values())


def _read_frame(text: str, delimiter: str) -> pd.DataFrame:
    """
    Data rows as strings, one column per distinct header name.

    The header is tokenised here rather than by pandas so repeated names are
    never mangled into new ones (`X.1`).
    """
    header = _read_header(text, delimiter)
    n_header = len(header)
    keep = _unique_positions(header)

    def _truncate(bad_line: List[str]) -> List[str]:
        # Rows longer than the header are matched by position; extras dropped
        return bad_line[:n_header]

    body = text.split("\n", 1)[1] if "\n" in text else ""
    if not body.strip():
        return pd.DataFrame({header[pos]: pd.Series([], dtype=object) for pos in keep})

    df = pd.read_csv(
        io.StringIO(body),
        sep=delimiter,
        header=None,
        names=list(range(n_header)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
        engine="python",
        on_bad_lines=_truncate,
    )
    df = df[keep]
    df.columns = [header[pos] for pos in keep]
    return df


def _type_periods(raw: pd.Series) -> Tuple[pd.Index, str]:
    numeric = pd.to_numeric(raw, errors="coerce")
    # inf / 1e400 parse as numbers but are not usable as periods
    if len(raw) and numeric.notna().all() and np.isfinite(numeric.to_numpy(dtype=np.float64)).all():
        if (numeric == numeric.round()).all():
            return pd.Index([int(v) for v in numeric], dtype=object), "int"
        return pd.Index([float(v) for v in numeric], dtype=object), "float"
    return pd.Index(list(raw), dtype=object), "str"


def _to_value(v: float) -> Optional[float]:
    if v is None or np.isnan(v):
        return None
    return float(v)


def parse_table(
        text: str,
        period_column: str = "year",
        delimiter: str = ",",
) -> ParsedTable:
    """
    Parse raw delimited text with a header row into a ParsedTable.

    - Rows with an empty period field are skipped (trailing blank lines are common)
    - Numeric cells are parsed permissively; anything unparsable becomes missing
    - Duplicate periods keep the first row
    - Repeated header names keep the first column

    :raises ParseError: if the delimiter is not one character, the text has no
                        header row, the header is blank, or the period
                        column is not in the header
    """
    if len(delimiter) != 1:
        raise ParseError(f"Delimiter must be a single character, got {delimiter!r}")

    if text is None:
        raise ParseError("Dataset text is empty; no header row")

    text = text.lstrip("\ufeff")
    if not text.strip():
        raise ParseError("Dataset text is empty; no header row")

    first_line = text.splitlines()[0]
    if not first_line.strip().strip(delimiter).strip():
        raise ParseError("Header row is empty")

    try:
        df = _read_frame(text, delimiter)
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"Header row could not be read: {e}") from e

    columns: Tuple[str, ...] = tuple(str(c) for c in df.columns)
    if period_column not in columns:
        raise ParseError(
            f"Period column '{period_column}' not found in header. "
            f"Available columns: {list(columns)}"
        )

    period_raw = df[period_column].fillna("").astype(str).str.strip()
    keep = period_raw != ""
    n_skipped = int((~keep).sum())
    if n_skipped:
        logger.debug(
            "Skipping rows with empty period",
            extra={"period_column": period_column, "n_skipped": n_skipped},
        )

    df = df.loc[keep]
    value_columns = [c for c in columns if c != period_column]

    index, period_kind = _type_periods(period_raw[keep])
    values = pd.DataFrame(
        {
            c: pd.to_numeric(df[c].astype(str).str.strip(), errors="coerce").to_numpy(dtype=np.float64)
            for c in value_columns
        },
        index=index,
        columns=value_columns,
        dtype=float,
    )

    duplicated = values.index.duplicated(keep="first")
    if duplicated.any():
        logger.warning(
            "Duplicate periods in dataset; keeping first occurrence",
            extra={
                "period_column": period_column,
                "duplicates": sorted({str(p) for p in values.index[duplicated]}),
            },
        )
        values = values.loc[~duplicated]

    values = values.sort_index(kind="mergesort")
    values.index.name = period_column

    records: Dict[Any, Dict[str, Optional[float]]] = values.to_dict(orient="index")
    rows = tuple(
        Row(period=period, values={c: _to_value(v) for c, v in record.items()})
        for period, record in records.items()
    )

    logger.info(
        "Parsed dataset text",
        extra={
            "n_rows": len(rows),
            "n_columns": len(columns),
            "period_kind": period_kind,
        },
    )

    return ParsedTable(
        period_column=period_column,
        columns=columns,
        rows=rows,
        frame=values,
        period_kind=period_kind,
    )
