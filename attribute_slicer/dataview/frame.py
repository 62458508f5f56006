from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..services.formatting import to_python_scalar

"""Building data views from files and pandas DataFrames.

- ``read_data_view_file``: JSON file already shaped as a categorical data view
- ``read_table``: CSV / Excel file into a DataFrame
- ``data_view_from_frame``: long-format DataFrame (one row per observation)
  into a categorical data view; categories and series keep first-appearance
  order, duplicate (category, series) pairs are summed, absent pairs are None.
"""

__all__ = [
    "DataViewReadError",
    "read_data_view_file",
    "read_table",
    "data_view_from_frame",
]

TABLE_SUFFIXES = {".csv", ".xlsx", ".xls"}


class DataViewReadError(Exception):
    """Raised when an input file cannot be read as a data view or table."""


def _clean(values: Sequence[Any]) -> list[Any]:
    out: list[Any] = []
    for v in values:
        v = to_python_scalar(v)
        if v is None or v is pd.NaT or (isinstance(v, float) and np.isnan(v)):
            out.append(None)
        else:
            out.append(v)
    return out


def read_data_view_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DataViewReadError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DataViewReadError(f"invalid json in {path}: {e}") from e
    if not isinstance(data, dict):
        raise DataViewReadError(f"{path}: data view must be a JSON object, got {type(data).__name__}")
    return data


def read_table(path: Path, sheet: str | None = None) -> pd.DataFrame:
    """Read a CSV or Excel file (first sheet unless ``sheet`` is given)."""
    suffix = path.suffix.lower()
    if suffix not in TABLE_SUFFIXES:
        raise DataViewReadError(f"unsupported table format: {path.name}")
    try:
        if suffix == ".csv":
            return pd.read_csv(path)
        return pd.read_excel(path, sheet_name=sheet if sheet is not None else 0)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise DataViewReadError(f"cannot read {path}: {e}") from e


def _source(name: str, group: Any = None) -> dict[str, Any]:
    source: dict[str, Any] = {"displayName": name, "queryName": name}
    if group is not None:
        source["groupName"] = group
    return source


def data_view_from_frame(
    df: pd.DataFrame,
    category: str,
    measures: Sequence[str] | None = None,
    series: str | None = None,
) -> dict[str, Any]:
    """Build a categorical data view from a long-format DataFrame.

    Parameters
    ----------
    df: source rows
    category: column holding the category axis
    measures: numeric columns (None/empty -> categories only)
    series: optional column whose values split each measure into series

    Raises
    ------
    DataViewReadError: a named column is missing from ``df``
    """
    measures = list(measures or [])
    required = {category, *measures} | ({series} if series else set())
    missing = required - set(df.columns)
    if missing:
        raise DataViewReadError(f"missing columns: {sorted(missing)}")

    categories = pd.unique(df[category])
    category_column = {"source": _source(category), "values": _clean(list(categories))}
    if not measures:
        return {"categorical": {"categories": [category_column]}}

    numeric = df[measures].apply(pd.to_numeric, errors="coerce")
    keys = df[[category]] if series is None else df[[category, series]]
    frame = pd.concat([keys, numeric], axis=1)

    value_columns: list[dict[str, Any]] = []
    if series is None:
        totals = frame.groupby(category, sort=False, dropna=False)[measures].sum(min_count=1)
        totals = totals.reindex(categories)
        for measure in measures:
            value_columns.append({"source": _source(measure), "values": _clean(totals[measure].tolist())})
    else:
        groups = pd.unique(df[series])
        totals = (
            frame.groupby([category, series], sort=False, dropna=False)[measures]
            .sum(min_count=1)
            .unstack(series)
        )
        totals = totals.reindex(categories)
        for measure in measures:
            for group in _clean(list(groups)):
                if (measure, group) in totals.columns:
                    values = _clean(totals[(measure, group)].tolist())
                else:
                    values = [None] * len(categories)
                value_columns.append({"source": _source(measure, group), "values": values})

    return {"categorical": {"categories": [category_column], "values": value_columns}}
