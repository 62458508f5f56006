from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from ..models.category_row import CategoryRow, SeriesDescriptor
from ..models.config_models import WIDTH_BASES, FormatOptions
from ..models.converted_item import Segment
from ..models.options import ValueFormatter
from .formatting import format_number

"""Per-row aggregation: totals, rendered values and proportional segments.

Rows x series are laid out in a float DataFrame; anything that is missing or
not numeric becomes 0 so a row total is always the sum of its segment values.

Width convention (``width_basis``):
- "item": value / row total (segments of a row sum to 1.0)
- "max":  value / largest row total (comparable across rows)
A zero denominator yields zero widths.
"""

__all__ = [
    "RowAggregate",
    "aggregate_row",
    "aggregate_rows",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowAggregate:
    value: float
    rendered_value: str
    segments: tuple[Segment, ...] = ()


def _as_float(raw: Any) -> float:
    """Cell -> float; anything that does not fit a float becomes NaN."""
    if not pd.api.types.is_scalar(raw):
        return np.nan
    try:
        return float(pd.to_numeric(raw, errors="coerce"))
    except (TypeError, ValueError, OverflowError):
        return np.nan


def _measure_frame(rows: Sequence[CategoryRow], series: Sequence[SeriesDescriptor]) -> pd.DataFrame:
    columns = list(range(len(series)))
    data = [[_as_float(row.values.get(s.key)) for s in series] for row in rows]
    numeric = pd.DataFrame(data, columns=columns, dtype=float)
    return numeric.replace([np.inf, -np.inf], np.nan).fillna(0.0)


def _normalize_basis(width_basis: str) -> str:
    if width_basis in WIDTH_BASES:
        return width_basis
    logger.warning(f"unknown width_basis {width_basis!r} -> 'item'")
    return "item"


def aggregate_rows(
    rows: Sequence[CategoryRow],
    series: Sequence[SeriesDescriptor],
    formatting: FormatOptions | None = None,
    value_formatter: ValueFormatter | None = None,
    width_basis: str = "item",
) -> list[RowAggregate]:
    """Aggregate every row against the ordered series list.

    Each row gets exactly one segment per series, in series order, so the
    segment count is identical across rows.
    """
    if not rows:
        return []
    fmt = value_formatter or format_number
    if not series:
        return [RowAggregate(value=0.0, rendered_value=fmt(0.0, formatting)) for _ in rows]
    values = _measure_frame(rows, series)
    totals = values.sum(axis=1)

    if _normalize_basis(width_basis) == "max":
        peak = float(totals.max()) if len(totals) else 0.0
        denominator = pd.Series(peak, index=totals.index)
    else:
        denominator = totals
    widths = values.div(denominator.where(denominator != 0), axis=0).fillna(0.0)

    results: list[RowAggregate] = []
    for pos in range(len(rows)):
        row_values = values.iloc[pos].tolist()
        row_widths = widths.iloc[pos].tolist()
        segments = tuple(
            Segment(
                width=float(w),
                color=s.color,
                value=float(v),
                display_value=fmt(float(v), formatting),
            )
            for s, v, w in zip(series, row_values, row_widths)
        )
        total = float(totals.iloc[pos])
        results.append(
            RowAggregate(value=total, rendered_value=fmt(total, formatting), segments=segments)
        )
    return results


def aggregate_row(
    row: CategoryRow,
    series: Sequence[SeriesDescriptor],
    formatting: FormatOptions | None = None,
    value_formatter: ValueFormatter | None = None,
) -> RowAggregate:
    """Aggregate a single row (width basis is the row's own total)."""
    return aggregate_rows([row], series, formatting, value_formatter)[0]
