from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from ..models.category_row import CategoryRow, SeriesDescriptor
from ..models.config_models import ColorSettings, FormatOptions
from ..services.colors import ColorResolver
from ..services.formatting import format_category_label, to_python_scalar

"""Data view extraction.

Reads the host's categorical data view into CategoryRow / SeriesDescriptor
lists. Expected shape (mapping or attribute object at every level):

    {"categorical": {
        "categories": [{"source": {"displayName": ..., "queryName": ...},
                        "values": [...raw...],
                        "labels": [...optional display text...]}],
        "values": [{"source": {"displayName": ..., "queryName": ..., "groupName": ...},
                    "values": [...numbers...]}]}}

Absent pieces are not errors: no categorical axis -> nothing extracted,
no measure columns -> rows without values, short/long measure columns are
padded with None / truncated to the category count.
"""

__all__ = [
    "ExtractedView",
    "extract",
    "make_category_id",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedView:
    rows: list[CategoryRow] = field(default_factory=list)
    series: list[SeriesDescriptor] = field(default_factory=list)


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _as_list(values: Any) -> list[Any]:
    if values is None or isinstance(values, (str, bytes, Mapping)):
        return []
    if isinstance(values, (pd.Series, pd.Index, np.ndarray)):
        return values.tolist()
    if isinstance(values, Iterable):
        return list(values)
    return []


def _is_missing(raw: Any) -> bool:
    return raw is None or raw is pd.NaT or (isinstance(raw, float) and math.isnan(raw))


def _identity_value(raw: Any) -> Any:
    raw = to_python_scalar(raw)
    if _is_missing(raw):
        return None
    if isinstance(raw, datetime):
        return {"datetime": raw.isoformat()}
    if isinstance(raw, date):
        return {"date": raw.isoformat()}
    if isinstance(raw, (str, int, float, bool)):
        return raw
    return {type(raw).__name__: str(raw)}


def make_category_id(column_key: str, raw: Any) -> str:
    """Stable id for a category value: same raw value -> same id.

    Type is part of the identity (``1`` and ``"1"`` differ); the label is not.
    """
    return json.dumps([column_key, _identity_value(raw)], ensure_ascii=False, sort_keys=True)


def _column_key(source: Any, fallback: str) -> str:
    return str(_field(source, "queryName") or _field(source, "displayName") or fallback)


def _fit_length(values: list[Any], size: int, what: str) -> list[Any]:
    if len(values) == size:
        return values
    logger.warning(f"{what} has {len(values)} values for {size} categories -> padded/truncated")
    if len(values) > size:
        return values[:size]
    return values + [None] * (size - len(values))


def _extract_series(
    columns: list[Any], colors: ColorResolver, formatting: FormatOptions | None
) -> list[tuple[SeriesDescriptor, list[Any]]]:
    measures = {
        _column_key(_field(c, "source"), f"Measure {i + 1}") for i, c in enumerate(columns)
    }
    single_measure = len(measures) <= 1
    seen: set[str] = set()
    out: list[tuple[SeriesDescriptor, list[Any]]] = []
    for idx, column in enumerate(columns):
        source = _field(column, "source")
        measure = _column_key(source, f"Measure {idx + 1}")
        display = str(_field(source, "displayName") or measure)
        group = _field(source, "groupName")
        if group is None:
            group = _field(column, "groupName")
        if group is not None and not _is_missing(group):
            group_text = format_category_label(group, formatting)
            key = group_text if single_measure else f"{group_text}/{measure}"
            name = group_text if single_measure else f"{group_text} - {display}"
        else:
            key, name = measure, display
        # keys must stay unique; rows store values by key
        base, n = key, 2
        while key in seen:
            key = f"{base}#{n}"
            n += 1
        seen.add(key)
        descriptor = SeriesDescriptor(
            key=key,
            name=name,
            color=colors.series_color(key, name, idx),
            index=idx,
        )
        out.append((descriptor, _as_list(_field(column, "values"))))
    return out


def extract(
    data_view: Any,
    colors: ColorResolver | ColorSettings | Mapping[str, Any] | None = None,
    formatting: FormatOptions | None = None,
) -> ExtractedView:
    """Read rows and series from ``data_view``; never raises on absent structure."""
    categorical = _field(data_view, "categorical")
    categories = _as_list(_field(categorical, "categories"))
    if not categories:
        logger.debug("data view has no categorical axis -> empty extraction")
        return ExtractedView()

    category = categories[0]
    if _field(category, "values") is None:
        logger.debug("category column has no values -> empty extraction")
        return ExtractedView()
    raw_values = _as_list(_field(category, "values"))
    labels = _as_list(_field(category, "labels"))
    column_key = _column_key(_field(category, "source"), "category")

    resolver = colors if isinstance(colors, ColorResolver) else ColorResolver(colors)
    value_columns = _as_list(_field(categorical, "values"))
    series_columns = _extract_series(value_columns, resolver, formatting)

    size = len(raw_values)
    fitted = [
        (descriptor, _fit_length(values, size, f"series {descriptor.key!r}"))
        for descriptor, values in series_columns
    ]

    rows: list[CategoryRow] = []
    for i, raw in enumerate(raw_values):
        raw = to_python_scalar(raw)
        label_raw = labels[i] if i < len(labels) else None
        if label_raw is None or _is_missing(label_raw):
            label = format_category_label(raw, formatting)
        else:
            label = str(label_raw)
        rows.append(
            CategoryRow(
                id=make_category_id(column_key, raw),
                label=label,
                raw_value=raw,
                values={descriptor.key: values[i] for descriptor, values in fitted},
            )
        )

    series = [descriptor for descriptor, _ in fitted]
    logger.debug(f"extracted rows={len(rows)} series={len(series)}")
    return ExtractedView(rows=rows, series=series)
