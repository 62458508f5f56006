from __future__ import annotations

import logging
from typing import Any

from ..dataview.reader import extract
from ..models.converted_item import ConversionResult, ConvertedItem, SegmentInfo
from ..models.options import ConversionOptions
from .aggregation import aggregate_rows
from .colors import ColorResolver
from .search import split_match

"""Data view -> render model conversion (public entry point).

Pipeline: extraction (dataview.reader) -> aggregation (services.aggregation)
-> shaping (identity, colors, search decoration). Each call is independent;
the only shared input is the read-only color settings.
"""

__all__ = [
    "convert",
]

logger = logging.getLogger(__name__)


def convert(data_view: Any, options: ConversionOptions | None = None) -> ConversionResult:
    """Convert a host data view into items plus legend entries.

    Args:
        data_view: categorical data view (mapping or attribute object); may be
            empty or lack any categorical axis
        options: search text, formatting, color settings, width basis

    Returns:
        ConversionResult; both lists are empty when the data view has no
        categorical axis. Items carry no value/segments when it has no measures.
    """
    opts = options or ConversionOptions()
    colors = ColorResolver(opts.colors)
    extracted = extract(data_view, colors, opts.formatting)

    aggregates = None
    if extracted.series:
        aggregates = aggregate_rows(
            extracted.rows,
            extracted.series,
            formatting=opts.formatting,
            value_formatter=opts.value_formatter,
            width_basis=opts.width_basis,
        )

    items: list[ConvertedItem] = []
    for pos, row in enumerate(extracted.rows):
        parts = split_match(row.label, opts.search_text)
        aggregate = aggregates[pos] if aggregates is not None else None
        items.append(
            ConvertedItem(
                id=row.id,
                match=parts.match,
                match_prefix=parts.prefix,
                match_suffix=parts.suffix,
                color=colors.item_color(row.id, row.label),
                value=aggregate.value if aggregate else None,
                rendered_value=aggregate.rendered_value if aggregate else None,
                value_segments=aggregate.segments if aggregate else (),
            )
        )

    segment_info = [SegmentInfo(name=s.name, color=s.color) for s in extracted.series]
    logger.debug(f"converted items={len(items)} segments={len(segment_info)}")
    return ConversionResult(items=items, segment_info=segment_info)
