from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

"""CategoryRow and SeriesDescriptor models.

A CategoryRow is one entry of the categorical axis after extraction; a
SeriesDescriptor identifies one measure column. Both are created by
``attribute_slicer.dataview.reader.extract`` and never modified afterwards.
"""

__all__ = [
    "CategoryRow",
    "SeriesDescriptor",
]


@dataclass(frozen=True)
class CategoryRow:
    """One row of the categorical axis.

    ``id`` is derived from the raw category value, never from ``label``, so two
    rows that display the same text but hold different raw values stay distinct.
    """
    id: str  # raw-value derived identity
    label: str  # display text
    raw_value: Any = None  # value as supplied by the data view
    values: Mapping[str, Any] = field(default_factory=dict)  # series key -> raw measure value


@dataclass(frozen=True)
class SeriesDescriptor:
    """One measure/series column, in legend order."""
    key: str  # series identity (settings store lookup key)
    name: str  # legend text
    color: str  # resolved color
    index: int = 0  # position among the recognized series
