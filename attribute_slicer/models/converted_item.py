from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

"""Render model produced by the conversion.

ConvertedItem / Segment / SegmentInfo / ConversionResult are the public output
of ``attribute_slicer.services.conversion.convert``. ``to_dict`` / ``to_json``
emit the camelCase contract consumed by the rendering layer.
"""

__all__ = [
    "HasId",
    "ItemIdentity",
    "Segment",
    "SegmentInfo",
    "ConvertedItem",
    "ConversionResult",
]


class HasId(Protocol):
    """Anything carrying an item identity."""

    @property
    def id(self) -> str: ...


@dataclass(frozen=True)
class ItemIdentity:
    """Bare identity used to look up or compare items."""
    id: str


@dataclass(frozen=True)
class Segment:
    """Share of an item's total attributable to one series."""
    width: float  # proportional width (see width_basis)
    color: str  # series color
    value: float  # raw series value for the category (missing -> 0)
    display_value: str = ""  # formatted value

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "color": self.color,
            "value": self.value,
            "displayValue": self.display_value,
        }


@dataclass(frozen=True)
class SegmentInfo:
    """Legend entry for one series."""
    name: str
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "color": self.color}


@dataclass(frozen=True)
class ConvertedItem:
    """Public render unit: one category with its aggregate and segments.

    ``value``, ``rendered_value`` are None and ``value_segments`` is empty when
    the data view carries no measure columns.
    """
    id: str
    match: str
    match_prefix: str = ""
    match_suffix: str = ""
    color: str = "#ccc"
    value: float | None = None
    rendered_value: str | None = None
    value_segments: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        # tuple keeps the frozen item hashable
        object.__setattr__(self, "value_segments", tuple(self.value_segments))

    @property
    def identity(self) -> ItemIdentity:
        return ItemIdentity(id=self.id)

    @property
    def label(self) -> str:
        """Full display text (prefix + match + suffix)."""
        return f"{self.match_prefix}{self.match}{self.match_suffix}"

    def equals(self, other: HasId | Mapping[str, Any]) -> bool:
        """Identity-only comparison; label, color and value are ignored.

        ``other`` may be any object with an ``id`` attribute or a mapping
        with an ``"id"`` key.
        """
        if isinstance(other, Mapping):
            return other.get("id") == self.id
        return getattr(other, "id", None) == self.id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "match": self.match,
            "matchPrefix": self.match_prefix,
            "matchSuffix": self.match_suffix,
            "color": self.color,
            "value": self.value,
            "renderedValue": self.rendered_value,
            "valueSegments": [s.to_dict() for s in self.value_segments],
        }


@dataclass(frozen=True)
class ConversionResult:
    """Items plus the shared legend. Both lists are empty, never None."""
    items: list[ConvertedItem] = field(default_factory=list)
    segment_info: list[SegmentInfo] = field(default_factory=list)

    def find(self, identity: HasId) -> ConvertedItem | None:
        """Return the first item whose id matches ``identity``."""
        for item in self.items:
            if item.equals(identity):
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [i.to_dict() for i in self.items],
            "segmentInfo": [s.to_dict() for s in self.segment_info],
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
