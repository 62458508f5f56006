from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

"""Settings dataclasses for the slicer conversion.

These model the persisted settings store: color overrides, number formatting
preferences and the segment width convention. ``attribute_slicer.config.loader``
builds them from YAML; callers may also construct them directly.
"""

__all__ = [
    "DEFAULT_ITEM_COLOR",
    "DEFAULT_PALETTE",
    "DISPLAY_UNITS",
    "WIDTH_BASES",
    "ColorSettings",
    "FormatOptions",
    "SlicerSettings",
]

DEFAULT_ITEM_COLOR = "#ccc"

# Host platform default theme, assigned to series by position
DEFAULT_PALETTE: tuple[str, ...] = (
    "#01B8AA",
    "#374649",
    "#FD625E",
    "#F2C80F",
    "#5F6B6D",
    "#8AD4EB",
    "#FE9666",
    "#A66999",
    "#3599B8",
    "#DFBFBF",
)

DISPLAY_UNITS = ("none", "auto", "thousands", "millions", "billions")
WIDTH_BASES = ("item", "max")


@dataclass(frozen=True)
class ColorSettings:
    """Color overrides read from the settings store.

    Entries are not validated here; malformed ones are skipped by the resolver
    (palette / default fallback) so bad settings never break a conversion.
    """
    series: Mapping[str, Any] = field(default_factory=dict)  # series key or name -> color
    categories: Mapping[str, Any] = field(default_factory=dict)  # category id or label -> color
    default_item_color: Any = DEFAULT_ITEM_COLOR
    palette: tuple[Any, ...] = DEFAULT_PALETTE


@dataclass(frozen=True)
class FormatOptions:
    """Number formatting preferences.

    ``format_spec`` is a Python format spec (e.g. ``",.1f"``) and wins over the
    other numeric fields when set.
    """
    precision: int = 2
    thousands_separator: bool = False
    display_units: str = "none"  # one of DISPLAY_UNITS
    trim_zeros: bool = True  # "5" instead of "5.00"
    format_spec: str | None = None
    blank_label: str = "(Blank)"  # category label for missing raw values


@dataclass(frozen=True)
class SlicerSettings:
    """Root settings object (settings file -> conversion collaborators)."""
    colors: ColorSettings = field(default_factory=ColorSettings)
    formatting: FormatOptions = field(default_factory=FormatOptions)
    width_basis: str = "item"  # one of WIDTH_BASES
