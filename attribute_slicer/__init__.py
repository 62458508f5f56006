"""Attribute slicer data conversion.

Turns a host analytics data view (category axis + optional measures/series)
into a render model of items with proportional colored segments and a legend.
"""

from .models import (
    ColorSettings,
    ConversionOptions,
    ConversionResult,
    ConvertedItem,
    FormatOptions,
    ItemIdentity,
    Segment,
    SegmentInfo,
)
from .services.conversion import convert

__all__ = [
    "convert",
    "ColorSettings",
    "ConversionOptions",
    "ConversionResult",
    "ConvertedItem",
    "FormatOptions",
    "ItemIdentity",
    "Segment",
    "SegmentInfo",
]
