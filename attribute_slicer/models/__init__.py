"""Domain models for the attribute slicer conversion.

Input side: CategoryRow / SeriesDescriptor (extraction output) and the settings
dataclasses. Output side: the render model returned by ``convert``.
"""

from .category_row import CategoryRow, SeriesDescriptor
from .config_models import ColorSettings, FormatOptions, SlicerSettings
from .converted_item import (
    ConversionResult,
    ConvertedItem,
    HasId,
    ItemIdentity,
    Segment,
    SegmentInfo,
)
from .options import ConversionOptions, ValueFormatter
from .run_result import FileStat, RunResult

__all__ = [
    # Extraction models
    "CategoryRow",
    "SeriesDescriptor",
    # Settings models
    "ColorSettings",
    "FormatOptions",
    "SlicerSettings",
    "ConversionOptions",
    "ValueFormatter",
    # Render model
    "ConversionResult",
    "ConvertedItem",
    "HasId",
    "ItemIdentity",
    "Segment",
    "SegmentInfo",
    # CLI run models
    "FileStat",
    "RunResult",
]
