from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .config_models import ColorSettings, FormatOptions, SlicerSettings

__all__ = [
    "ValueFormatter",
    "ConversionOptions",
]

# (value, format options) -> display string
ValueFormatter = Callable[[float, FormatOptions | None], str]


@dataclass(frozen=True)
class ConversionOptions:
    """Optional inputs of a conversion, all defaulted.

    search_text: text to highlight inside labels (None -> no decoration)
    formatting: number / label formatting (None -> FormatOptions())
    colors: ColorSettings or a plain series-key -> color mapping (None -> palette)
    width_basis: "item" (share of the item total) or "max" (share of the largest total)
    value_formatter: formatting provider (None -> services.formatting.format_number)
    """
    search_text: str | None = None
    formatting: FormatOptions | None = None
    colors: ColorSettings | Mapping[str, Any] | None = None
    width_basis: str = "item"
    value_formatter: ValueFormatter | None = None

    @classmethod
    def from_settings(
        cls, settings: SlicerSettings, search_text: str | None = None
    ) -> ConversionOptions:
        return cls(
            search_text=search_text,
            formatting=settings.formatting,
            colors=settings.colors,
            width_basis=settings.width_basis,
        )
