from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..models.config_models import DEFAULT_ITEM_COLOR, DEFAULT_PALETTE, ColorSettings

"""Color resolution for items, segments and legend entries.

Series colors resolve in order:
1. explicit override in ColorSettings.series (series key, then series name)
2. palette entry chosen by series position (deterministic for a given palette)

Item colors use ColorSettings.categories (category id, then label) and fall
back to the default item color. Malformed entries are logged and skipped.
"""

__all__ = [
    "ColorResolver",
    "is_valid_color",
]

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR = re.compile(r"^(?:rgb|rgba|hsl|hsla)\(\s*[0-9.%,\s/]+\)$")
_NAMED_COLOR = re.compile(r"^[a-zA-Z]{3,20}$")


def is_valid_color(value: Any) -> bool:
    """True for hex (#rgb, #rrggbb, ...), rgb()/hsl() and plain named colors."""
    if not isinstance(value, str):
        return False
    text = value.strip()
    return bool(_HEX_COLOR.match(text) or _FUNC_COLOR.match(text) or _NAMED_COLOR.match(text))


class ColorResolver:
    """Resolve display colors against a read-only ColorSettings store."""

    def __init__(self, settings: ColorSettings | Mapping[str, Any] | None = None) -> None:
        if settings is None:
            settings = ColorSettings()
        elif isinstance(settings, Mapping):
            # bare mapping is treated as series overrides
            settings = ColorSettings(series=settings)
        elif not isinstance(settings, ColorSettings):
            logger.warning(
                f"unsupported color settings type {type(settings).__name__} -> default palette"
            )
            settings = ColorSettings()
        self.settings = settings
        self.palette = self._valid_palette(settings.palette)
        self.default_item_color = self._valid_or(
            settings.default_item_color, DEFAULT_ITEM_COLOR, "default_item_color"
        )

    @staticmethod
    def _valid_or(value: Any, fallback: str, what: str) -> str:
        if is_valid_color(value):
            return value.strip()
        logger.warning(f"malformed color for {what}: {value!r} -> {fallback}")
        return fallback

    @staticmethod
    def _valid_palette(palette: Any) -> tuple[str, ...]:
        if isinstance(palette, (list, tuple)):
            colors = tuple(c.strip() for c in palette if is_valid_color(c))
            if len(colors) != len(palette):
                logger.warning("palette contains malformed colors; they were dropped")
            if colors:
                return colors
        logger.warning("empty or malformed palette -> default palette")
        return DEFAULT_PALETTE

    def _lookup(self, table: Any, keys: tuple[str, ...], what: str) -> str | None:
        if not isinstance(table, Mapping):
            return None
        for key in keys:
            if key in table:
                value = table[key]
                if is_valid_color(value):
                    return value.strip()
                logger.warning(f"malformed color override for {what} {key!r}: {value!r}")
        return None

    def palette_color(self, index: int) -> str:
        return self.palette[index % len(self.palette)]

    def series_color(self, key: str, name: str | None = None, index: int = 0) -> str:
        keys = (key,) if name is None or name == key else (key, name)
        override = self._lookup(self.settings.series, keys, "series")
        if override is not None:
            return override
        return self.palette_color(index)

    def item_color(self, category_id: str, label: str | None = None) -> str:
        keys = (category_id,) if label is None else (category_id, label)
        override = self._lookup(self.settings.categories, keys, "category")
        if override is not None:
            return override
        return self.default_item_color
