from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ColorSettings, FormatOptions, SlicerSettings

"""Settings store loader.

Responsibilities:
- Load a YAML settings file (colors / formatting / width_basis)
- Validate it against the bundled JSON schema (settings_schema.json)
- Apply defaults for every missing section
- Resolve the default settings path from ATTRIBUTE_SLICER_SETTINGS

Color entries are deliberately left untyped by the schema: a malformed color
(e.g. an unquoted ``#fff`` that YAML reads as a comment) is handled by the
resolver's fallback at conversion time, not rejected here.
"""

SCHEMA_PATH = Path(__file__).parent / "settings_schema.json"
SETTINGS_ENV = "ATTRIBUTE_SLICER_SETTINGS"


class ConfigError(Exception):
    pass


def _validate_settings_schema(data: dict[str, Any]) -> None:
    """Validate settings data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"settings schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"settings validation failed: {e.message}") from e


def _str_keys(mapping: dict[Any, Any] | None) -> dict[str, Any]:
    # YAML reads `2016: "#f00"` with an int key; series keys are strings
    return {str(k): v for k, v in (mapping or {}).items()}


def settings_from_dict(data: dict[str, Any]) -> SlicerSettings:
    """Build SlicerSettings from already-parsed data (validated first)."""
    if not isinstance(data, dict):
        raise ConfigError(f"settings must be a mapping, got {type(data).__name__}")
    _validate_settings_schema(data)

    colors_raw = data.get("colors") or {}
    color_defaults = ColorSettings()
    colors = ColorSettings(
        series=_str_keys(colors_raw.get("series")),
        categories=_str_keys(colors_raw.get("categories")),
        default_item_color=colors_raw.get("default_item_color", color_defaults.default_item_color),
        palette=tuple(colors_raw.get("palette") or color_defaults.palette),
    )

    fmt_raw = data.get("formatting") or {}
    fmt_defaults = FormatOptions()
    formatting = FormatOptions(
        precision=fmt_raw.get("precision", fmt_defaults.precision),
        thousands_separator=fmt_raw.get("thousands_separator", fmt_defaults.thousands_separator),
        display_units=fmt_raw.get("display_units", fmt_defaults.display_units),
        trim_zeros=fmt_raw.get("trim_zeros", fmt_defaults.trim_zeros),
        format_spec=fmt_raw.get("format_spec", fmt_defaults.format_spec),
        blank_label=fmt_raw.get("blank_label", fmt_defaults.blank_label),
    )
    return SlicerSettings(
        colors=colors,
        formatting=formatting,
        width_basis=data.get("width_basis", "item"),
    )


def load_settings(path: Path) -> SlicerSettings:
    if not path.exists():
        raise ConfigError(f"settings file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    return settings_from_dict(data)


def default_settings_path() -> Path | None:
    """Settings path named by ATTRIBUTE_SLICER_SETTINGS, if any."""
    value = os.getenv(SETTINGS_ENV)
    return Path(value) if value else None
