from __future__ import annotations

import logging
import math
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd

from ..models.config_models import FormatOptions

"""Number and category label formatting.

``format_number`` is the default formatting provider for rendered values: it
rounds to ``precision`` decimals and trims trailing zeros, so the text parses
back to the underlying number within rounding error. It never raises; values
that are not finite numbers render as empty text.
"""

__all__ = [
    "format_number",
    "format_category_label",
    "to_python_scalar",
]

logger = logging.getLogger(__name__)

# display_units -> (divisor, suffix)
_UNIT_SCALES: dict[str, tuple[float, str]] = {
    "thousands": (1e3, "K"),
    "millions": (1e6, "M"),
    "billions": (1e9, "bn"),
}


def _auto_units(number: float) -> str:
    magnitude = abs(number)
    if magnitude >= 1e9:
        return "billions"
    if magnitude >= 1e6:
        return "millions"
    if magnitude >= 1e3:
        return "thousands"
    return "none"


def format_number(value: Any, options: FormatOptions | None = None) -> str:
    """Render ``value`` as display text according to ``options``.

    Examples:
        >>> format_number(5.0)
        '5'
        >>> format_number(1234.5678)
        '1234.57'
        >>> format_number(1234.5678, FormatOptions(thousands_separator=True, precision=1))
        '1,234.6'
        >>> format_number(2500000, FormatOptions(display_units="auto"))
        '2.5M'
    """
    opts = options or FormatOptions()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return ""
    if not math.isfinite(number):
        return ""

    if opts.format_spec:
        try:
            return format(number, opts.format_spec)
        except (TypeError, ValueError) as e:
            logger.warning(f"invalid format_spec {opts.format_spec!r}: {e} -> default formatting")

    units = opts.display_units if opts.display_units != "auto" else _auto_units(number)
    suffix = ""
    if units in _UNIT_SCALES:
        divisor, suffix = _UNIT_SCALES[units]
        number = number / divisor

    precision = opts.precision if isinstance(opts.precision, int) and opts.precision >= 0 else 2
    sep = "," if opts.thousands_separator else ""
    text = f"{number:{sep}.{precision}f}"
    if opts.trim_zeros and "." in text:
        text = text.rstrip("0").rstrip(".")
    # -0.001 rounded to "-0"
    if text.lstrip("-").replace("0", "").replace(".", "").replace(",", "") == "":
        text = text.lstrip("-")
    return text + suffix


def to_python_scalar(raw: Any) -> Any:
    """numpy scalar -> plain Python value.

    datetime64 goes through pd.Timestamp since its ``.item()`` can be an int of
    nanoseconds.
    """
    if isinstance(raw, np.datetime64):
        stamp = pd.Timestamp(raw)
        return pd.NaT if stamp is pd.NaT else stamp.to_pydatetime()
    if isinstance(raw, np.generic):
        return raw.item()
    return raw


def format_category_label(raw: Any, options: FormatOptions | None = None) -> str:
    """Display text for a raw category value that came without a label."""
    opts = options or FormatOptions()
    raw = to_python_scalar(raw)
    if raw is None or (isinstance(raw, float) and math.isnan(raw)) or raw is pd.NaT:
        return opts.blank_label
    if isinstance(raw, bool):
        return str(raw)
    if isinstance(raw, float):
        if raw.is_integer():
            return str(int(raw))
        return repr(raw)
    if isinstance(raw, datetime):
        # pd.Timestamp is a datetime; naive midnight renders as the date
        if raw.tzinfo is None and raw.time() == time.min and not getattr(raw, "nanosecond", 0):
            return raw.date().isoformat()
        return raw.isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    return str(raw)
