from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "MatchParts",
    "split_match",
]


@dataclass(frozen=True)
class MatchParts:
    prefix: str
    match: str
    suffix: str


def split_match(label: str, search_text: str | None = None) -> MatchParts:
    """Split ``label`` around the first case-insensitive occurrence of ``search_text``.

    Without search text, or when it does not occur, the whole label is the
    match and prefix/suffix are empty.
    """
    if not search_text:
        return MatchParts(prefix="", match=label, suffix="")
    found = re.search(re.escape(search_text), label, flags=re.IGNORECASE)
    if found is None:
        return MatchParts(prefix="", match=label, suffix="")
    start, end = found.span()
    return MatchParts(prefix=label[:start], match=label[start:end], suffix=label[end:])
