from __future__ import annotations

import pytest

from attribute_slicer.services.search import MatchParts, split_match


@pytest.mark.parametrize(
    ("label", "search", "expected"),
    [
        ("Google", None, MatchParts("", "Google", "")),
        ("Google", "", MatchParts("", "Google", "")),
        ("Google", "oo", MatchParts("G", "oo", "gle")),
        ("Google", "GOO", MatchParts("", "Goo", "gle")),
        ("Google", "gle", MatchParts("Goo", "gle", "")),
        ("Google", "xyz", MatchParts("", "Google", "")),
        ("a.b.c", ".", MatchParts("a", ".", "b.c")),
        ("(Blank)", "(b", MatchParts("", "(B", "lank)")),
    ],
)
def test_split_match(label, search, expected):
    assert split_match(label, search) == expected


def test_split_match_parts_rebuild_label():
    parts = split_match("Microsoft Corporation", "soft")
    assert parts.prefix + parts.match + parts.suffix == "Microsoft Corporation"
