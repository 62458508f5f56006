from __future__ import annotations

from types import SimpleNamespace

import pytest

from attribute_slicer.models.config_models import ColorSettings, FormatOptions
from attribute_slicer.models.converted_item import ItemIdentity
from attribute_slicer.models.options import ConversionOptions
from attribute_slicer.services.conversion import convert

"""Unit tests for the data view -> render model conversion."""


class TestCategoriesOnly:
    def test_converts_categories(self, categories_only):
        converted = convert(categories_only["data_view"])
        assert [n.match for n in converted.items] == categories_only["categories"]

    def test_no_segment_info(self, categories_only):
        converted = convert(categories_only["data_view"])
        # only categories were given, so there is nothing to put in a legend
        assert converted.segment_info == []

    def test_items_have_defaults_and_no_values(self, categories_only):
        converted = convert(categories_only["data_view"])
        for n in converted.items:
            assert n.color == "#ccc"
            assert n.match_prefix == ""
            assert n.match_suffix == ""
            assert n.id
            assert n.value is None
            assert n.rendered_value is None
            assert n.value_segments == ()

    def test_equals_uses_id(self, categories_only):
        converted = convert(categories_only["data_view"])
        for n in converted.items:
            assert n.equals(ItemIdentity(id=n.id)) is True
            assert n.equals(SimpleNamespace(id=n.id)) is True
            assert n.equals(ItemIdentity(id="SOMETHING RANDOM")) is False
            assert n.equals({"id": n.id}) is True
            assert n.equals({"id": "SOMETHING RANDOM"}) is False
            assert n.equals({}) is False


class TestCategoriesAndValues:
    def test_converts_categories(self, categories_and_values):
        converted = convert(categories_and_values["data_view"])
        assert [n.match for n in converted.items] == categories_and_values["categories"]

    def test_item_values(self, categories_and_values):
        converted = convert(categories_and_values["data_view"])
        for n, expected in zip(converted.items, categories_and_values["values"], strict=True):
            assert n.value == pytest.approx(expected["total"], abs=0.2)

    def test_rendered_values(self, categories_and_values):
        converted = convert(categories_and_values["data_view"])
        for n, expected in zip(converted.items, categories_and_values["values"], strict=True):
            assert float(n.rendered_value) == pytest.approx(expected["rendered_value"], abs=0.2)

    def test_segment_widths(self, categories_and_values):
        converted = convert(categories_and_values["data_view"])
        for n, expected in zip(converted.items, categories_and_values["values"], strict=True):
            assert len(n.value_segments) == 1
            segment = n.value_segments[0]
            # a lone series is the whole bar unless the total is zero
            assert segment.width == (1.0 if expected["total"] else 0.0)
            assert segment.width * n.value == pytest.approx(expected["total"], abs=0.2)

    def test_segment_info_names_measure(self, categories_and_values):
        converted = convert(categories_and_values["data_view"])
        assert [s.name for s in converted.segment_info] == ["Sales"]

    def test_items_have_values(self, categories_and_values):
        converted = convert(categories_and_values["data_view"])
        for n in converted.items:
            assert n.color == "#ccc"
            assert n.value is not None
            assert n.rendered_value
            assert n.value_segments


class TestCategoriesAndValuesWithSeries:
    def test_converts_categories(self, categories_and_values_with_series):
        fixture = categories_and_values_with_series
        converted = convert(fixture["data_view"])
        assert [n.match for n in converted.items] == [i["match"] for i in fixture["expected"]["items"]]

    def test_item_values(self, categories_and_values_with_series):
        expected = categories_and_values_with_series["expected"]
        converted = convert(categories_and_values_with_series["data_view"])
        for n, e in zip(converted.items, expected["items"], strict=True):
            assert n.value == pytest.approx(e["value"], abs=0.2)
            assert float(n.rendered_value) == pytest.approx(e["rendered_value"], abs=0.2)

    def test_segment_widths(self, categories_and_values_with_series):
        expected = categories_and_values_with_series["expected"]
        converted = convert(categories_and_values_with_series["data_view"])
        for n, e in zip(converted.items, expected["items"], strict=True):
            assert len(n.value_segments) == len(expected["segment_info"])
            for segment, es in zip(n.value_segments, e["valueSegments"], strict=True):
                assert segment.width == pytest.approx(es["width"], abs=0.2)
                assert segment.width * n.value == pytest.approx(es["value"], abs=0.2)

    def test_segment_values_sum_to_item_value(self, categories_and_values_with_series):
        converted = convert(categories_and_values_with_series["data_view"])
        for n in converted.items:
            assert sum(s.value for s in n.value_segments) == pytest.approx(n.value)

    def test_segment_colors_with_settings(self, categories_and_values_with_series):
        fixture = categories_and_values_with_series
        options = ConversionOptions(colors=ColorSettings(series=fixture["settings_colors"]))
        converted = convert(fixture["data_view"], options)
        for n, e in zip(converted.items, fixture["expected"]["items"], strict=True):
            assert [s.color for s in n.value_segments] == [s["color"] for s in e["valueSegments"]]

    def test_segment_info_names(self, categories_and_values_with_series):
        fixture = categories_and_values_with_series
        converted = convert(fixture["data_view"])
        assert [s.name for s in converted.segment_info] == [
            s["name"] for s in fixture["expected"]["segment_info"]
        ]

    def test_segment_info_colors_with_settings(self, categories_and_values_with_series):
        fixture = categories_and_values_with_series
        converted = convert(fixture["data_view"], ConversionOptions(colors=fixture["settings_colors"]))
        assert [s.color for s in converted.segment_info] == [
            s["color"] for s in fixture["expected"]["segment_info"]
        ]

    def test_default_palette_without_settings(self, categories_and_values_with_series):
        fixture = categories_and_values_with_series
        converted = convert(fixture["data_view"])
        assert [s.color for s in converted.segment_info] == fixture["palette_colors"]

    def test_colors_are_deterministic(self, categories_and_values_with_series):
        fixture = categories_and_values_with_series
        options = ConversionOptions(colors=ColorSettings(series=fixture["settings_colors"]))
        first = convert(fixture["data_view"], options)
        second = convert(fixture["data_view"], options)
        assert [s.color for s in first.segment_info] == [s.color for s in second.segment_info]
        for a, b in zip(first.items, second.items, strict=True):
            assert [s.color for s in a.value_segments] == [s.color for s in b.value_segments]

    def test_equals_uses_id(self, categories_and_values_with_series):
        converted = convert(categories_and_values_with_series["data_view"])
        for n in converted.items:
            assert n.equals(ItemIdentity(id=n.id)) is True
            assert n.equals(ItemIdentity(id="SOMETHING RANDOM")) is False

    def test_reconversion_keeps_ids(self, categories_and_values_with_series):
        first = convert(categories_and_values_with_series["data_view"])
        second = convert(categories_and_values_with_series["data_view"])
        for a, b in zip(first.items, second.items, strict=True):
            assert a is not b
            assert a.equals(b)


def test_worked_example_two_series():
    data_view = {
        "categorical": {
            "categories": [{"source": {"displayName": "Cat"}, "values": ["A", "B"]}],
            "values": [
                {"source": {"displayName": "V", "groupName": "s1"}, "values": [2, 0]},
                {"source": {"displayName": "V", "groupName": "s2"}, "values": [3, 5]},
            ],
        }
    }
    converted = convert(data_view)
    a, b = converted.items
    assert a.value == 5
    assert [(s.value, s.width) for s in a.value_segments] == [(2, pytest.approx(0.4)), (3, pytest.approx(0.6))]
    assert b.value == 5
    assert [(s.value, s.width) for s in b.value_segments] == [(0, 0), (5, 1)]


@pytest.mark.parametrize(
    "data_view",
    [
        {},
        None,
        {"categorical": None},
        {"categorical": {}},
        {"categorical": {"categories": []}},
        {"categorical": {"categories": [{}]}},
        {"categorical": {"values": [{"values": [1, 2]}]}},
        SimpleNamespace(),
        "not a data view",
        42,
    ],
)
def test_no_categorical_information_gives_empty_result(data_view):
    converted = convert(data_view)
    assert converted.items == []
    assert converted.segment_info == []


def test_search_text_splits_label(categories_only):
    converted = convert(categories_only["data_view"], ConversionOptions(search_text="oo"))
    google = converted.items[1]
    assert (google.match_prefix, google.match, google.match_suffix) == ("G", "oo", "gle")
    # no occurrence -> undecorated
    apple = converted.items[2]
    assert (apple.match_prefix, apple.match, apple.match_suffix) == ("", "Apple", "")


def test_search_does_not_filter_items(categories_only):
    converted = convert(categories_only["data_view"], ConversionOptions(search_text="zzz"))
    assert len(converted.items) == len(categories_only["categories"])


def test_ids_come_from_raw_values_not_labels():
    data_view = {
        "categorical": {
            "categories": [
                {
                    "source": {"queryName": "T.Code"},
                    "values": [1, 2, 1, "1"],
                    "labels": ["Same", "Same", "Other", "Other"],
                }
            ]
        }
    }
    items = convert(data_view).items
    assert [i.match for i in items] == ["Same", "Same", "Other", "Other"]
    assert items[0].id != items[1].id  # same label, different raw value
    assert items[0].id == items[2].id  # same raw value, different label
    assert items[0].id != items[3].id  # 1 and "1" differ


def test_inconsistent_series_lengths_degrade_to_zero():
    data_view = {
        "categorical": {
            "categories": [{"values": ["x", "y", "z"]}],
            "values": [
                {"source": {"displayName": "M1"}, "values": [1]},
                {"source": {"displayName": "M2"}, "values": [1, 2, 3, 4]},
                {"source": {"displayName": "M3"}, "values": ["n/a", None, float("nan")]},
            ],
        }
    }
    items = convert(data_view).items
    assert [i.value for i in items] == [2, 2, 3]
    for item in items:
        assert len(item.value_segments) == 3
        assert item.value_segments[2].value == 0


def test_measure_cells_that_do_not_fit_a_float_degrade_to_zero():
    data_view = {
        "categorical": {
            "categories": [{"values": ["x", "y", "z"]}],
            "values": [
                {"source": {"displayName": "M1"}, "values": [10**400, 3, [1, 2]]},
                {"source": {"displayName": "M2"}, "values": [1, {"a": 1}, complex(1, 2)]},
            ],
        }
    }
    items = convert(data_view, ConversionOptions(formatting=FormatOptions(format_spec=5))).items
    assert [i.value for i in items] == [1, 3, 0]
    assert [i.rendered_value for i in items] == ["1", "3", "0"]
    assert [s.value for s in items[0].value_segments] == [0, 1]


def test_zero_total_gives_zero_widths():
    data_view = {
        "categorical": {
            "categories": [{"values": ["x"]}],
            "values": [{"values": [0]}, {"values": [None]}],
        }
    }
    item = convert(data_view).items[0]
    assert item.value == 0
    assert item.rendered_value == "0"
    assert [s.width for s in item.value_segments] == [0.0, 0.0]


def test_width_basis_max_compares_across_items():
    data_view = {
        "categorical": {
            "categories": [{"values": ["x", "y"]}],
            "values": [{"values": [2, 4]}, {"values": [3, 6]}],
        }
    }
    items = convert(data_view, ConversionOptions(width_basis="max")).items
    assert [s.width for s in items[1].value_segments] == [pytest.approx(0.4), pytest.approx(0.6)]
    assert [s.width for s in items[0].value_segments] == [pytest.approx(0.2), pytest.approx(0.3)]


def test_unknown_width_basis_falls_back_to_item():
    data_view = {"categorical": {"categories": [{"values": ["x"]}], "values": [{"values": [2]}]}}
    item = convert(data_view, ConversionOptions(width_basis="bogus")).items[0]
    assert item.value_segments[0].width == 1.0


def test_formatting_options_and_custom_formatter():
    data_view = {"categorical": {"categories": [{"values": ["x"]}], "values": [{"values": [1234.5678]}]}}
    item = convert(
        data_view, ConversionOptions(formatting=FormatOptions(precision=1, thousands_separator=True))
    ).items[0]
    assert item.rendered_value == "1,234.6"

    item = convert(
        data_view, ConversionOptions(value_formatter=lambda v, _opts: f"${v:.0f}")
    ).items[0]
    assert item.rendered_value == "$1235"
    assert item.value_segments[0].display_value == "$1235"


def test_category_color_override(categories_only):
    options = ConversionOptions(colors=ColorSettings(categories={"Apple": "#123456"}))
    items = convert(categories_only["data_view"], options).items
    assert [i.color for i in items] == ["#ccc", "#ccc", "#123456", "#ccc", "#ccc"]


def test_malformed_colors_fall_back(categories_and_values_with_series):
    settings = ColorSettings(
        series={"2016": None, "2017": 12, "2018": "not a color!"},
        default_item_color="",
    )
    converted = convert(categories_and_values_with_series["data_view"], ConversionOptions(colors=settings))
    assert [s.color for s in converted.segment_info] == categories_and_values_with_series["palette_colors"]
    assert all(i.color == "#ccc" for i in converted.items)


def test_result_find(categories_only):
    converted = convert(categories_only["data_view"])
    target = converted.items[3]
    assert converted.find(ItemIdentity(id=target.id)) is target
    assert converted.find(ItemIdentity(id="missing")) is None
