# Shared pytest fixtures
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import pytest

from attribute_slicer.logging.init import reset_logging


def _category_column(values: list[Any], name: str = "Company") -> dict[str, Any]:
    return {"source": {"displayName": name, "queryName": f"Table.{name}"}, "values": values}


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _isolate_settings_env():
    # keep ATTRIBUTE_SLICER_SETTINGS (set via load_dotenv) from leaking across tests
    saved = os.environ.get("ATTRIBUTE_SLICER_SETTINGS")
    yield
    if saved is None:
        os.environ.pop("ATTRIBUTE_SLICER_SETTINGS", None)
    else:
        os.environ["ATTRIBUTE_SLICER_SETTINGS"] = saved


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def categories_only() -> dict[str, Any]:
    categories = ["Microsoft", "Google", "Apple", "Amazon", "Meta"]
    return {
        "categories": categories,
        "data_view": {"categorical": {"categories": [_category_column(categories)]}},
    }


@pytest.fixture()
def categories_and_values() -> dict[str, Any]:
    categories = ["Microsoft", "Google", "Apple", "Amazon"]
    sales = [1200.456, 980.0, 0.0, 15.333]
    return {
        "categories": categories,
        "values": [{"total": v, "rendered_value": round(v, 2)} for v in sales],
        "data_view": {
            "categorical": {
                "categories": [_category_column(categories)],
                "values": [
                    {"source": {"displayName": "Sales", "queryName": "Sum(Table.Sales)"}, "values": sales}
                ],
            }
        },
    }


@pytest.fixture()
def categories_and_values_with_series() -> dict[str, Any]:
    categories = ["A", "B", "C"]
    series_values = {
        "2016": [2, 0, 1.5],
        "2017": [3, 5, None],
        "2018": [None, 5, 4.5],
    }
    palette_colors = ["#01B8AA", "#374649", "#FD625E"]
    settings_colors = {"2016": "#ff0000"}
    expected_colors = ["#ff0000", "#374649", "#FD625E"]

    items = []
    for i, category in enumerate(categories):
        raw = [series_values[s][i] or 0 for s in series_values]
        total = sum(raw)
        items.append({
            "match": category,
            "value": total,
            "rendered_value": total,
            "valueSegments": [
                {"value": v, "width": (v / total) if total else 0.0, "color": expected_colors[j]}
                for j, v in enumerate(raw)
            ],
        })
    return {
        "categories": categories,
        "series_values": series_values,
        "settings_colors": settings_colors,
        "palette_colors": palette_colors,
        "expected": {
            "items": items,
            "segment_info": [
                {"name": name, "color": expected_colors[j]} for j, name in enumerate(series_values)
            ],
        },
        "data_view": {
            "categorical": {
                "categories": [_category_column(categories, name="Letter")],
                "values": [
                    {
                        "source": {
                            "displayName": "Amount",
                            "queryName": "Sum(Table.Amount)",
                            "groupName": group,
                        },
                        "values": values,
                    }
                    for group, values in series_values.items()
                ],
            }
        },
    }


@pytest.fixture()
def sample_settings_yaml() -> str:
    return """colors:
  default_item_color: "#dddddd"
  series:
    "2016": "#ff0000"
    2017: "#00ff00"
  categories:
    Apple: "#aaaaaa"
formatting:
  precision: 1
  thousands_separator: true
width_basis: max
"""


@pytest.fixture()
def write_settings(temp_workdir: Path, sample_settings_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "settings.yml"
    cfg.write_text(sample_settings_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_data_view(temp_workdir: Path, categories_and_values_with_series):
    def _write(name: str = "view.json", data_view: dict[str, Any] | None = None) -> Path:
        path = temp_workdir / "data" / name
        payload = data_view if data_view is not None else categories_and_values_with_series["data_view"]
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
