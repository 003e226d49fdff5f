# %%
import pytest

from ggvega.data import data_ref
from ggvega.grouping import auto_group, group_by, ungroup
from ggvega.layers import layer_lines, layer_points, layer_smooths
from ggvega.props import props
from ggvega.vis import ggvis

cars = [
    {"model": "Mazda RX4", "mpg": 21.0, "wt": 2.62, "cyl": 6, "origin": "Japan", "manual": True},
    {"model": "Datsun 710", "mpg": 22.8, "wt": 2.32, "cyl": 4, "origin": "Japan", "manual": True},
    {"model": "Hornet 4 Drive", "mpg": 21.4, "wt": 3.215, "cyl": 6, "origin": "USA", "manual": False},
    {"model": "Valiant", "mpg": 18.1, "wt": 3.46, "cyl": 6, "origin": "USA", "manual": False},
    {"model": "Merc 240D", "mpg": 24.4, "wt": 3.19, "cyl": 4, "origin": "Europe", "manual": False},
]


def test_group_by_needs_fields():
    with pytest.raises(ValueError):
        group_by()


def test_auto_group_finds_discrete_variables():
    ps = props(x="wt", y="mpg", fill="origin", stroke="manual", size="cyl")
    assert auto_group().resolve(ps, data_ref(cars)) == ("origin", "manual")
    assert auto_group(exclude=("stroke",)).resolve(ps, data_ref(cars)) == ("origin",)
    with pytest.raises(ValueError):
        auto_group().resolve(ps, None)


def test_group_by_applies_to_later_layers():
    spec = (
        ggvis(cars, x="wt", y="mpg")
        + layer_points()
        + group_by("origin")
        + layer_lines()
    ).to_vega()
    points, group = spec["marks"]
    assert points["type"] == "symbol"
    assert points["from"] == {"data": "data0"}
    assert group["type"] == "group"
    assert group["from"] == {
        "facet": {"name": "data0_layer1_facet", "data": "data0_layer1", "groupby": ["origin"]}
    }
    (line,) = group["marks"]
    assert line["type"] == "line"
    assert line["from"] == {"data": "data0_layer1_facet"}


def test_grouped_statistics():
    spec = (ggvis(cars, x="wt", y="mpg") + group_by("origin") + layer_smooths()).to_vega()
    loess = spec["data"][1]["transform"][0]
    assert loess["groupby"] == ["origin"]
    assert spec["marks"][0]["type"] == "group"


def test_auto_group_in_vis():
    spec = (ggvis(cars, x="wt", y="mpg", stroke="origin") + auto_group() + layer_lines()).to_vega()
    assert spec["marks"][0]["from"]["facet"]["groupby"] == ["origin"]


def test_ungroup():
    spec = (
        ggvis(cars, x="wt", y="mpg")
        + group_by("origin")
        + ungroup()
        + layer_lines()
    ).to_vega()
    assert spec["marks"][0]["type"] == "line"


def test_group_by_unknown_field():
    p = ggvis(cars, x="wt", y="mpg") + group_by("colour") + layer_points()
    with pytest.raises(KeyError, match="colour"):
        p.to_vega()


def test_mapped_stroke_facets_compound_layers():
    spec = (ggvis(cars, x="wt", y="mpg", stroke="origin") + layer_smooths()).to_vega()
    group = spec["marks"][0]
    assert group["type"] == "group"
    assert group["from"]["facet"]["groupby"] == ["origin"]
    assert group["marks"][0]["encode"]["update"]["stroke"] == {"field": "origin", "scale": "stroke"}
