# %%
import datetime

import pytest

from ggvega.guides import add_axis, add_legend, hide_axis, hide_legend
from ggvega.layers import layer_bars, layer_points
from ggvega.props import value
from ggvega.scales import scale_datetime, scale_nominal, scale_numeric
from ggvega.vis import ggvis

cars = [
    {"model": "Mazda RX4", "mpg": 21.0, "wt": 2.62, "cyl": 6, "origin": "Japan"},
    {"model": "Datsun 710", "mpg": 22.8, "wt": 2.32, "cyl": 4, "origin": "Japan"},
    {"model": "Hornet 4 Drive", "mpg": 21.4, "wt": 3.215, "cyl": 6, "origin": "USA"},
    {"model": "Merc 240D", "mpg": 24.4, "wt": 3.19, "cyl": 4, "origin": "Europe"},
]

base = ggvis(cars, x="wt", y="mpg")

sales = [
    {"day": datetime.date(2024, 1, 1), "units": 3, "promo": True},
    {"day": datetime.date(2024, 1, 2), "units": 5, "promo": False},
    {"day": datetime.date(2024, 1, 3), "units": 4, "promo": True},
]


def test_default_position_scales_and_axes():
    spec = (base + layer_points()).to_vega()
    assert spec["scales"] == [
        {
            "name": "x",
            "type": "linear",
            "nice": True,
            "zero": False,
            "domain": {"data": "data0", "field": "wt"},
            "range": "width",
        },
        {
            "name": "y",
            "type": "linear",
            "nice": True,
            "zero": False,
            "domain": {"data": "data0", "field": "mpg"},
            "range": "height",
        },
    ]
    assert spec["axes"] == [
        {"scale": "x", "orient": "bottom", "title": "wt"},
        {"scale": "y", "orient": "left", "title": "mpg"},
    ]
    assert spec["legends"] == []


def test_nominal_fill_scale_and_legend():
    spec = (base + layer_points(fill="origin")).to_vega()
    fill = spec["scales"][-1]
    assert fill == {
        "name": "fill",
        "type": "ordinal",
        "domain": {"data": "data0", "field": "origin", "sort": True},
        "range": "category",
    }
    assert spec["legends"] == [{"fill": "fill", "orient": "right", "title": "origin"}]


def test_numeric_fill_scale():
    spec = (base + layer_points(fill="cyl")).to_vega()
    fill = spec["scales"][-1]
    assert fill["type"] == "linear"
    assert fill["range"] == ["#132B43", "#56B1F7"]


def test_bars_use_a_band_scale():
    spec = (ggvis(cars, x="cyl") + layer_bars()).to_vega()
    x, y = spec["scales"]
    assert x == {
        "name": "x",
        "type": "band",
        "padding": 0.1,
        "domain": {"data": "data0_layer0", "field": "cyl", "sort": True},
        "range": "width",
    }
    assert y["domain"] == {
        "fields": [
            {"data": "data0_layer0", "field": "stack_upr_"},
            {"data": "data0_layer0", "field": "stack_lwr_"},
        ]
    }
    assert spec["axes"][1]["title"] == "count"


def test_nominal_points_scale():
    spec = (base.add(layer_points(x="model"))).to_vega()
    x = spec["scales"][0]
    assert x["type"] == "point"
    assert x["padding"] == 0.5


def test_user_scale_overrides():
    spec = (base + layer_points() + scale_numeric("x", domain=[0, 10], zero=True)).to_vega()
    x = spec["scales"][0]
    assert x["domain"] == [0, 10]
    assert x["zero"] is True
    assert x["type"] == "linear"
    spec = (base + layer_points() + scale_numeric("y", trans="log")).to_vega()
    assert spec["scales"][1]["type"] == "log"


def test_scale_builders():
    with pytest.raises(ValueError):
        scale_numeric("x", trans="logit")
    assert scale_nominal("x", points=False).options == {"type": "band"}
    assert scale_datetime("x", utc=True).options == {"type": "utc"}
    assert scale_numeric("fill", range=["red", "blue"], name="heat").name == "heat"


def test_mixed_scale_kinds():
    p = base + layer_points(fill="origin") + layer_points(fill="cyl")
    with pytest.raises(ValueError, match="mixes"):
        p.to_vega()


def test_scale_without_default_range():
    with pytest.raises(ValueError, match="No default range"):
        (base + layer_points(angle="cyl")).to_vega()
    spec = (base + layer_points(angle="cyl") + scale_numeric("angle", range=[0, 90])).to_vega()
    assert spec["scales"][-1]["range"] == [0, 90]


def test_scaled_constants_join_the_domain():
    spec = (base + layer_points(size=value(100, scale=True))).to_vega()
    assert {"name": "scale_size_values", "values": [{"value": 100}]} in spec["data"]
    size = spec["scales"][-1]
    assert size["domain"] == {"data": "scale_size_values", "field": "value"}
    assert size["range"] == [20, 100]


def test_custom_axes():
    spec = (base + layer_points() + add_axis("x", title="Weight", ticks=5) + hide_axis("y")).to_vega()
    assert spec["axes"] == [{"scale": "x", "orient": "bottom", "title": "Weight", "tickCount": 5}]
    with pytest.raises(ValueError):
        add_axis("z")


def test_axis_for_missing_scale_warns():
    with pytest.warns(UserWarning, match="no 'x2' scale"):
        spec = (base + layer_points() + add_axis("x", scale="x2")).to_vega()
    assert [a["scale"] for a in spec["axes"]] == ["y"]


def test_merged_and_hidden_legends():
    p = base + layer_points(fill="origin", shape="origin")
    spec = (p + add_legend(["fill", "shape"], title="Origin")).to_vega()
    assert spec["legends"] == [
        {"fill": "fill", "shape": "shape", "orient": "right", "title": "Origin"}
    ]
    spec = (p + hide_legend("fill")).to_vega()
    assert spec["legends"] == [{"shape": "shape", "orient": "right", "title": "origin"}]


def test_dates_use_a_time_scale():
    spec = (ggvis(sales, x="day", y="units") + layer_points()).to_vega()
    x = spec["scales"][0]
    assert x == {
        "name": "x",
        "type": "time",
        "nice": True,
        "domain": {"data": "data0", "field": "day"},
        "range": "width",
    }
    assert spec["data"][0]["values"][0]["day"] == 1704067200000.0


def test_dates_on_fill_use_a_color_gradient():
    spec = (ggvis(sales, x="units", y="units") + layer_points(fill="day")).to_vega()
    fill = spec["scales"][-1]
    assert fill["type"] == "time"
    assert fill["range"] == ["#132B43", "#56B1F7"]


def test_logical_fill_is_discrete():
    spec = (ggvis(sales, x="day", y="units") + layer_points(fill="promo")).to_vega()
    fill = spec["scales"][-1]
    assert fill == {
        "name": "fill",
        "type": "ordinal",
        "domain": {"data": "data0", "field": "promo", "sort": True},
        "range": "category",
    }
    assert spec["legends"] == [{"fill": "fill", "orient": "right", "title": "promo"}]


def test_logical_x_uses_a_point_scale():
    spec = (ggvis(sales, x="promo", y="units") + layer_points()).to_vega()
    x = spec["scales"][0]
    assert x["type"] == "point"
    assert x["domain"]["sort"] is True


def test_datetime_scale_applies_over_the_inferred_one():
    p = ggvis(sales, x="day", y="units") + layer_points()
    spec = (p + scale_datetime("x", utc=True, nice=False)).to_vega()
    x = spec["scales"][0]
    assert x["type"] == "utc"
    assert x["nice"] is False
    assert x["domain"] == {"data": "data0", "field": "day"}
    # a datetime scale makes a numeric variable temporal too
    spec = (base + layer_points() + scale_datetime("x")).to_vega()
    assert spec["scales"][0]["type"] == "time"
    assert "zero" not in spec["scales"][0]
