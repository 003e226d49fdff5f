# %%
import pytest

from ggvega.inputs import input_slider
from ggvega.transforms import (
    compute_bin,
    compute_count,
    compute_density,
    compute_model_prediction,
    compute_smooth,
    compute_sort,
    compute_stack,
)


def test_bin_pipeline():
    transforms = compute_bin("wt", "wt_extent", width=0.5, groupby=["cyl"])
    assert [t["type"] for t in transforms] == ["extent", "bin", "aggregate", "formula"]
    assert transforms[0] == {"type": "extent", "field": "wt", "signal": "wt_extent"}
    assert transforms[1] == {
        "type": "bin",
        "field": "wt",
        "extent": {"signal": "wt_extent"},
        "maxbins": 30,
        "as": ["xmin_", "xmax_"],
        "step": 0.5,
    }
    assert transforms[2]["groupby"] == ["xmin_", "xmax_", "cyl"]
    assert transforms[3]["as"] == "x_"


def test_bin_alignment():
    centered = compute_bin("wt", "s", width=0.5, center=0)[1]
    assert centered["anchor"] == -0.25
    bounded = compute_bin("wt", "s", width=0.5, boundary=1)[1]
    assert bounded["anchor"] == 1
    with pytest.raises(ValueError):
        compute_bin("wt", "s", width=0.5, center=0, boundary=0)
    with pytest.raises(ValueError):
        compute_bin("wt", "s", center=0)


def test_bin_width_input():
    width = input_slider(0.1, 2, value=0.5, id="binwidth")
    transforms = compute_bin("wt", "s", width=width)
    assert transforms[1]["step"] == {"signal": "binwidth"}
    with pytest.raises(ValueError):
        compute_bin("wt", "s", width=width, center=0)


def test_count_and_stack():
    assert compute_count("cyl") == [
        {"type": "aggregate", "groupby": ["cyl"], "ops": ["count"], "as": ["count_"]}
    ]
    assert compute_stack("cyl", "count_") == [
        {"type": "stack", "groupby": ["cyl"], "field": "count_", "as": ["stack_lwr_", "stack_upr_"]}
    ]
    assert compute_stack("cyl", "count_", groupby=["origin"])[0]["sort"] == {"field": ["origin"]}


def test_smooth():
    span = input_slider(0.2, 1, value=0.3, id="span")
    assert compute_smooth("wt", "mpg", span=span, groupby=["origin"]) == [
        {
            "type": "loess",
            "x": "wt",
            "y": "mpg",
            "bandwidth": {"signal": "span"},
            "groupby": ["origin"],
            "as": ["pred_", "resp_"],
        }
    ]


def test_model_prediction():
    (linear,) = compute_model_prediction("wt", "mpg")
    assert linear["type"] == "regression"
    assert linear["method"] == "linear"
    assert "order" not in linear
    (poly,) = compute_model_prediction("wt", "mpg", model="poly", order=3)
    assert poly["method"] == "poly"
    assert poly["order"] == 3
    assert compute_model_prediction("wt", "mpg", model="loess")[0]["type"] == "loess"
    with pytest.raises(ValueError, match="Unknown model"):
        compute_model_prediction("wt", "mpg", model="spline")


def test_density():
    (kde,) = compute_density("mpg")
    assert kde == {
        "type": "kde",
        "field": "mpg",
        "groupby": [],
        "bandwidth": 0,
        "steps": 200,
        "as": ["pred_", "resp_"],
    }
    assert compute_density("mpg", bw=0.5, adjust=2)[0]["bandwidth"] == 1.0
    bw = input_slider(0.1, 5, value=1, id="bw")
    assert compute_density("mpg", bw=bw)[0]["bandwidth"] == {"signal": "(bw) * (1)"}


def test_density_errors():
    with pytest.raises(ValueError):
        compute_density("mpg", adjust=2)
    with pytest.raises(ValueError):
        compute_density("mpg", kernel="epanechnikov")


def test_sort():
    assert compute_sort("wt") == [{"type": "collect", "sort": {"field": "wt", "order": "ascending"}}]
