# %%
import pytest

from ggvega.marks import Mark
from ggvega.props import MissingPropError, PropError, band, props, value


def test_unknown_mark_type():
    with pytest.raises(ValueError):
        Mark("circle", props(x="wt", y="mpg"))


def test_point_mark_with_defaults():
    mark = Mark("point", props(x="wt", y="mpg")).with_defaults().validate()
    assert mark.to_vega("cars") == {
        "type": "symbol",
        "from": {"data": "cars"},
        "encode": {
            "update": {
                "fill": {"value": "#000000"},
                "size": {"value": 50},
                "x": {"field": "wt", "scale": "x"},
                "y": {"field": "mpg", "scale": "y"},
            }
        },
    }


def test_user_props_override_defaults():
    mark = Mark("point", props(x="wt", y="mpg", fill=value("red"))).with_defaults()
    assert mark.props["fill"].to_vega() == {"value": "red"}


def test_missing_props():
    with pytest.raises(MissingPropError, match="point mark needs 'y'"):
        Mark("point", props(x="wt")).validate()
    with pytest.raises(MissingPropError, match="text mark needs 'text'"):
        Mark("text", props(x="wt", y="mpg")).validate()


def test_unknown_props():
    with pytest.raises(PropError, match="Unknown properties for point mark: text"):
        Mark("point", props(x="wt", y="mpg", text="model")).validate()
    with pytest.raises(PropError, match="Unknown properties for path mark: size"):
        Mark("path", props(x="wt", y="mpg", size=10)).validate()


def test_rect_needs_two_props_per_dimension():
    Mark("rect", props(x="a", x2="b", y="c", y2="d")).validate()
    Mark("rect", props(x="a", width=band(), y="c", height=value(5))).validate()
    with pytest.raises(MissingPropError, match="exactly 2 of y/y2/height"):
        Mark("rect", props(x="a", x2="b", y="c")).validate()
    with pytest.raises(MissingPropError, match="exactly 2 of x/x2/width"):
        Mark("rect", props(x="a", x2="b", width=value(3), y="c", y2="d")).validate()


def test_area_mark():
    mark = Mark("area", props(x="year", y="low", y2="high")).with_defaults().validate()
    update = mark.to_vega("d")["encode"]["update"]
    assert update["fillOpacity"] == {"value": 0.2}
    assert update["y2"] == {"field": "high", "scale": "y"}
    with pytest.raises(MissingPropError):
        Mark("area", props(x="year", y="low")).validate()


def test_arc_and_image_marks():
    Mark(
        "arc",
        props(x=value(100), y=value(100), start_angle="a0", end_angle="a1", outer_radius=value(50)),
    ).validate()
    with pytest.raises(MissingPropError, match="image mark needs 'url'"):
        Mark("image", props(x="wt", y="mpg")).validate()
