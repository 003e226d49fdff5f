# %%
# ruff: noqa: F401
from ggvega.data import DataRef, as_records, column_kind, data_ref
from ggvega.grouping import auto_group, group_by, ungroup
from ggvega.guides import add_axis, add_legend, hide_axis, hide_legend
from ggvega.inputs import (
    Input,
    input_checkbox,
    input_numeric,
    input_radiobuttons,
    input_select,
    input_slider,
    input_text,
)
from ggvega.layers import (
    layer_arcs,
    layer_bars,
    layer_densities,
    layer_freqpolys,
    layer_histograms,
    layer_images,
    layer_lines,
    layer_model_predictions,
    layer_paths,
    layer_points,
    layer_rects,
    layer_ribbons,
    layer_smooths,
    layer_text,
)
from ggvega.layout import Column, Row
from ggvega.props import MissingPropError, PropError, band, expr, field, props, value
from ggvega.scales import scale_datetime, scale_logical, scale_nominal, scale_numeric
from ggvega.util import configure
from ggvega.vis import Vis, ggvis, set_options, vis

# This module is the user-facing grammar: start from data and props with `ggvis`,
# then add layers, scales, guides and options with the + operator.
#
#     import ggvega.plot as gv
#     gv.ggvis(cars, x="wt", y="mpg") + gv.layer_points() + gv.layer_smooths()
#
# Visualizations compile to Vega (https://vega.github.io/vega/), which renders
# the marks, computes the statistical transforms and draws the input controls.

# The following convenience dicts can be added directly to a Vis.


def title(text):
    return {"title": text}


def width(width):
    return {"width": width}


def height(height):
    return {"height": height}


def size(size, height=None):
    return {"width": size, "height": height or size}


def padding(*args):
    """
    Set padding around the plotting area using CSS-style shorthand.

    Supported arities:
        padding(all)
        padding(vertical, horizontal)
        padding(top, horizontal, bottom)
        padding(top, right, bottom, left)
    """
    if len(args) == 1:
        return {"padding": args[0]}
    elif len(args) == 2:
        top, right, bottom, left = args[0], args[1], args[0], args[1]
    elif len(args) == 3:
        top, right, bottom, left = args[0], args[1], args[2], args[1]
    elif len(args) == 4:
        top, right, bottom, left = args
    else:
        raise ValueError(f"Invalid number of arguments: {len(args)}")
    return {"padding": {"top": top, "right": right, "bottom": bottom, "left": left}}


def domain_x(d):
    return scale_numeric("x", domain=d)


def domain_y(d):
    return scale_numeric("y", domain=d)
