import copy
from typing import Any, NamedTuple

from ggvega.data import DataRef, data_ref
from ggvega.inputs import collect_inputs
from ggvega.marks import Mark
from ggvega.props import (
    POSITION_X,
    POSITION_Y,
    Prop,
    PropError,
    PropSet,
    as_prop,
    band,
    props,
    value,
)
from ggvega.transforms import (
    Transform,
    compute_bin,
    compute_count,
    compute_density,
    compute_model_prediction,
    compute_smooth,
    compute_sort,
    compute_stack,
)


class LayerBuild(NamedTuple):
    """What a layer compiles to: a transform pipeline over its data, and the marks drawn from the result."""

    transforms: list[Transform]
    marks: list[Mark]
    # extra fields to draw one mark per partition of
    facet: tuple[str, ...] = ()


def _mapped_kind(p: Prop, data: DataRef | None) -> str | None:
    if p.type is not None:
        return p.type
    return data.kind(p.value) if data is not None else None


def passthrough_fields(resolved: PropSet, data: DataRef | None) -> list[str]:
    """Mapped discrete non-position variables (fill, stroke, ...) that must survive an aggregation."""
    fields = []
    for name, p in resolved.items():
        if p.kind != "field" or name in POSITION_X | POSITION_Y or p.value in fields:
            continue
        if _mapped_kind(p, data) in ("nominal", "logical"):
            fields.append(p.value)
    return fields


def aggregated(resolved: PropSet, data: DataRef | None) -> tuple[PropSet, list[str]]:
    """
    Props for the marks drawn from an aggregation, and the discrete variables it groups by.

    Continuous non-position variables don't survive the aggregation and are dropped.
    """
    extra = passthrough_fields(resolved, data)
    dropped = [
        name
        for name, p in resolved.items()
        if p.kind == "field" and name not in POSITION_X | POSITION_Y and p.value not in extra
    ]
    return resolved.without(*dropped), extra


def _required_field(layer: str, resolved: PropSet, name: str) -> Prop:
    p = resolved.get(name)
    if p is None or p.kind != "field":
        raise PropError(f"{layer} needs '{name}' mapped to a variable")
    return p


class Layer:
    """
    A layer bundles an optional data transformation with one or more marks.

    Props given to the layer are merged over the props it inherits from the
    visualization (unless `inherit=False`), and `data` replaces the inherited data.
    """

    name = "layer"

    def __init__(self, props: PropSet, data: Any = None, inherit: bool = True, **params: Any):
        self.props = props
        self.data: DataRef | None = None if data is None else data_ref(data)
        self.inherit = inherit
        self.params = params
        self.groups: tuple[str, ...] = ()

    def copy(self) -> "Layer":
        return copy.copy(self)

    def with_parent(self, parent_props: PropSet, parent_data: DataRef | None) -> "Layer":
        """Resolve this layer against a parent visualization's props and data."""
        layer = self.copy()
        if layer.inherit:
            layer.props = parent_props.merge(layer.props)
        if layer.data is None:
            layer.data = parent_data
        return layer

    def grouped(self, groups: tuple[str, ...]) -> "Layer":
        layer = self.copy()
        layer.groups = tuple(groups) + tuple(g for g in layer.groups if g not in groups)
        return layer

    def groupby(self, extra: list[str]) -> list[str]:
        return [*self.groups, *(f for f in extra if f not in self.groups)]

    def resolve_props(self, parent: PropSet) -> PropSet:
        return parent.merge(self.props) if self.inherit else self.props

    def inputs(self):
        return self.props.inputs() + collect_inputs(self.params)

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        raise NotImplementedError("Subclasses must implement build method")

    def __repr__(self):
        return f"<{type(self).__name__} {list(self.props)}>"


class MarkLayer(Layer):
    """A layer drawing a single mark with no statistical transformation."""

    mark = "point"
    sort_x = False

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        transforms = []
        x = resolved.get("x")
        if self.sort_x and x is not None and x.kind == "field":
            transforms = compute_sort(x.value)
        return LayerBuild(transforms, [Mark(self.mark, resolved)])


class Points(MarkLayer):
    name = "layer_points"
    mark = "point"


class Paths(MarkLayer):
    name = "layer_paths"
    mark = "path"


class Lines(MarkLayer):
    name = "layer_lines"
    mark = "path"
    sort_x = True


class Rects(MarkLayer):
    name = "layer_rects"
    mark = "rect"


class Ribbons(MarkLayer):
    name = "layer_ribbons"
    mark = "area"


class Text(MarkLayer):
    name = "layer_text"
    mark = "text"


class Arcs(MarkLayer):
    name = "layer_arcs"
    mark = "arc"


class Images(MarkLayer):
    name = "layer_images"
    mark = "image"


def layer_points(data=None, inherit=True, **kwargs) -> Points:
    """Draw a point (symbol) for every row. Needs x and y."""
    return Points(props(**kwargs), data, inherit)


def layer_paths(data=None, inherit=True, **kwargs) -> Paths:
    """Connect rows with a path, in the order they appear in the data."""
    return Paths(props(**kwargs), data, inherit)


def layer_lines(data=None, inherit=True, **kwargs) -> Lines:
    """Connect rows with a path, ordered by x. Otherwise identical to layer_paths."""
    return Lines(props(**kwargs), data, inherit)


def layer_rects(data=None, inherit=True, **kwargs) -> Rects:
    """Draw rectangles. Needs two of x/x2/width and two of y/y2/height."""
    return Rects(props(**kwargs), data, inherit)


def layer_ribbons(data=None, inherit=True, **kwargs) -> Ribbons:
    """Fill the area between y and y2 (or y and y + height) along x."""
    return Ribbons(props(**kwargs), data, inherit)


def layer_text(data=None, inherit=True, **kwargs) -> Text:
    return Text(props(**kwargs), data, inherit)


def layer_arcs(data=None, inherit=True, **kwargs) -> Arcs:
    return Arcs(props(**kwargs), data, inherit)


def layer_images(data=None, inherit=True, **kwargs) -> Images:
    return Images(props(**kwargs), data, inherit)


# Compound layers


class Histograms(Layer):
    """Bin x, count rows per bin, and draw one (stacked) rect per bin."""

    name = "layer_histograms"

    def bin(
        self, resolved: PropSet, name: str, data: DataRef | None
    ) -> tuple[Prop, PropSet, list[str], list[Transform]]:
        x = _required_field(self.name, resolved, "x")
        resolved, extra = aggregated(resolved, data)
        transforms = compute_bin(
            x.value,
            signal=f"{name}_extent",
            width=self.params.get("width"),
            center=self.params.get("center"),
            boundary=self.params.get("boundary"),
            maxbins=self.params.get("maxbins", 30),
            groupby=self.groupby(extra),
        )
        return x, resolved, extra, transforms

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        x, resolved, extra, transforms = self.bin(resolved, name, data)
        transforms += compute_stack("xmin_", "count_", groupby=self.groupby(extra))
        rect_props = resolved.without("x", "y", "y2", "width", "height").replace(
            x=x.rebind("xmin_"),
            x2=x.rebind("xmax_", "x2"),
            y=_count_prop("y", "stack_upr_", "count"),
            y2=_count_prop("y2", "stack_lwr_", "count"),
        )
        return LayerBuild(transforms, [Mark("rect", rect_props)])


class Freqpolys(Histograms):
    """Bin x, count rows per bin, and connect the counts with a path."""

    name = "layer_freqpolys"

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        x, resolved, extra, transforms = self.bin(resolved, name, data)
        transforms += compute_sort("x_")
        path_props = resolved.without("x", "y").replace(
            x=x.rebind("x_"), y=_count_prop("y", "count_", "count")
        )
        return LayerBuild(transforms, [Mark("path", path_props)], facet=tuple(extra))


class Bars(Layer):
    """
    Bars on a discrete x scale. Without a mapped y, rows are counted for each x value;
    with one, y values are drawn as-is. Bars are stacked by the other mapped variables.
    """

    name = "layer_bars"

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        x = _required_field(self.name, resolved, "x")
        y = resolved.get("y")
        transforms: list[Transform] = []
        if y is not None and y.kind == "field":
            extra = passthrough_fields(resolved, data)
            value_field, title = y.value, y.title
        else:
            resolved, extra = aggregated(resolved, data)
            transforms += compute_count(x.value, groupby=self.groupby(extra))
            value_field, title = "count_", "count"
        if self.params.get("stack", True):
            transforms += compute_stack(x.value, value_field, groupby=self.groupby(extra))
            upper, lower = "stack_upr_", "stack_lwr_"
        else:
            transforms += [{"type": "formula", "expr": "0", "as": "zero_"}]
            upper, lower = value_field, "zero_"
        width = self.params.get("width")
        discrete_x = copy.copy(x)
        discrete_x.type = "nominal"
        rect_props = resolved.without("x", "y", "y2", "width", "height").replace(
            x=discrete_x,
            width=as_prop("width", band() if width is None else width),
            y=_count_prop("y", upper, title),
            y2=_count_prop("y2", lower, title),
        )
        return LayerBuild(transforms, [Mark("rect", rect_props)])


class Smooths(Layer):
    """Fit a loess smoother of y on x and draw the fitted curve."""

    name = "layer_smooths"

    def transform(self, x: Prop, y: Prop, groupby: list[str]) -> list[Transform]:
        return compute_smooth(x.value, y.value, span=self.params.get("span", 0.75), groupby=groupby)

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        x = _required_field(self.name, resolved, "x")
        y = _required_field(self.name, resolved, "y")
        resolved, extra = aggregated(resolved, data)
        transforms = self.transform(x, y, self.groupby(extra))
        path_props = resolved.without("x", "y").replace(
            x=x.rebind("pred_"), y=y.rebind("resp_")
        )
        if "stroke" not in path_props:
            path_props = path_props.replace(stroke=value("#3366CC").named("stroke"))
        if "stroke_width" not in path_props:
            path_props = path_props.replace(stroke_width=value(2).named("stroke_width"))
        return LayerBuild(transforms, [Mark("path", path_props)], facet=tuple(extra))


class ModelPredictions(Smooths):
    """Fit a model (linear by default) of y on x and draw its predictions."""

    name = "layer_model_predictions"

    def transform(self, x: Prop, y: Prop, groupby: list[str]) -> list[Transform]:
        return compute_model_prediction(
            x.value,
            y.value,
            model=self.params.get("model", "lm"),
            span=self.params.get("span", 0.75),
            order=self.params.get("order", 2),
            groupby=groupby,
        )


class Densities(Layer):
    """Estimate the density of x and draw it as a filled area (or a path)."""

    name = "layer_densities"

    def build(self, resolved: PropSet, name: str, data: DataRef | None = None) -> LayerBuild:
        x = _required_field(self.name, resolved, "x")
        resolved, extra = aggregated(resolved, data)
        transforms = compute_density(
            x.value,
            adjust=self.params.get("adjust", 1),
            kernel=self.params.get("kernel", "gaussian"),
            bw=self.params.get("bw"),
            groupby=self.groupby(extra),
        )
        transforms += compute_sort("pred_")
        base = resolved.without("x", "y", "y2", "height").replace(
            x=x.rebind("pred_"), y=_count_prop("y", "resp_", "density")
        )
        if self.params.get("area", True):
            base = base.replace(y2=value(0, scale="y").named("y2"))
            return LayerBuild(transforms, [Mark("area", base)], facet=tuple(extra))
        return LayerBuild(transforms, [Mark("path", base)], facet=tuple(extra))


def _count_prop(property: str, field: str, title: str) -> Prop:
    p = Prop(property, field, "field", scale="y", type="numeric")
    p.title = title
    return p


def layer_histograms(
    data=None, inherit=True, width=None, center=None, boundary=None, maxbins=30, **kwargs
) -> Histograms:
    """
    Histogram of x: bins the data, counts rows per bin and draws a rect per bin.

    Args:
        width: Bin width (number or input). Defaults to an automatic width with at most `maxbins` bins.
        center: Align a bin center on this value (requires a numeric width).
        boundary: Align a bin boundary on this value.
    """
    return Histograms(
        props(**kwargs), data, inherit, width=width, center=center, boundary=boundary, maxbins=maxbins
    )


def layer_freqpolys(
    data=None, inherit=True, width=None, center=None, boundary=None, maxbins=30, **kwargs
) -> Freqpolys:
    """Frequency polygon of x: like layer_histograms, but joins the bin counts with a path."""
    return Freqpolys(
        props(**kwargs), data, inherit, width=width, center=center, boundary=boundary, maxbins=maxbins
    )


def layer_bars(data=None, inherit=True, stack=True, width=None, **kwargs) -> Bars:
    return Bars(props(**kwargs), data, inherit, stack=stack, width=width)


def layer_smooths(data=None, inherit=True, span=0.75, **kwargs) -> Smooths:
    """Loess smooth of y on x. `span` (0-1, or an input) controls the amount of smoothing."""
    return Smooths(props(**kwargs), data, inherit, span=span)


def layer_model_predictions(
    data=None, inherit=True, model="lm", span=0.75, order=2, **kwargs
) -> ModelPredictions:
    """
    Model predictions of y on x.

    `model` is one of "lm" (linear), "poly" (polynomial of `order`), "quad", "exp",
    "log", "pow" or "loess".
    """
    return ModelPredictions(props(**kwargs), data, inherit, model=model, span=span, order=order)


def layer_densities(
    data=None, inherit=True, adjust=1, kernel="gaussian", bw=None, area=True, **kwargs
) -> Densities:
    return Densities(
        props(**kwargs), data, inherit, adjust=adjust, kernel=kernel, bw=bw, area=area
    )
