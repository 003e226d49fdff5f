import re
from typing import TYPE_CHECKING, Any

from ggvega.data import DataRef, kind_of
from ggvega.grouping import facet_mark
from ggvega.guides import resolve_axes, resolve_legends
from ggvega.inputs import Input, collect_inputs
from ggvega.layers import Histograms, Layer, Points
from ggvega.props import Prop, PropSet
from ggvega.scales import ScaleCollector
from ggvega.util import CONFIG

if TYPE_CHECKING:
    from ggvega.vis import Vis

VEGA_SCHEMA = "https://vega.github.io/schema/vega/v{version}.json"


def default_layer(props: PropSet) -> Layer:
    """The layer drawn for a visualization without any: points for x and y, a histogram for x alone."""
    if props.mapped("x") and props.mapped("y"):
        return Points(PropSet())
    if props.mapped("x"):
        return Histograms(PropSet())
    raise ValueError("Nothing to draw: add a layer, or map at least x in ggvis(...)")


class Compiler:
    """Compiles a visualization's layers into a single Vega specification."""

    def __init__(self, vis: "Vis"):
        self.vis = vis
        self.data: list[dict[str, Any]] = []
        self.data_names: dict[str, str] = {}
        self.signals: dict[str, Input] = {}
        self.scales = ScaleCollector()
        self.marks: list[dict[str, Any]] = []

    def source_name(self, ref: DataRef) -> str:
        if ref.id not in self.data_names:
            taken = set(self.data_names.values())
            name = ref.name or f"data{len(self.data_names)}"
            suffix = 1
            while name in taken:
                name, suffix = f"{ref.name or 'data'}_{suffix}", suffix + 1
            self.data_names[ref.id] = name
            self.data.append({"name": name, "values": ref.records()})
        return self.data_names[ref.id]

    def kind_of(self, prop: Prop, data: DataRef) -> str | None:
        if prop.kind == "field":
            return prop.type or data.kind(prop.value)
        if prop.kind == "constant":
            return kind_of(prop.value)
        if prop.kind == "signal":
            return kind_of(prop.value.value)
        return None

    def add_signals(self, inputs: list[Input]) -> None:
        for i in inputs:
            self.signals.setdefault(i.name, i)

    def add_layer(self, index: int, layer: Layer) -> None:
        data = layer.data if layer.data is not None else self.vis.data
        if data is None:
            raise ValueError(f"{layer.name} has no data: pass data to ggvis(...) or to the layer")
        for group in layer.groups:
            if not data.has_field(group):
                raise KeyError(
                    f"Cannot group by unknown field '{group}', available columns are: "
                    f"{', '.join(data.fields())}"
                )
        source = self.source_name(data)
        resolved = layer.resolve_props(self.vis.props)
        name = re.sub(r"\W", "_", f"{source}_layer{index}")
        build = layer.build(resolved, name, data)
        self.add_signals(resolved.inputs() + collect_inputs(layer.params))

        data_name = source
        if build.transforms:
            self.data.append({"name": name, "source": source, "transform": build.transforms})
            data_name = name

        marks = []
        for mark in build.marks:
            mark = mark.with_defaults().validate()
            for prop in mark.props.values():
                self.scales.add(prop, data_name, self.kind_of(prop, data), mark.type)
            marks.append(mark.to_vega(data_name))

        facet = layer.groups + tuple(f for f in build.facet if f not in layer.groups)
        if facet:
            self.marks.append(facet_mark(name, data_name, facet, marks))
        else:
            self.marks.extend(marks)

    def compile(self) -> dict[str, Any]:
        vis = self.vis
        layers = vis.layers or [default_layer(vis.props)]
        for index, layer in enumerate(layers):
            self.add_layer(index, layer)

        options = {**{k: CONFIG[k] for k in ("width", "height", "padding", "autosize")}, **vis.options}
        options.pop("renderer", None)
        scale_names = list(self.scales.uses)
        spec: dict[str, Any] = {
            "$schema": VEGA_SCHEMA.format(version=CONFIG["vega_version"]),
            **options,
            "data": self.data + self.scales.constant_data(),
            "signals": [i.to_signal() for i in self.signals.values()],
            "scales": self.scales.resolve(vis.scale_specs()),
            "axes": resolve_axes(vis.axes, self.scales, scale_names),
            "legends": resolve_legends(vis.legends, self.scales, scale_names),
            "marks": self.marks,
        }
        return spec


def compile_vis(vis: "Vis") -> dict[str, Any]:
    return Compiler(vis).compile()
