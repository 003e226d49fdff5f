import copy
import json
from typing import Any, Sequence

from ggvega.compile import compile_vis
from ggvega.data import DataRef, data_ref
from ggvega.grouping import GroupBy
from ggvega.guides import AxisSpec, LegendSpec
from ggvega.layers import Layer
from ggvega.layout import LayoutItem, create_parent_dir
from ggvega.props import PropSet, props
from ggvega.scales import ScaleSpec
from ggvega.util import CONFIG, camel_case, deep_merge
from ggvega.widget import to_json

EMBED_OPTIONS = ("renderer", "actions")


def flatten_items(items: Sequence[Any]) -> list[Any]:
    """
    Merge nested lists of items into a flat list.
    """
    return [
        item
        for entry in items
        for item in (flatten_items(entry) if isinstance(entry, (list, tuple)) else [entry])
    ]


class Vis(LayoutItem):
    """
    A visualization: data and props shared by a stack of layers, plus scales, guides and options.

    Visualizations are built up with the + operator. Each addition returns a new Vis,
    so a partial visualization can be reused as the base of several others.

    Args:
        data: The default data for every layer (see `ggvega.data.as_records`).
        props (PropSet): Props inherited by every layer.
    """

    def __init__(self, data: Any = None, props: PropSet | None = None) -> None:
        super().__init__()
        self.data: DataRef | None = None if data is None else data_ref(data)
        self.props = props or PropSet()
        self.layers: list[Layer] = []
        self.scales: list[ScaleSpec] = []
        self.axes: list[AxisSpec] = []
        self.legends: list[LegendSpec] = []
        self.options: dict[str, Any] = {}
        self.groups: tuple[str, ...] = ()

    def _copy(self) -> "Vis":
        new = copy.copy(self)
        LayoutItem.__init__(new)
        new.layers = list(self.layers)
        new.scales = list(self.scales)
        new.axes = list(self.axes)
        new.legends = list(self.legends)
        new.options = dict(self.options)
        return new

    def _add(self, item: Any) -> None:
        # mutates self, only called on fresh copies
        if item is None:
            return
        if isinstance(item, Layer):
            self.layers.append(item.grouped(self.groups) if self.groups else item)
        elif isinstance(item, Vis):
            for layer in item.layers:
                self._add(layer.with_parent(item.props, item.data))
            self.scales.extend(item.scales)
            self.axes.extend(item.axes)
            self.legends.extend(item.legends)
            self.options = deep_merge(self.options, item.options)
        elif isinstance(item, GroupBy):
            self.groups = item.resolve(self.props, self.data)
        elif isinstance(item, ScaleSpec):
            self.scales.append(item)
        elif isinstance(item, AxisSpec):
            self.axes.append(item)
        elif isinstance(item, LegendSpec):
            self.legends.append(item)
        elif isinstance(item, dict):
            self.options = deep_merge(self.options, item)
        else:
            raise TypeError(f"Cannot add an object of type {type(item).__name__} to a visualization")

    def __add__(self, *to_add: Any) -> "Vis":
        """
        Add layers, scales, guides, groupings, options or another Vis.

        Returns:
            A new Vis with the item(s) added.
        """
        new = self._copy()
        for item in flatten_items(to_add):
            new._add(item)
        return new

    def __radd__(self, to_add: Any) -> "Vis":
        new = Vis(self.data, self.props)
        for item in flatten_items([to_add]):
            new._add(item)
        new.layers += self.layers
        new.scales += self.scales
        new.axes += self.axes
        new.legends += self.legends
        new.options = deep_merge(new.options, self.options)
        new.groups = self.groups
        return new

    def add(self, *items: Any) -> "Vis":
        return self.__add__(*items)

    def scale_specs(self) -> dict[str, ScaleSpec]:
        specs: dict[str, ScaleSpec] = {}
        for spec in self.scales:
            if spec.name in specs:
                merged = ScaleSpec(spec.property, spec.kind, spec.name)
                merged.options = {**specs[spec.name].options, **spec.options}
                spec = merged
            specs[spec.name] = spec
        return specs

    def embed_options(self) -> dict[str, Any]:
        options = {k: CONFIG[k] for k in EMBED_OPTIONS}
        if "renderer" in self.options:
            options["renderer"] = self.options["renderer"]
        return {**options, "mode": "vega"}

    def to_vega(self) -> dict[str, Any]:
        """Compile to a complete Vega specification."""
        return compile_vis(self)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(to_json(self.to_vega()), indent=indent)

    def save_spec(self, path: str) -> None:
        create_parent_dir(path)
        with open(path, "w") as f:
            f.write(self.to_json())
        print(f"Spec saved to {path}")

    def for_json(self) -> Any:
        return {"__type__": "vega", "spec": self.to_vega(), "options": self.embed_options()}

    def __repr__(self):
        return f"<Vis layers={[layer.name for layer in self.layers]} props={list(self.props)}>"


def ggvis(data: Any = None, **kwargs: Any) -> Vis:
    """
    Start a visualization from data and the props every layer inherits.

    Examples:
        ggvis(cars, x="wt", y="mpg") + layer_points()
        ggvis(cars, x="wt") + layer_histograms(width=0.5)
    """
    return Vis(data, props(**kwargs))


vis = ggvis


def set_options(
    width=None, height=None, padding=None, renderer=None, autosize=None, background=None, title=None
) -> dict[str, Any]:
    """Options for the plotting area; `renderer` is "svg" or "canvas"."""
    if renderer is not None and renderer not in ("svg", "canvas"):
        raise ValueError(f"renderer must be 'svg' or 'canvas', got '{renderer}'")
    options = dict(
        width=width,
        height=height,
        padding=padding,
        renderer=renderer,
        autosize=autosize,
        background=background,
        title=title,
    )
    return {camel_case(k): v for k, v in options.items() if v is not None}
