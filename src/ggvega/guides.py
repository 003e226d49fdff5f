import warnings
from typing import Any

from ggvega.util import camel_case

LEGEND_CHANNELS = {"fill", "stroke", "size", "shape", "opacity", "stroke_dash", "stroke_width"}
POSITION_SCALES = {"x", "y"}


class AxisSpec:
    """An axis for the x or y scale. `hidden` axes suppress the default one."""

    def __init__(self, type: str, scale: str | None = None, hidden: bool = False, **options: Any):
        if type not in POSITION_SCALES:
            raise ValueError(f"Axis type must be 'x' or 'y', got '{type}'")
        self.type = type
        self.scale = scale or type
        self.hidden = hidden
        self.options = {k: v for k, v in options.items() if v is not None}

    def to_vega(self, default_title: str | None) -> dict[str, Any]:
        axis: dict[str, Any] = {
            "scale": self.scale,
            "orient": "bottom" if self.type == "x" else "left",
        }
        if default_title is not None:
            axis["title"] = default_title
        axis.update({camel_case(k): v for k, v in self.options.items()})
        return axis


def add_axis(
    type,
    scale=None,
    orient=None,
    title=None,
    title_offset=None,
    format=None,
    ticks=None,
    values=None,
    grid=None,
    tick_size=None,
    label_angle=None,
    encode=None,
) -> AxisSpec:
    """
    Add or customize the axis of a position scale.

    Args:
        type (str): "x" or "y".
        orient (str): "top"/"bottom" for x, "left"/"right" for y.
        ticks (int): Desired number of ticks.
        encode (dict): Raw Vega encode blocks for ticks, labels, title, grid and domain.
    """
    return AxisSpec(
        type,
        scale,
        orient=orient,
        title=title,
        title_offset=title_offset,
        format=format,
        tick_count=ticks,
        values=values,
        grid=grid,
        tick_size=tick_size,
        label_angle=label_angle,
        encode=encode,
    )


def hide_axis(type) -> AxisSpec:
    return AxisSpec(type, hidden=True)


class LegendSpec:
    """A legend for one or more scales. Scales drawn in one legend must share a domain."""

    def __init__(self, scales: tuple[str, ...], hidden: bool = False, **options: Any):
        self.scales = scales
        self.hidden = hidden
        self.options = {k: v for k, v in options.items() if v is not None}

    def to_vega(self, channels: dict[str, str], default_title: str | None) -> dict[str, Any]:
        legend: dict[str, Any] = {camel_case(channel): scale for scale, channel in channels.items()}
        legend["orient"] = "right"
        if default_title is not None:
            legend["title"] = default_title
        legend.update({camel_case(k): v for k, v in self.options.items()})
        return legend


def _scales(scales) -> tuple[str, ...]:
    return (scales,) if isinstance(scales, str) else tuple(scales)


def add_legend(scales, title=None, orient=None, format=None, values=None, direction=None) -> LegendSpec:
    """Add or customize a legend. Pass several scales to merge them into one legend."""
    return LegendSpec(
        _scales(scales), title=title, orient=orient, format=format, values=values, direction=direction
    )


def hide_legend(scales) -> LegendSpec:
    return LegendSpec(_scales(scales), hidden=True)


def resolve_axes(axes: list[AxisSpec], scales, vis_scales: list[str]) -> list[dict[str, Any]]:
    """Default axes for x and y, replaced by (or hidden with) the user's axis specs."""
    by_type: dict[str, AxisSpec] = {}
    for axis in axes:
        by_type[axis.type] = axis
    out = []
    for type in ("x", "y"):
        axis = by_type.get(type, AxisSpec(type))
        if axis.hidden:
            continue
        if axis.scale not in vis_scales:
            if type in by_type:
                warnings.warn(f"Dropping {type} axis: there is no '{axis.scale}' scale", UserWarning)
            continue
        out.append(axis.to_vega(scales.title_of(axis.scale)))
    return out


def resolve_legends(legends: list[LegendSpec], scales, vis_scales: list[str]) -> list[dict[str, Any]]:
    """One legend per non-position scale, unless merged, customized or hidden by the user."""
    hidden: set[str] = set()
    explicit: list[LegendSpec] = []
    for legend in legends:
        if legend.hidden:
            hidden.update(legend.scales)
        else:
            explicit.append(legend)
    covered = {s for legend in explicit for s in legend.scales}
    defaults = [
        LegendSpec((name,))
        for name in vis_scales
        if name not in POSITION_SCALES and name not in covered
    ]
    out = []
    for legend in explicit + defaults:
        channels = {}
        for name in legend.scales:
            if name in hidden:
                continue
            if name not in vis_scales:
                warnings.warn(f"Dropping legend for missing scale '{name}'", UserWarning)
                continue
            channel = scales.property_of(name)
            if channel in ("fill_opacity", "stroke_opacity"):
                channel = "opacity"
            if channel in LEGEND_CHANNELS:
                channels[name] = channel
        if channels:
            out.append(legend.to_vega(channels, scales.title_of(next(iter(channels)))))
    return out
