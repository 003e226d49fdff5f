import copy
from typing import Any, Iterator, Literal, Mapping

import numpy as np

from ggvega.inputs import Input
from ggvega.util import camel_case

PropKind = Literal["field", "constant", "signal", "expr", "band"]

POSITION_X = {"x", "x2", "xc", "width"}
POSITION_Y = {"y", "y2", "yc", "height"}
OPACITY = {"opacity", "fill_opacity", "stroke_opacity"}
SIZE_PROPS = {"width", "height"}
# strings are constants for these, eg. interpolate="monotone"
ENUM_PROPS = {
    "interpolate",
    "orient",
    "align",
    "baseline",
    "font",
    "font_weight",
    "font_style",
    "cursor",
    "stroke_cap",
}
# strings map variables, but never through a scale
UNSCALED_PROPS = {"text", "url", "tooltip"}


class PropError(ValueError):
    """A prop that a mark does not accept, or an illegal binding."""


class MissingPropError(PropError):
    """A mark is missing props it needs to be drawn."""


def default_scale_name(property: str) -> str:
    if property in POSITION_X:
        return "x"
    if property in POSITION_Y:
        return "y"
    if property in OPACITY:
        return "opacity"
    return property


class Prop:
    """
    A binding between a visual property and a data variable, constant, input or expression.

    Mapped variables are scaled by default, constants are not: `x="wt"` maps the `wt`
    column through the x scale, while `fill=value("red")` sets every mark to red.
    """

    def __init__(
        self,
        property: str | None,
        value: Any,
        kind: PropKind,
        scale: bool | str = False,
        offset: float | None = None,
        mult: float | None = None,
        type: str | None = None,
    ):
        self.property = property
        self.value = value
        self.kind = kind
        self.scale = scale
        self.offset = offset
        self.mult = mult
        self.type = type
        self.title = value if kind == "field" else None
        if property is not None:
            self._check()

    def _check(self):
        if self.property in SIZE_PROPS and self.kind == "field":
            raise PropError(
                f"'{self.property}' can only be set to a constant, band(), input or expression, "
                f"not mapped to the variable '{self.value}'"
            )

    def named(self, property: str) -> "Prop":
        p = copy.copy(self)
        p.property = property
        p._check()
        return p

    def rebind(self, field: str, property: str | None = None) -> "Prop":
        """Point this prop at another field, keeping its scale and axis title."""
        p = copy.copy(self)
        if property is not None:
            p.property = property
        p.value = field
        p.kind = "field"
        p.type = "numeric"
        return p

    @property
    def scaled(self) -> bool:
        return bool(self.scale)

    @property
    def vega_name(self) -> str:
        return camel_case(self.property)

    def scale_name(self) -> str | None:
        if not self.scale:
            return None
        if isinstance(self.scale, str):
            return self.scale
        return default_scale_name(self.property)

    def inputs(self) -> list[Input]:
        return [self.value] if self.kind == "signal" else []

    def to_vega(self) -> dict[str, Any]:
        if self.kind == "field":
            ref: dict[str, Any] = {"field": self.value}
        elif self.kind == "constant":
            ref = {"value": self.value}
        elif self.kind == "signal":
            ref = self.value.signal_ref()
        elif self.kind == "expr":
            ref = {"signal": self.value}
        else:
            ref = {"band": self.value}
        scale = self.scale_name()
        if scale is not None:
            ref["scale"] = scale
        if self.offset is not None:
            ref["offset"] = self.offset
        if self.mult is not None:
            ref["mult"] = self.mult
        return ref

    def __eq__(self, other):
        return isinstance(other, Prop) and (
            self.property,
            self.kind,
            self.scale,
            self.offset,
            self.mult,
        ) == (other.property, other.kind, other.scale, other.offset, other.mult) and (
            self.value is other.value or self.value == other.value
        )

    def __hash__(self):
        return hash((self.property, self.kind))

    def __repr__(self):
        scale = f" scale={self.scale_name()}" if self.scaled else ""
        return f"<Prop {self.property}={self.value!r} ({self.kind}{scale})>"


def field(name: str, scale: bool | str = True, offset=None, mult=None, type=None) -> Prop:
    """Map a data variable to a property. `type` overrides the guessed column kind."""
    return Prop(None, name, "field", scale=scale, offset=offset, mult=mult, type=type)


def value(v: Any, scale: bool | str = False, offset=None, mult=None) -> Prop:
    """Set a property to a constant (or an Input). Unscaled unless `scale` is given."""
    if isinstance(v, Input):
        return Prop(None, v, "signal", scale=scale, offset=offset, mult=mult)
    return Prop(None, v, "constant", scale=scale, offset=offset, mult=mult)


def expr(code: str, scale: bool | str = False, offset=None, mult=None) -> Prop:
    """A Vega expression evaluated for every datum, eg. expr("datum.wt * 1000")."""
    return Prop(None, code, "expr", scale=scale, offset=offset, mult=mult)


def band(mult: float = 1, offset=None) -> Prop:
    """The band width of the position scale, for rect widths on discrete scales."""
    return Prop(None, mult, "band", scale=True, offset=offset)


def as_prop(property: str, v: Any) -> Prop:
    if isinstance(v, Prop):
        return v.named(property)
    if isinstance(v, np.generic):
        v = v.item()
    if isinstance(v, str):
        if property in ENUM_PROPS:
            return Prop(property, v, "constant")
        return Prop(property, v, "field", scale=property not in UNSCALED_PROPS)
    if isinstance(v, Input):
        return Prop(property, v, "signal")
    if v is None or isinstance(v, (bool, int, float)):
        return Prop(property, v, "constant")
    raise TypeError(
        f"Cannot use a value of type {type(v).__name__} for prop '{property}'; "
        "use a column name, value(...), expr(...) or an input"
    )


class PropSet(Mapping[str, Prop]):
    """An ordered, immutable collection of props keyed by property name."""

    def __init__(self, props: Mapping[str, Prop] | None = None):
        self._props: dict[str, Prop] = dict(props or {})

    def __getitem__(self, key: str) -> Prop:
        return self._props[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def merge(self, child: "PropSet") -> "PropSet":
        """Inherit: props of `child` take priority over props of self."""
        return PropSet({**self._props, **child._props})

    def without(self, *names: str) -> "PropSet":
        return PropSet({k: v for k, v in self._props.items() if k not in names})

    def replace(self, **props: Prop) -> "PropSet":
        return PropSet({**self._props, **props})

    def mapped(self, name: str) -> bool:
        p = self._props.get(name)
        return p is not None and p.kind == "field"

    def fields(self) -> list[str]:
        return [p.value for p in self._props.values() if p.kind == "field"]

    def inputs(self) -> list[Input]:
        return [i for p in self._props.values() for i in p.inputs()]

    def __eq__(self, other):
        return isinstance(other, PropSet) and self._props == other._props

    def __repr__(self):
        return f"PropSet({list(self._props.values())!r})"


def props(**kwargs: Any) -> PropSet:
    """
    Build a set of props from keyword arguments.

    Examples:
        props(x="wt", y="mpg")                  # map variables (scaled)
        props(fill=value("red"), size=100)      # set constants (unscaled)
        props(size=input_slider(10, 100))       # bind to an interactive input
    """
    return PropSet({k: as_prop(k, v) for k, v in kwargs.items()})
