from typing import Any, NamedTuple

from ggvega.props import MissingPropError, PropError, PropSet, value

COMMON_PROPS = frozenset(
    {
        "x",
        "y",
        "fill",
        "stroke",
        "stroke_width",
        "stroke_dash",
        "stroke_cap",
        "opacity",
        "fill_opacity",
        "stroke_opacity",
        "tooltip",
        "cursor",
        "zindex",
    }
)


class MarkType(NamedTuple):
    vega_type: str
    props: frozenset[str]
    # each entry: (props, n) -> exactly n of these props must be given
    requires: tuple[tuple[tuple[str, ...], int], ...]
    defaults: dict[str, Any]


MARK_TYPES: dict[str, MarkType] = {
    "point": MarkType(
        "symbol",
        frozenset({"size", "shape", "angle"}),
        ((("x",), 1), (("y",), 1)),
        {"fill": "#000000", "size": 50},
    ),
    "path": MarkType(
        "line",
        frozenset({"interpolate", "tension", "defined"}),
        ((("x",), 1), (("y",), 1)),
        {"stroke": "#000000"},
    ),
    "rect": MarkType(
        "rect",
        frozenset({"x2", "y2", "width", "height", "corner_radius"}),
        ((("x", "x2", "width"), 2), (("y", "y2", "height"), 2)),
        {"fill": "#333333"},
    ),
    "area": MarkType(
        "area",
        frozenset({"y2", "height", "interpolate", "tension", "orient", "defined"}),
        ((("x",), 1), (("y",), 1), (("y2", "height"), 1)),
        {"stroke": "#000000", "fill": "#333333", "fill_opacity": 0.2},
    ),
    "arc": MarkType(
        "arc",
        frozenset(
            {"start_angle", "end_angle", "inner_radius", "outer_radius", "pad_angle", "corner_radius"}
        ),
        (
            (("x",), 1),
            (("y",), 1),
            (("start_angle",), 1),
            (("end_angle",), 1),
            (("outer_radius",), 1),
        ),
        {"fill": "#333333"},
    ),
    "text": MarkType(
        "text",
        frozenset(
            {"text", "font", "font_size", "font_weight", "font_style", "align", "baseline", "angle", "dx", "dy"}
        ),
        ((("x",), 1), (("y",), 1), (("text",), 1)),
        {"fill": "#000000"},
    ),
    "image": MarkType(
        "image",
        frozenset({"url", "width", "height", "aspect", "align", "baseline"}),
        ((("x",), 1), (("y",), 1), (("url",), 1)),
        {},
    ),
}


def _describe(names: tuple[str, ...], n: int) -> str:
    if len(names) == 1:
        return f"'{names[0]}'"
    return f"exactly {n} of {'/'.join(names)}"


class Mark:
    """
    A primitive drawing operation: one Vega mark drawn from one dataset, no transformation.

    Args:
        type (str): One of "point", "path", "rect", "area", "arc", "text", "image".
        props (PropSet): The fully resolved props for the mark.
    """

    def __init__(self, type: str, props: PropSet):
        if type not in MARK_TYPES:
            raise ValueError(f"Unknown mark type '{type}', expected one of {list(MARK_TYPES)}")
        self.type = type
        self.props = props

    @property
    def spec(self) -> MarkType:
        return MARK_TYPES[self.type]

    def valid_props(self) -> frozenset[str]:
        return COMMON_PROPS | self.spec.props

    def validate(self) -> "Mark":
        invalid = [p for p in self.props if p not in self.valid_props()]
        if invalid:
            raise PropError(
                f"Unknown properties for {self.type} mark: {', '.join(invalid)}. "
                f"Valid properties are: {', '.join(sorted(self.valid_props()))}"
            )
        for names, n in self.spec.requires:
            given = [name for name in names if name in self.props]
            if len(given) != n:
                raise MissingPropError(
                    f"{self.type} mark needs {_describe(names, n)}, got {given or 'none'}"
                )
        return self

    def with_defaults(self) -> "Mark":
        unset = {k: v for k, v in self.spec.defaults.items() if k not in self.props}
        defaults = PropSet({k: value(v).named(k) for k, v in unset.items()})
        return Mark(self.type, defaults.merge(self.props))

    def to_vega(self, data_name: str) -> dict[str, Any]:
        update = {p.vega_name: p.to_vega() for p in self.props.values()}
        return {
            "type": self.spec.vega_type,
            "from": {"data": data_name},
            "encode": {"update": update},
        }

    def __repr__(self):
        return f"<Mark {self.type} {list(self.props)}>"
