from typing import Any

from ggvega.props import POSITION_X, POSITION_Y, Prop, default_scale_name

NUMERIC_COLORS = ["#132B43", "#56B1F7"]

DEFAULT_RANGES: dict[tuple[str, str], Any] = {
    ("fill", "numeric"): NUMERIC_COLORS,
    ("fill", "nominal"): "category",
    ("stroke", "numeric"): NUMERIC_COLORS,
    ("stroke", "nominal"): "category",
    ("size", "numeric"): [20, 100],
    ("shape", "nominal"): "symbol",
    ("opacity", "numeric"): [0, 1],
    ("font_size", "numeric"): [10, 20],
    ("stroke_width", "numeric"): [0.5, 4],
}

NUMERIC_TRANS = {"linear", "log", "pow", "sqrt", "symlog"}


class ScaleSpec:
    """
    User settings for a scale. Settings are applied over the inferred scale, key by key.

    Args:
        property (str): The property whose scale this configures, eg. "x" or "fill".
        kind (str): "numeric", "nominal", "datetime" or "logical".
        name (str, optional): Scale name, defaults to the scale the property uses.
    """

    def __init__(self, property: str, kind: str, name: str | None = None, **options: Any):
        self.property = property
        self.kind = kind
        self.name = name or default_scale_name(property)
        self.options = {k: v for k, v in options.items() if v is not None}

    def __repr__(self):
        return f"<ScaleSpec {self.name} ({self.kind}) {self.options}>"


def scale_numeric(
    property,
    domain=None,
    range=None,
    reverse=None,
    round=None,
    trans="linear",
    clamp=None,
    nice=None,
    zero=None,
    exponent=None,
    name=None,
) -> ScaleSpec:
    """Use a continuous scale for `property`. `trans` is one of linear, log, pow, sqrt, symlog."""
    if trans not in NUMERIC_TRANS:
        raise ValueError(f"Unknown trans '{trans}', expected one of {sorted(NUMERIC_TRANS)}")
    return ScaleSpec(
        property,
        "numeric",
        name,
        type=trans,
        domain=domain,
        range=range,
        reverse=reverse,
        round=round,
        clamp=clamp,
        nice=nice,
        zero=zero,
        exponent=exponent,
    )


def scale_datetime(
    property, domain=None, range=None, reverse=None, clamp=None, nice=None, utc=False, name=None
) -> ScaleSpec:
    return ScaleSpec(
        property,
        "datetime",
        name,
        type="utc" if utc else "time",
        domain=domain,
        range=range,
        reverse=reverse,
        clamp=clamp,
        nice=nice,
    )


def scale_nominal(
    property, domain=None, range=None, reverse=None, round=None, padding=None, points=None, name=None
) -> ScaleSpec:
    """
    Use a discrete scale for `property`. For position scales, `points=True` places values
    at points and `points=False` gives them bands (the default depends on the marks).
    """
    options: dict[str, Any] = {}
    if points is not None:
        options["type"] = "point" if points else "band"
    return ScaleSpec(
        property,
        "nominal",
        name,
        domain=domain,
        range=range,
        reverse=reverse,
        round=round,
        padding=padding,
        **options,
    )


def scale_logical(property, domain=None, range=None, reverse=None, name=None) -> ScaleSpec:
    return ScaleSpec(property, "logical", name, domain=domain, range=range, reverse=reverse)


_KIND_OF_SPEC = {"numeric": "numeric", "datetime": "temporal", "nominal": "nominal", "logical": "nominal"}


class ScaleUse:
    def __init__(self, name: str):
        self.name = name
        self.properties: list[str] = []
        self.kinds: set[str] = set()
        self.fields: list[dict[str, str]] = []
        self.constants: list[Any] = []
        self.banded = False
        self.title: str | None = None


class ScaleCollector:
    """Gathers, from every mark, what each named scale must cover, then emits Vega scales."""

    def __init__(self):
        self.uses: dict[str, ScaleUse] = {}

    def use(self, name: str) -> ScaleUse:
        if name not in self.uses:
            self.uses[name] = ScaleUse(name)
        return self.uses[name]

    def add(self, prop: Prop, data_name: str, kind: str | None, mark_type: str) -> None:
        name = prop.scale_name()
        if name is None:
            return
        use = self.use(name)
        if prop.property not in use.properties:
            use.properties.append(prop.property)
        if mark_type == "rect" or prop.kind == "band":
            use.banded = True
        if kind is not None:
            use.kinds.add("nominal" if kind == "logical" else kind)
        if prop.kind == "field":
            ref = {"data": data_name, "field": prop.value}
            if ref not in use.fields:
                use.fields.append(ref)
            if use.title is None:
                use.title = prop.title
        elif prop.kind == "constant" and prop.value not in use.constants:
            use.constants.append(prop.value)

    def property_of(self, name: str) -> str | None:
        use = self.uses.get(name)
        return use.properties[0] if use and use.properties else None

    def title_of(self, name: str) -> str | None:
        use = self.uses.get(name)
        return use.title if use else None

    def constant_data(self) -> list[dict[str, Any]]:
        """Datasets holding the scaled constants, so that they take part in domains."""
        return [
            {"name": f"scale_{use.name}_values", "values": [{"value": c} for c in use.constants]}
            for use in self.uses.values()
            if use.constants
        ]

    def resolve(self, specs: dict[str, ScaleSpec]) -> list[dict[str, Any]]:
        return [self._resolve(use, specs.get(use.name)) for use in self.uses.values()]

    def _kind(self, use: ScaleUse, spec: ScaleSpec | None) -> str:
        if spec is not None:
            return _KIND_OF_SPEC[spec.kind]
        kinds = use.kinds or {"numeric"}
        if len(kinds) > 1:
            raise ValueError(
                f"Scale '{use.name}' mixes {' and '.join(sorted(kinds))} values; "
                "map a single kind of variable to it or declare its scale explicitly"
            )
        return next(iter(kinds))

    def _resolve(self, use: ScaleUse, spec: ScaleSpec | None) -> dict[str, Any]:
        kind = self._kind(use, spec)
        position = use.name in ("x", "y") or any(
            p in POSITION_X | POSITION_Y for p in use.properties
        )
        scale: dict[str, Any] = {"name": use.name}
        if kind == "numeric":
            scale.update(type="linear", nice=True, zero=False)
        elif kind == "temporal":
            scale.update(type="time", nice=True)
        elif position:
            scale["type"] = "band" if use.banded else "point"
            scale["padding"] = 0.1 if use.banded else 0.5
        else:
            scale["type"] = "ordinal"

        scale["domain"] = self._domain(use, kind)
        range = self._range(use, kind, position)
        if range is not None:
            scale["range"] = range
        if spec is not None:
            scale.update(spec.options)
        if "range" not in scale:
            raise ValueError(
                f"No default range for scale '{use.name}'; declare one, eg. "
                f"scale_numeric('{self.property_of(use.name)}', range=[...])"
            )
        return scale

    def _domain(self, use: ScaleUse, kind: str) -> Any:
        refs = list(use.fields)
        if use.constants:
            refs.append({"data": f"scale_{use.name}_values", "field": "value"})
        if not refs:
            return []
        if len(refs) == 1:
            domain: dict[str, Any] = dict(refs[0])
        else:
            domain = {"fields": refs}
        if kind == "nominal":
            domain["sort"] = True
        return domain

    def _range(self, use: ScaleUse, kind: str, position: bool) -> Any:
        if use.name == "x" or (position and use.properties[0] in POSITION_X):
            return "width"
        if use.name == "y" or (position and use.properties[0] in POSITION_Y):
            return "height"
        property = use.properties[0] if use.properties else use.name
        key = "nominal" if kind == "nominal" else "numeric"
        for candidate in (use.name, property):
            if (candidate, key) in DEFAULT_RANGES:
                return DEFAULT_RANGES[(candidate, key)]
        return None
