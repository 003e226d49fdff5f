import itertools
from typing import Any, Sequence

_ids = itertools.count()


def _signal_name(kind: str, id: str | None) -> str:
    return id or f"{kind}_{next(_ids)}"


class Input:
    """
    An interactive parameter. Compiles to a Vega signal bound to an input element,
    so the rendering engine draws the control and re-evaluates everything that depends on it.
    """

    def __init__(self, kind: str, value: Any, label: str = "", id: str | None = None, **bind: Any):
        self.kind = kind
        self.value = value
        self.label = label
        self.name = _signal_name(kind, id)
        self.bind = {k: v for k, v in bind.items() if v is not None}

    def signal_ref(self) -> dict[str, str]:
        return {"signal": self.name}

    def to_signal(self) -> dict[str, Any]:
        bind = {"input": self.kind, **self.bind}
        if self.label:
            bind["name"] = self.label
        return {"name": self.name, "value": self.value, "bind": bind}

    def __repr__(self):
        return f"<Input {self.kind} {self.name}={self.value!r}>"


def input_slider(min, max, value=None, step=None, label="", id=None) -> Input:
    """A range slider between `min` and `max`, starting at `value` (the midpoint by default)."""
    if min >= max:
        raise ValueError(f"Slider min ({min}) must be less than max ({max})")
    if value is None:
        value = (min + max) / 2
    if not min <= value <= max:
        raise ValueError(f"Slider value {value} is outside of [{min}, {max}]")
    return Input("range", value, label, id, min=min, max=max, step=step)


def input_checkbox(value=False, label="", id=None) -> Input:
    return Input("checkbox", bool(value), label, id)


def _choice_input(kind: str, choices: Sequence[Any], selected, label, id) -> Input:
    choices = list(choices.values()) if isinstance(choices, dict) else list(choices)
    if not choices:
        raise ValueError(f"{kind} input needs at least one choice")
    if selected is None:
        selected = choices[0]
    if selected not in choices:
        raise ValueError(f"Selected value {selected!r} is not one of {choices!r}")
    return Input(kind, selected, label, id, options=choices)


def input_select(choices, selected=None, label="", id=None) -> Input:
    return _choice_input("select", choices, selected, label, id)


def input_radiobuttons(choices, selected=None, label="", id=None) -> Input:
    return _choice_input("radio", choices, selected, label, id)


def input_text(value="", label="", id=None) -> Input:
    return Input("text", value, label, id)


def input_numeric(value, label="", id=None) -> Input:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Numeric input needs a number, got {value!r}")
    return Input("number", value, label, id)


def param(value: Any) -> Any:
    """Emit a transform parameter, as a signal reference when it is an Input."""
    if isinstance(value, Input):
        return value.signal_ref()
    return value


def collect_inputs(values: Any) -> list[Input]:
    """Find every Input within a (possibly nested) collection of parameters."""
    if isinstance(values, Input):
        return [values]
    if isinstance(values, dict):
        values = values.values()
    elif not isinstance(values, (list, tuple)):
        return []
    return [i for v in values for i in collect_inputs(v)]
