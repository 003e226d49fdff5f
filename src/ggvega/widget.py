import datetime
import warnings
from typing import Any, Callable, Iterable

import anywidget
import numpy as np
import traitlets

from ggvega.util import PARENT_PATH


def to_json(data: Any) -> Any:
    """Convert a value (specs, layout trees, numpy/jax arrays, ...) to plain JSON data."""
    # Handle NaN at top level
    if isinstance(data, float):
        if np.isnan(data):
            return None
        return data

    # Handle basic JSON-serializable types first since they're most common
    if isinstance(data, (str, int, bool)):
        return data

    if data is None:
        return None

    if isinstance(data, (datetime.date, datetime.datetime)):
        return data.isoformat()

    if isinstance(data, np.generic):
        return to_json(data.item())

    # Handle numpy and jax arrays
    if isinstance(data, np.ndarray) or type(data).__name__ in (
        "DeviceArray",
        "Array",
        "ArrayImpl",
    ):
        try:
            if data.ndim == 0:  # It's a scalar
                return to_json(data.item())
        except AttributeError:
            pass
        return to_json(np.asarray(data).tolist())

    # Handle objects with custom serialization
    if hasattr(data, "for_json"):
        return to_json(data.for_json())

    # Handle containers
    if isinstance(data, dict):
        return {str(k): to_json(v) for k, v in data.items()}

    if isinstance(data, (list, tuple, set, frozenset)):
        return [to_json(x) for x in data]

    if isinstance(data, Iterable) and not isinstance(data, (bytes, bytearray)):
        if not hasattr(data, "__len__") and not hasattr(data, "__getitem__"):
            warnings.warn(
                "Potentially exhaustible iterator encountered: generator", UserWarning
            )
        return [to_json(x) for x in data]

    raise TypeError(f"Object of type {type(data)} is not JSON serializable")


def bound_signals(node: Any) -> dict[str, Any]:
    """Initial values of the signals bound to inputs, across every spec in a layout tree."""
    if not isinstance(node, dict):
        return {}
    if node.get("__type__") == "vega":
        return {
            s["name"]: s.get("value")
            for s in node["spec"].get("signals", [])
            if "bind" in s
        }
    out: dict[str, Any] = {}
    for child in node.get("children", []):
        out.update(bound_signals(child))
    return out


class Widget(anywidget.AnyWidget):
    """
    A live rendering. Values of bound inputs are mirrored in `signals`; setting a
    signal from Python updates the rendered view.
    """

    _esm = PARENT_PATH / "js/render.js"
    data = traitlets.Any().tag(sync=True)
    signals = traitlets.Dict().tag(sync=True)

    def __init__(self, ast: Any):
        super().__init__()
        self.set_ast(ast)

    def set_ast(self, ast: Any):
        data = to_json(ast)
        self.signals = bound_signals(data)
        self.data = data

    def set_signal(self, name: str, value: Any) -> None:
        if name not in self.signals:
            raise KeyError(f"Unknown signal '{name}', bound signals are: {list(self.signals)}")
        self.signals = {**self.signals, name: to_json(value)}

    def on_signal(self, name: str, callback: Callable[["Widget", Any], Any]) -> None:
        """Call `callback(widget, value)` whenever signal `name` changes."""

        def handle(change):
            old, new = change["old"], change["new"]
            if name in new and old.get(name) != new[name]:
                callback(self, new[name])

        self.observe(handle, names="signals")
