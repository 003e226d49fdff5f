# %%
import copy
import importlib.util
import pathlib
from typing import Any

PARENT_PATH = pathlib.Path(importlib.util.find_spec("ggvega.util").origin).parent

CONFIG: dict[str, Any] = {
    "display_as": "html",
    "width": 600,
    "height": 400,
    "padding": 5,
    "renderer": "svg",
    "autosize": "pad",
    "vega_version": "5",
    "actions": False,
}


def deep_merge(dict1: dict, dict2: dict) -> dict:
    """
    Recursively merge two dictionaries, returning a new one.
    Values in dict2 overwrite values in dict1. If both values are dictionaries, recursively merge them.
    """
    result = copy.copy(dict1)
    for k, v in dict2.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def configure(options: dict[str, Any] | None = None, **kwargs: Any) -> None:
    """Update the global display defaults, eg. configure(display_as="widget", width=400)."""
    merged = deep_merge(CONFIG, {**(options or {}), **kwargs})
    CONFIG.update(merged)


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
