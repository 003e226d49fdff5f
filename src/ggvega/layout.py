import json
import os
import uuid
from typing import Any, Sequence

from html2image import Html2Image
from PIL import Image

from ggvega.util import CONFIG, PARENT_PATH
from ggvega.widget import Widget, to_json

DISPLAY_MODES = ("html", "widget")


def create_parent_dir(path: str) -> None:
    """Create parent directory if it doesn't exist."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def read_renderer() -> str:
    with open(PARENT_PATH / "js/render.js", "r") as js_file:
        return js_file.read()


def html_snippet(ast, id=None) -> str:
    """A div plus the inlined renderer module, drawing `ast` (a vis or a layout tree) into the div."""
    id = id or f"ggvega-{uuid.uuid4().hex}"
    payload = json.dumps(to_json(ast))
    return f"""
    <div id="{id}"></div>
    <script type="application/json" id="{id}-data">{payload}</script>
    <script type="module">
        {read_renderer()}
        const container = document.getElementById('{id}');
        const payload = document.getElementById('{id}-data').textContent;
        renderData(container, JSON.parse(payload));
    </script>
    """


def html_standalone(ast, id=None) -> str:
    return f"""<!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <title>ggvega</title>
    </head>
    <body>
        {html_snippet(ast, id)}
    </body>
    </html>
    """


class HTML:
    """A static rendering: the controls of bound inputs still work, but Python can't talk to it."""

    def __init__(self, ast):
        self.ast = ast
        self.id = f"ggvega-{uuid.uuid4().hex}"

    def _repr_mimebundle_(self, **kwargs):
        return {"text/html": html_snippet(self.ast, self.id)}, {}


class LayoutItem:
    """
    Anything that can be displayed: a single visualization, or rows and columns of them.

    Subclasses implement `for_json`, returning the tree sent to the renderer.
    """

    def __init__(self):
        self._html: HTML | None = None
        self._widget: Widget | None = None
        self._display_as: str | None = None

    def for_json(self) -> Any:
        raise NotImplementedError("Subclasses must implement for_json method")

    def display_as(self, display_as: str) -> "LayoutItem":
        if display_as not in DISPLAY_MODES:
            raise ValueError(f"display_as must be one of {DISPLAY_MODES}, got '{display_as}'")
        self._display_as = display_as
        return self

    def __and__(self, other: Any) -> "Row":
        return Row(self, other)

    def __rand__(self, other: Any) -> "Row":
        return Row(other, self)

    def __or__(self, other: Any) -> "Column":
        return Column(self, other)

    def __ror__(self, other: Any) -> "Column":
        return Column(other, self)

    def html(self) -> HTML:
        if self._html is None:
            self._html = HTML(self)
        return self._html

    def widget(self) -> Widget:
        if self._widget is None:
            self._widget = Widget(self)
        return self._widget

    def repr(self) -> Widget | HTML:
        if (self._display_as or CONFIG["display_as"]) == "widget":
            return self.widget()
        return self.html()

    def _repr_mimebundle_(self, **kwargs: Any) -> Any:
        return self.repr()._repr_mimebundle_(**kwargs)

    def _repr_html_(self) -> str | None:
        bundle = self._repr_mimebundle_()
        data = bundle[0] if isinstance(bundle, tuple) else bundle
        return data.get("text/html") if isinstance(data, dict) else None

    def save_html(self, path: str) -> None:
        create_parent_dir(path)
        with open(path, "w") as f:
            f.write(html_standalone(self))
        print(f"HTML saved to {path}")

    def save_image(self, path: str, width: int = 800, height: int = 600) -> None:
        """
        Render in a headless browser and save a PNG, cropped to the drawn area.

        Needs a Chrome/Chromium install for html2image.
        """
        create_parent_dir(path)
        folder, filename = os.path.split(os.path.abspath(path))
        hti = Html2Image(output_path=folder, size=(width, height))
        hti.screenshot(html_str=html_standalone(self), save_as=filename)

        with Image.open(path) as img:
            bbox = img.getbbox()
            cropped = img.crop(bbox) if bbox else img.copy()
        cropped.save(path)
        print(f"Image saved to {path}")

    def reset(self, other: "LayoutItem") -> None:
        """Show `other` in this item's live widget, keeping the widget (and its listeners)."""
        ensure_widget(self).set_ast(other)

    def onChange(self, listeners: dict) -> "LayoutItem":
        """Call `listeners[name](widget, value)` whenever the input bound to signal `name` changes."""
        widget = ensure_widget(self)
        for key, listener in listeners.items():
            # keys are signal names or the inputs themselves
            widget.on_signal(getattr(key, "name", key), listener)
        return self

    @property
    def signals(self) -> dict[str, Any]:
        """Current values of the bound inputs. Raises ValueError if displayed as HTML."""
        return dict(ensure_widget(self).signals)


def ensure_widget(item: LayoutItem) -> Widget:
    if item._html is not None:
        raise ValueError(
            "Cannot update an HTML rendering. Use display_as('widget') or .widget() to create a live widget."
        )
    return item.widget()


def flatten_layout_items(
    items: Sequence[Any], layout_class: type
) -> tuple[list[Any], dict[str, Any]]:
    """Splice nested layouts of the same direction, and collect dicts as layout options."""
    flattened: list[Any] = []
    options: dict[str, Any] = {}
    for item in items:
        if isinstance(item, layout_class):
            flattened.extend(item.items)
            options.update(item.options)
        elif isinstance(item, dict):
            options.update(item)
        else:
            flattened.append(item)
    return flattened, options


class Layout(LayoutItem):
    direction = "row"

    def __init__(self, *items: Any, **options: Any):
        super().__init__()
        self.items, collected = flatten_layout_items(items, type(self))
        self.options = {**collected, **options}

    def for_json(self) -> Any:
        return {"__type__": self.direction, "options": self.options, "children": self.items}


class Row(Layout):
    """Render children side by side. `gap` (px) sets the spacing."""

    direction = "row"


class Column(Layout):
    """Render children top to bottom."""

    direction = "column"
