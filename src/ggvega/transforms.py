"""
Builders for the Vega data transforms invoked by compound layers.

Nothing here computes statistics: each function returns the JSON transform
pipeline, and the rendering engine evaluates it in the browser.
"""

from typing import Any, Sequence

from ggvega.inputs import Input, param

Transform = dict[str, Any]

REGRESSION_METHODS = {
    "lm": "linear",
    "linear": "linear",
    "poly": "poly",
    "quad": "quad",
    "exp": "exp",
    "log": "log",
    "pow": "pow",
}


def compute_bin(
    field: str,
    signal: str,
    width=None,
    center=None,
    boundary=None,
    maxbins=30,
    groupby: Sequence[str] = (),
) -> list[Transform]:
    """
    Bin `field` and count rows per bin, producing xmin_, xmax_, x_ and count_.

    `signal` names the extent signal the bin transform reads its range from.
    `center` and `boundary` align bins on a value; only one of them may be given.
    """
    if center is not None and boundary is not None:
        raise ValueError("Only one of center and boundary may be specified")
    bin: Transform = {
        "type": "bin",
        "field": field,
        "extent": {"signal": signal},
        "maxbins": param(maxbins),
        "as": ["xmin_", "xmax_"],
    }
    if width is not None:
        bin["step"] = param(width)
    if boundary is not None:
        bin["anchor"] = param(boundary)
    if center is not None:
        if width is None or isinstance(width, Input) or isinstance(center, Input):
            raise ValueError("center requires a fixed numeric width")
        bin["anchor"] = center - width / 2
    return [
        {"type": "extent", "field": field, "signal": signal},
        bin,
        {
            "type": "aggregate",
            "groupby": ["xmin_", "xmax_", *groupby],
            "ops": ["count"],
            "as": ["count_"],
        },
        {"type": "formula", "expr": "(datum.xmin_ + datum.xmax_) / 2", "as": "x_"},
    ]


def compute_count(field: str, groupby: Sequence[str] = ()) -> list[Transform]:
    """Count rows for each distinct value of `field`, into count_."""
    return [
        {
            "type": "aggregate",
            "groupby": [field, *groupby],
            "ops": ["count"],
            "as": ["count_"],
        }
    ]


def compute_stack(x_field: str, y_field: str, groupby: Sequence[str] = ()) -> list[Transform]:
    """Stack `y_field` within each `x_field` value, ordered by `groupby`, into stack_lwr_/stack_upr_."""
    stack: Transform = {
        "type": "stack",
        "groupby": [x_field],
        "field": y_field,
        "as": ["stack_lwr_", "stack_upr_"],
    }
    if groupby:
        stack["sort"] = {"field": list(groupby)}
    return [stack]


def compute_smooth(x: str, y: str, span=0.75, groupby: Sequence[str] = ()) -> list[Transform]:
    """Locally weighted regression of y on x, into pred_ (x) and resp_ (fitted y)."""
    return [
        {
            "type": "loess",
            "x": x,
            "y": y,
            "bandwidth": param(span),
            "groupby": list(groupby),
            "as": ["pred_", "resp_"],
        }
    ]


def compute_model_prediction(
    x: str, y: str, model="lm", span=0.75, order=2, groupby: Sequence[str] = ()
) -> list[Transform]:
    """Fit a model of y on x, into pred_ (x) and resp_ (fitted y)."""
    if model == "loess":
        return compute_smooth(x, y, span=span, groupby=groupby)
    if model not in REGRESSION_METHODS:
        raise ValueError(
            f"Unknown model '{model}', expected 'loess' or one of {list(REGRESSION_METHODS)}"
        )
    regression: Transform = {
        "type": "regression",
        "method": REGRESSION_METHODS[model],
        "x": x,
        "y": y,
        "groupby": list(groupby),
        "as": ["pred_", "resp_"],
    }
    if model == "poly":
        regression["order"] = param(order)
    return [regression]


def compute_density(
    field: str, adjust=1, kernel="gaussian", bw=None, n=200, groupby: Sequence[str] = ()
) -> list[Transform]:
    """
    Kernel density estimate of `field`, into pred_ (value) and resp_ (density).

    Without `bw` the engine picks a bandwidth with Scott's rule; `adjust` scales an explicit `bw`.
    """
    if kernel != "gaussian":
        raise ValueError(f"Only the gaussian kernel is supported, got '{kernel}'")
    if bw is None:
        if adjust != 1:
            raise ValueError("adjust needs an explicit bw to scale")
        bandwidth: Any = 0
    elif isinstance(bw, Input) or isinstance(adjust, Input):
        bandwidth = {"signal": f"({_expr(bw)}) * ({_expr(adjust)})"}
    else:
        bandwidth = bw * adjust
    return [
        {
            "type": "kde",
            "field": field,
            "groupby": list(groupby),
            "bandwidth": bandwidth,
            "steps": n,
            "as": ["pred_", "resp_"],
        }
    ]


def _expr(value: Any) -> str:
    return value.name if isinstance(value, Input) else repr(value)


def compute_sort(field: str, order="ascending") -> list[Transform]:
    return [{"type": "collect", "sort": {"field": field, "order": order}}]
