# %%
import pytest

from ggvega.inputs import (
    collect_inputs,
    input_checkbox,
    input_numeric,
    input_radiobuttons,
    input_select,
    input_slider,
    input_text,
    param,
)


def test_slider_signal():
    s = input_slider(0, 10, step=1, label="Size", id="n")
    assert s.value == 5
    assert s.to_signal() == {
        "name": "n",
        "value": 5,
        "bind": {"input": "range", "min": 0, "max": 10, "step": 1, "name": "Size"},
    }


def test_slider_validation():
    with pytest.raises(ValueError):
        input_slider(10, 0)
    with pytest.raises(ValueError):
        input_slider(0, 10, value=11)


def test_select():
    s = input_select(["a", "b"], id="s")
    assert s.to_signal() == {
        "name": "s",
        "value": "a",
        "bind": {"input": "select", "options": ["a", "b"]},
    }


def test_radiobuttons_with_labelled_choices():
    r = input_radiobuttons({"Linear": "lm", "Loess": "loess"}, selected="loess")
    assert r.value == "loess"
    assert r.to_signal()["bind"] == {"input": "radio", "options": ["lm", "loess"]}


def test_choice_validation():
    with pytest.raises(ValueError):
        input_select([])
    with pytest.raises(ValueError):
        input_select(["a", "b"], selected="c")


def test_other_inputs():
    assert input_checkbox(1).value is True
    assert input_checkbox().to_signal()["bind"] == {"input": "checkbox"}
    assert input_text("hi").to_signal()["bind"] == {"input": "text"}
    assert input_numeric(3, label="n").to_signal()["bind"] == {"input": "number", "name": "n"}
    with pytest.raises(ValueError):
        input_numeric("3")


def test_names_are_unique():
    assert input_text().name != input_text().name


def test_param_and_collect():
    s = input_slider(0, 1, id="p")
    t = input_checkbox()
    assert param(s) == {"signal": "p"}
    assert param(3) == 3
    assert collect_inputs({"a": [s, 1], "b": t, "c": None}) == [s, t]
