# %% [markdown]
# ## Interactive inputs
#
# Inputs compile to Vega signals bound to HTML controls. The controls are drawn by the
# rendering engine, so they work in static HTML as well as in a live widget.

# %%
import ggvega.plot as gv

cars = [
    {"mpg": 21.0, "wt": 2.62},
    {"mpg": 22.8, "wt": 2.32},
    {"mpg": 21.4, "wt": 3.215},
    {"mpg": 18.1, "wt": 3.46},
    {"mpg": 14.3, "wt": 3.57},
    {"mpg": 24.4, "wt": 3.19},
    {"mpg": 32.4, "wt": 2.2},
    {"mpg": 30.4, "wt": 1.615},
]

# %%
size = gv.input_slider(10, 200, value=60, label="Point size", id="size")
span = gv.input_slider(0.2, 1, value=0.75, step=0.05, label="Span", id="span")

(
    gv.ggvis(cars, x="wt", y="mpg")
    + gv.layer_points(size=size)
    + gv.layer_smooths(span=span)
)

# %% [markdown]
# Displayed as a widget, the current input values are available from Python and
# listeners are called whenever they change.

# %%
p = (gv.ggvis(cars, x="wt", y="mpg") + gv.layer_points(size=size)).display_as("widget")
p.onChange({size: lambda widget, value: print(f"size is now {value}")})
p

# %%
p.signals

# %%
p.widget().set_signal("size", 150)

# %% [markdown]
# Layouts combine visualizations with `&` (row) and `|` (column).

# %%
(gv.ggvis(cars, x="wt", y="mpg") + gv.layer_points()) & (gv.ggvis(cars, x="mpg") + gv.layer_histograms(width=4))
