# %% [markdown]
# To use ggvega, first import it:

# %%
import ggvega.plot as gv

# %% [markdown]
# We'll use a small slice of the classic `mtcars` dataset, as a list of records.
# A dict of columns, a numpy structured array or a pandas DataFrame work just as well.

# %%
cars = [
    {"model": "Mazda RX4", "mpg": 21.0, "wt": 2.62, "cyl": 6, "am": "manual"},
    {"model": "Datsun 710", "mpg": 22.8, "wt": 2.32, "cyl": 4, "am": "manual"},
    {"model": "Hornet 4 Drive", "mpg": 21.4, "wt": 3.215, "cyl": 6, "am": "automatic"},
    {"model": "Valiant", "mpg": 18.1, "wt": 3.46, "cyl": 6, "am": "automatic"},
    {"model": "Duster 360", "mpg": 14.3, "wt": 3.57, "cyl": 8, "am": "automatic"},
    {"model": "Merc 240D", "mpg": 24.4, "wt": 3.19, "cyl": 4, "am": "automatic"},
    {"model": "Fiat 128", "mpg": 32.4, "wt": 2.2, "cyl": 4, "am": "manual"},
    {"model": "Honda Civic", "mpg": 30.4, "wt": 1.615, "cyl": 4, "am": "manual"},
    {"model": "Camaro Z28", "mpg": 13.3, "wt": 3.84, "cyl": 8, "am": "automatic"},
    {"model": "Porsche 914-2", "mpg": 26.0, "wt": 2.14, "cyl": 4, "am": "manual"},
]

# %% [markdown]
# `ggvis` takes the data and the props every layer inherits. A bare string maps a
# variable to a property through a scale. With x and y mapped and no layers, we get points:

# %%
gv.ggvis(cars, x="wt", y="mpg")

# %% [markdown]
# ## Layers
#
# Layers are added with `+`. Each addition returns a new visualization, so a base can be reused.

# %%
base = gv.ggvis(cars, x="wt", y="mpg")
base + gv.layer_points(fill="am") + gv.layer_smooths()

# %% [markdown]
# `value(...)` sets a constant instead of mapping a variable. Constants are not scaled:

# %%
base + gv.layer_points(fill=gv.value("steelblue"), size=gv.value(120), opacity=gv.value(0.6))

# %% [markdown]
# `layer_lines` connects the points in order of x; `layer_paths` keeps the data order.

# %%
base + gv.layer_lines(stroke=gv.value("gray")) + gv.layer_points()

# %% [markdown]
# ## Statistical layers
#
# Compound layers transform the data before drawing it. The transforms are compiled
# into the Vega spec and run in the browser.

# %%
gv.ggvis(cars, x="mpg") + gv.layer_histograms(width=5, center=20)

# %%
gv.ggvis(cars, x="mpg", fill="am") + gv.layer_densities(bw=2)

# %%
gv.ggvis(cars, x="cyl", fill="am") + gv.layer_bars()

# %%
base + gv.layer_points() + gv.layer_model_predictions(model="lm")

# %% [markdown]
# ## Grouping
#
# `group_by` draws every layer added after it once per group.

# %%
base + gv.layer_points() + gv.group_by("am") + gv.layer_model_predictions(stroke="am")

# %% [markdown]
# ## Scales, axes and legends

# %%
(
    base
    + gv.layer_points(fill="cyl")
    + gv.scale_numeric("y", domain=[10, 35], zero=True)
    + gv.scale_numeric("fill", range=["#fde0dd", "#c51b8a"])
    + gv.add_axis("x", title="Weight (1000 lbs)")
    + gv.add_legend("fill", title="Cylinders")
    + gv.title("Fuel economy")
)

# %% [markdown]
# ## Saving
#
# Any visualization can be written out as a Vega spec, a standalone HTML file or an image.

# %%
p = base + gv.layer_points()
p.save_spec("scratch/cars.vg.json")
p.save_html("scratch/cars.html")
