import logging

from shiny import reactive, render
from shiny import ui as core_ui
from shiny.express import input, ui
from shinywidgets import output_widget, render_plotly

# Import organized modules
from street_trees.config import (
    DATA_SOURCE_LABEL,
    DATA_SOURCE_URL,
    DEFAULT_NEIGHBOURHOOD,
    LATITUDE_BOUNDS,
    LONGITUDE_BOUNDS,
    resolve_variant,
)
from street_trees.data_manager import load_trees
from street_trees.export import (
    PLOT_EXPORT_FILENAME,
    TABLE_EXPORT_FILENAME,
    plot_to_png,
    results_to_csv,
)
from street_trees.filters import (
    FilterSpec,
    ResultSet,
    ResultStatus,
    aggregate_by_year_genus,
    apply_filters,
    default_filter_spec,
    genus_choices,
    neighbourhood_choices,
)
from street_trees.plotting import create_planting_plot, resolve_outline_colour

logging.basicConfig(level=logging.INFO)

VARIANT = resolve_variant()

# ======================================================
#  STATIC STATE
# ======================================================
# Load once on startup; a dataset that cannot be loaded aborts the app.
TREES = load_trees()

GENUS_CHOICES = genus_choices(TREES)
NEIGHBOURHOOD_CHOICES = neighbourhood_choices(TREES)
DEFAULT_SPEC = default_filter_spec(VARIANT)
DEFAULT_GENERA = [g for g in GENUS_CHOICES if g in DEFAULT_SPEC.genera]
NEIGHBOURHOOD_DEFAULT = (
    DEFAULT_NEIGHBOURHOOD if DEFAULT_NEIGHBOURHOOD in NEIGHBOURHOOD_CHOICES else None
)
YEAR_SPAN = (
    f"{TREES['year'].min()} - {TREES['year'].max()}" if not TREES.empty else "the inventory"
)


def _status_message(result: ResultSet) -> str:
    if result.status is ResultStatus.NOT_READY:
        return "Select a neighbourhood to see its trees."
    if result.status is ResultStatus.EMPTY:
        return "No trees match the current filters."
    return f"{len(result):,} trees match the current filters."


# ======================================================
#  REACTIVE STATE
# ======================================================


@reactive.calc
def filter_spec() -> FilterSpec:
    # The neighbourhood selector only exists once its panel has been shown.
    neighbourhood = input.neighbourhood() if input.neighbourhood.is_set() else None
    return FilterSpec.from_inputs(
        genera=input.genera(),
        neighbourhood_filter_enabled=input.filter_neighbourhood(),
        neighbourhood=neighbourhood,
        latitude_range=input.latitude(),
        longitude_range=input.longitude(),
    )


@reactive.calc
def planted() -> ResultSet:
    return apply_filters(TREES, filter_spec())


@reactive.calc
def outline_colour() -> str:
    if not VARIANT.colour_picker:
        return VARIANT.outline_colour
    return resolve_outline_colour(input.outline_colour(), VARIANT.outline_colour)


@reactive.calc
def planting_figure():
    return create_planting_plot(
        aggregate_by_year_genus(planted()),
        palette=VARIANT.palette,
        outline_colour=outline_colour(),
        y_axis_label=VARIANT.y_axis_label,
    )


# ======================================================
#  OUTPUTS
# ======================================================
with ui.hold():

    @render_plotly
    def planting_plot():
        if planted().is_blank:
            return None
        return planting_figure()

    @render.text
    def result_status():
        return _status_message(planted())

    @render.data_frame
    def planted_table():
        rows = planted().rows.reset_index(drop=True)
        return render.DataGrid(rows, height="600px", filters=True)

    @render.download(filename=TABLE_EXPORT_FILENAME)
    def download_table():
        yield results_to_csv(planted())

    @render.download(filename=PLOT_EXPORT_FILENAME)
    def download_plot():
        yield plot_to_png(planting_figure())


# ======================================================
#  UI LAYOUT
# ======================================================
page_kwargs = dict(title=VARIANT.title, fillable=False, full_width=True, lang="en")
if VARIANT.theme:
    page_kwargs["theme"] = core_ui.Theme(VARIANT.theme)
ui.page_opts(**page_kwargs)

with ui.sidebar(open="always"):
    ui.input_slider(
        "latitude",
        "Latitude",
        min=LATITUDE_BOUNDS[0],
        max=LATITUDE_BOUNDS[1],
        value=DEFAULT_SPEC.latitude_range,
        step=0.0001,
    )
    ui.input_slider(
        "longitude",
        "Longitude",
        min=LONGITUDE_BOUNDS[0],
        max=LONGITUDE_BOUNDS[1],
        value=DEFAULT_SPEC.longitude_range,
        step=0.001,
    )
    ui.input_selectize(
        "genera",
        "genus",
        GENUS_CHOICES,
        selected=DEFAULT_GENERA,
        multiple=True,
    )
    ui.input_checkbox("filter_neighbourhood", "Filter by neighbourhood", False)
    with ui.panel_conditional("input.filter_neighbourhood"):

        @render.ui
        def neighbourhood_selector():
            return ui.input_select(
                "neighbourhood",
                "neighbourhood",
                NEIGHBOURHOOD_CHOICES,
                selected=NEIGHBOURHOOD_DEFAULT,
            )

    ui.input_action_button("reset_filters", "Reset filters", class_="btn-primary mt-3")
    ui.span(
        "Data source: ",
        ui.tags.a(DATA_SOURCE_LABEL, href=DATA_SOURCE_URL, target="_blank"),
    )


@reactive.effect
@reactive.event(input.reset_filters)
def _reset_filters():
    ui.update_slider("latitude", value=DEFAULT_SPEC.latitude_range)
    ui.update_slider("longitude", value=DEFAULT_SPEC.longitude_range)
    ui.update_selectize("genera", selected=DEFAULT_GENERA)
    ui.update_checkbox("filter_neighbourhood", value=False)
    if NEIGHBOURHOOD_DEFAULT is not None:
        ui.update_select("neighbourhood", selected=NEIGHBOURHOOD_DEFAULT)
    if VARIANT.colour_picker:
        ui.update_text("outline_colour", value=VARIANT.outline_colour)


if VARIANT.tabbed:
    with ui.navset_tab(id="main_tabs"):
        with ui.nav_panel("Home"):
            ui.br()
            ui.p(
                "Welcome to the Vancouver Street Tree Planting app! This app allows "
                f"you to explore trees planted in Vancouver, BC city streets from {YEAR_SPAN}."
            )
            ui.p(
                'To explore trees by neighbourhood, try the "Filter by neighbourhood" '
                "option. To refine your search geographically, try using the "
                "Latitude/Longitude sliders. If you are interested in finding trees "
                'belonging to specific genera, click on the "genus" box to add any '
                "number of tree genera using the drop down menu!"
            )
            ui.p(
                "As you customize your inputs, your customized plot and table will "
                'update in their respective tabs. If you would like to download your '
                'plot or table, simply use the "Download" buttons to generate your '
                "own copy."
            )
            ui.p("Happy exploring!")

        with ui.nav_panel("Plot"):
            ui.br()
            ui.input_text(
                "outline_colour",
                "Select outline colour",
                value=VARIANT.outline_colour,
                placeholder="#RRGGBB",
            )
            ui.output_text("result_status")
            output_widget("planting_plot")
            ui.br()
            ui.download_button("download_plot", "Download Plot")

        with ui.nav_panel("Table"):
            ui.br()
            ui.output_data_frame("planted_table")
            ui.br()
            ui.download_button("download_table", "Download Table")
else:
    ui.output_text("result_status")
    output_widget("planting_plot")
    ui.br()
    with ui.div(class_="d-flex gap-2"):
        ui.download_button("download_plot", "Download Plot")
        ui.download_button("download_table", "Download Table")
    ui.br()
    ui.output_data_frame("planted_table")
