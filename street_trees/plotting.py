import re

import pandas as pd
import plotly.colors as pc
import plotly.graph_objects as go

from .config import PLOT_FONT_SIZE


# ============================================================
# Configuration / constants
# ============================================================

PALETTES: dict[str, list[str]] = {
    "PiYG": pc.diverging.PiYG,
    "Greens": pc.sequential.Greens,
}

# Skip the near-white end of sequential scales so bars stay visible.
PALETTE_LOW: float = 0.15

HEX_COLOUR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

HOVER_TEMPLATE = (
    "Genus: %{customdata}<br>"
    "Year: %{x}<br>"
    "Trees planted: %{y:,}<extra></extra>"
)


# ============================================================
# Helper functions
# ============================================================


def resolve_outline_colour(value: str | None, default: str) -> str:
    """
    Return ``value`` if it is a ``#rgb``/``#rrggbb`` hex colour, else ``default``.
    """
    if value is None:
        return default
    value = value.strip()
    return value if HEX_COLOUR.match(value) else default


def _genus_colours(genera: list[str], palette: str) -> dict[str, str]:
    """
    Sample one colour per genus, evenly spread along the named scale.
    """
    if not genera:
        return {}
    colorscale = pc.make_colorscale(PALETTES[palette])
    if len(genera) == 1:
        points = [1.0]
    else:
        step = (1.0 - PALETTE_LOW) / (len(genera) - 1)
        points = [PALETTE_LOW + i * step for i in range(len(genera))]
    return dict(zip(genera, pc.sample_colorscale(colorscale, points)))


# ============================================================
# Main plotting function
# ============================================================


def create_planting_plot(
    counts: pd.DataFrame,
    *,
    palette: str = "PiYG",
    outline_colour: str = "#000000",
    y_axis_label: str = "Number of trees planted",
    font_size: int = PLOT_FONT_SIZE,
) -> go.Figure:
    """
    Build the stacked planting histogram.

    Parameters
    ----------
    counts : pd.DataFrame
        Output of :func:`street_trees.filters.aggregate_by_year_genus`
        with columns 'year', 'genus' and 'count'.
    palette : str, default "PiYG"
        Name of a key in ``PALETTES``.
    outline_colour : str, default "#000000"
        Bar outline colour.
    y_axis_label : str, default "Number of trees planted"
        Y-axis title.
    font_size : int
        Base font size for the whole figure.

    Returns
    -------
    go.Figure
        One bar trace per genus stacked by year.  With no counts the
        figure keeps its layout but has no traces.
    """
    fig = go.Figure()

    genera = sorted(counts["genus"].unique()) if not counts.empty else []
    colours = _genus_colours(genera, palette)

    for genus in genera:
        sub = counts[counts["genus"] == genus]
        fig.add_trace(
            go.Bar(
                x=sub["year"],
                y=sub["count"],
                name=genus,
                marker=dict(
                    color=colours[genus],
                    line=dict(color=outline_colour, width=1),
                ),
                customdata=[genus] * len(sub),
                hovertemplate=HOVER_TEMPLATE,
            )
        )

    fig.update_xaxes(title_text="Year", tickformat="d")
    fig.update_yaxes(title_text=y_axis_label, tickformat=",", rangemode="tozero")
    fig.update_layout(
        template="simple_white",
        barmode="stack",
        bargap=0,
        font=dict(size=font_size),
        legend=dict(title="genus"),
        margin=dict(t=40, l=80, r=40, b=60),
    )
    return fig
