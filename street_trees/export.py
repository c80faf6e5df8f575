"""
Serialisers behind the "Download Table" and "Download Plot" buttons.
"""

import plotly.graph_objects as go

from .config import PLOT_EXPORT_HEIGHT, PLOT_EXPORT_WIDTH, TABLE_COLUMNS
from .filters import ResultSet

TABLE_EXPORT_FILENAME: str = "trees-results.csv"
PLOT_EXPORT_FILENAME: str = "plot.png"


def results_to_csv(result: ResultSet) -> str:
    """Render the filtered rows as CSV; blank results give a header-only file."""
    return result.rows[TABLE_COLUMNS].to_csv(index=False)


def plot_to_png(
    figure: go.Figure,
    *,
    width: int = PLOT_EXPORT_WIDTH,
    height: int = PLOT_EXPORT_HEIGHT,
) -> bytes:
    """Rasterise the chart at a fixed size (needs the ``kaleido`` engine)."""
    return figure.to_image(format="png", width=width, height=height)
