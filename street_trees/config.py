"""
Configuration constants for the street tree planting dashboard.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
# City of Vancouver Open Data Portal export of the street tree inventory.
TREES_SOURCE: str = os.getenv(
    "TREES_SOURCE",
    "https://opendata.vancouver.ca/api/explore/v2.1/catalog/datasets/"
    "public-trees/exports/csv?lang=en&use_labels=false&delimiter=%3B",
)
TREES_SEP: str = os.getenv("TREES_SEP", ";")

DATA_SOURCE_LABEL: str = "City of Vancouver Open Data Portal"
DATA_SOURCE_URL: str = (
    "https://opendata.vancouver.ca/explore/dataset/street-trees/information/"
    "?disjunctive.species_name&disjunctive.common_name"
    "&disjunctive.on_street&disjunctive.neighbourhood_name"
)

# Source column -> prepared column
COLUMN_RENAMES: Dict[str, str] = {
    "tree_id": "id",
    "genus_name": "genus",
    "species_name": "species",
    "neighbourhood_name": "neighbourhood",
}
DATE_COLUMN: str = "date_planted"
GEO_POINT_COLUMN: str = "geo_point_2d"

TABLE_COLUMNS: List[str] = [
    "id",
    "genus",
    "species",
    "neighbourhood",
    "latitude",
    "longitude",
    "year",
]

# ======================================================
#  UI DEFAULTS
# ======================================================
LATITUDE_BOUNDS: Tuple[float, float] = (49.2000, 49.2900)
LONGITUDE_BOUNDS: Tuple[float, float] = (-123.2, -123.0)
DEFAULT_NEIGHBOURHOOD: str = "HASTINGS-SUNRISE"

PLOT_EXPORT_WIDTH: int = 1000
PLOT_EXPORT_HEIGHT: int = 700
PLOT_FONT_SIZE: int = 20

DEFAULT_VARIANT: str = os.getenv("TREES_APP_VARIANT", "v1")


@dataclass(frozen=True)
class AppVariant:
    name: str
    title: str
    default_genera: Tuple[str, ...]
    palette: str
    y_axis_label: str
    outline_colour: str
    colour_picker: bool = False
    tabbed: bool = False
    theme: Optional[str] = None


VARIANTS: Dict[str, AppVariant] = {
    "v1": AppVariant(
        name="v1",
        title="Vancouver Street Tree Planting",
        default_genera=("ACER", "PRUNUS", "FRAXINUS"),
        palette="PiYG",
        y_axis_label="Number of trees planted",
        outline_colour="#000000",
    ),
    "v2": AppVariant(
        name="v2",
        title="Vancouver Street Tree Planting",
        default_genera=("PRUNUS",),
        palette="Greens",
        y_axis_label="Number of trees",
        outline_colour="#AF37D4",
        colour_picker=True,
        tabbed=True,
        theme="flatly",
    ),
}


def resolve_variant(name: Optional[str] = None) -> AppVariant:
    """Look up an app variant by name (defaults to ``TREES_APP_VARIANT``)."""
    key = (name or DEFAULT_VARIANT).strip().lower()
    try:
        return VARIANTS[key]
    except KeyError:
        raise ValueError(
            f"Unknown app variant {key!r}; expected one of {sorted(VARIANTS)}."
        ) from None
