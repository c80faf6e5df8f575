"""
Handles reading the raw street tree inventory from the Open Data Portal.
"""

import logging
from pathlib import Path

import pandas as pd

from .config import GEO_POINT_COLUMN, TREES_SEP, TREES_SOURCE

logger = logging.getLogger(__name__)


class DatasetLoadError(RuntimeError):
    """Raised when the raw tree dataset cannot be read."""


def _split_geo_point(df: pd.DataFrame) -> pd.DataFrame:
    """Expand a ``"lat, lon"`` column into ``latitude`` and ``longitude``."""
    parts = df[GEO_POINT_COLUMN].astype("string").str.split(",", n=1, expand=True)
    parts = parts.reindex(columns=[0, 1]).astype("string")
    df["latitude"] = pd.to_numeric(parts[0].str.strip(), errors="coerce").astype("float64")
    df["longitude"] = pd.to_numeric(parts[1].str.strip(), errors="coerce").astype("float64")
    return df.drop(columns=[GEO_POINT_COLUMN])


def load_raw_trees(source: str | Path = TREES_SOURCE, sep: str = TREES_SEP) -> pd.DataFrame:
    """Read the raw tree CSV and normalise its column names.

    Newer portal exports ship upper-case headers and a single
    ``geo_point_2d`` column; older ones (and the ``datateachr`` copy) carry
    lower-case ``latitude`` / ``longitude`` columns.  Both come out of this
    function with the same lower-case layout.
    """
    logger.info("Reading tree inventory from %s", source)
    try:
        df = pd.read_csv(source, sep=sep, low_memory=False)
    except pd.errors.EmptyDataError:
        logger.warning("Tree source %s is empty", source)
        return pd.DataFrame()
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        raise DatasetLoadError(f"Could not read tree dataset from {source}: {exc}") from exc

    df.columns = [str(col).strip().lower() for col in df.columns]
    has_coords = {"latitude", "longitude"}.issubset(df.columns)
    if not has_coords and GEO_POINT_COLUMN in df.columns:
        df = _split_geo_point(df)

    logger.info("Read %d raw tree rows", len(df))
    return df
