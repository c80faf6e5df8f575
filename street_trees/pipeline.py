"""Dataset preparation: turn the raw tree inventory into the planting table.

The raw inventory lists every street tree in the city with a few dozen
attributes.  The dashboard only needs where and when each tree was
planted and what it is, so :func:`prepare_trees` derives a planting
``year``, drops rows that cannot be placed on the chart or the map
sliders, and projects the result to a fixed column set.

The primary entry point is :func:`run_pipeline`, which reads the source
and returns the prepared table.
"""

from __future__ import annotations

from .config import (
    COLUMN_RENAMES,
    DATE_COLUMN,
    TABLE_COLUMNS,
    TREES_SEP,
    TREES_SOURCE,
)
from .trees_fetch import load_raw_trees

from pathlib import Path
from typing import List

import logging
import pandas as pd

# Module‑level logger
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def empty_table() -> pd.DataFrame:
    """Return a zero-row table with the prepared column layout."""
    return pd.DataFrame(
        {
            "id": pd.Series(dtype="int64"),
            "genus": pd.Series(dtype="object"),
            "species": pd.Series(dtype="object"),
            "neighbourhood": pd.Series(dtype="object"),
            "latitude": pd.Series(dtype="float64"),
            "longitude": pd.Series(dtype="float64"),
            "year": pd.Series(dtype="int64"),
        }
    )[TABLE_COLUMNS]


def extract_year(dates: pd.Series) -> pd.Series:
    """Return the calendar year of each planting date.

    Parameters
    ----------
    dates : pd.Series
        Dates as ``datetime64`` values, strings or numbers.  Strings may
        mix ``YYYY-MM-DD`` and ``YYYYMMDD`` spellings; numbers are read as
        ``YYYYMMDD`` (a CSV column with blanks arrives as ``float64``).

    Returns
    -------
    pd.Series
        Nullable ``Int64`` years; missing or unparseable dates map to
        ``<NA>``.
    """
    if pd.api.types.is_datetime64_any_dtype(dates):
        parsed = dates
    elif pd.api.types.is_numeric_dtype(dates):
        # 19990113.0 -> "19990113"
        compact = dates.where(dates % 1 == 0).astype("Int64").astype("string")
        parsed = pd.to_datetime(compact, errors="coerce", format="%Y%m%d")
    else:
        parsed = pd.to_datetime(dates.astype("string"), errors="coerce", format="mixed")
    return parsed.dt.year.astype("Int64")


# ---------------------------------------------------------------------------
# Preparation
# ---------------------------------------------------------------------------


def prepare_trees(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean the raw inventory into the planting table.

    Steps:

    * Rename the source identifier and category columns.
    * Derive ``year`` from ``date_planted``.
    * Drop rows without a year, then rows without coordinates.
    * Keep only the columns in ``config.TABLE_COLUMNS``.
    * Keep the first row for any repeated ``id``.

    Parameters
    ----------
    raw : pd.DataFrame
        Raw inventory as returned by
        :func:`street_trees.trees_fetch.load_raw_trees`.

    Returns
    -------
    pd.DataFrame
        The prepared table, in source order with a fresh ``RangeIndex``.
        An input without rows gives an empty table rather than an error.
    """
    if raw.empty:
        return empty_table()

    df = raw.rename(columns=COLUMN_RENAMES).copy()
    ensure_columns(df, [c for c in TABLE_COLUMNS if c != "year"] + [DATE_COLUMN])

    df["year"] = extract_year(df[DATE_COLUMN])
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")

    n_raw = len(df)
    df = df.dropna(subset=["year"])
    n_dated = len(df)
    df = df.dropna(subset=["latitude", "longitude"])
    logger.info(
        "Dropped %d rows without a planting year and %d rows without coordinates",
        n_raw - n_dated,
        n_dated - len(df),
    )

    df = df[TABLE_COLUMNS]
    duplicated = df["id"].duplicated(keep="first")
    if duplicated.any():
        logger.warning("Dropping %d rows with a repeated tree id", int(duplicated.sum()))
        df = df.loc[~duplicated]

    if df.empty:
        return empty_table()

    df = df.astype({"year": "int64", "latitude": "float64", "longitude": "float64"})
    return df.reset_index(drop=True)


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def run_pipeline(
    *,
    source: str | Path = TREES_SOURCE,
    sep: str = TREES_SEP,
) -> pd.DataFrame:
    """Load the raw inventory and return the prepared planting table.

    Parameters
    ----------
    source : str or Path, optional
        Location of the raw tree CSV.  Defaults to ``config.TREES_SOURCE``.
    sep : str, optional
        Column delimiter of the raw CSV.  Defaults to ``config.TREES_SEP``.

    Returns
    -------
    pd.DataFrame
        Output of :func:`prepare_trees`.
    """
    raw = load_raw_trees(source, sep=sep)
    table = prepare_trees(raw)
    logger.info("Prepared %d planting records from %d raw rows", len(table), len(raw))
    return table
