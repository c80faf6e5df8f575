"""
Filter utilities that apply the sidebar selections to the planting table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .config import (
    DEFAULT_NEIGHBOURHOOD,
    LATITUDE_BOUNDS,
    LONGITUDE_BOUNDS,
    TABLE_COLUMNS,
    AppVariant,
)


@dataclass(frozen=True)
class FilterSpec:
    genera: frozenset = field(default_factory=frozenset)
    neighbourhood_filter_enabled: bool = False
    neighbourhood: Optional[str] = None
    latitude_range: Tuple[float, float] = LATITUDE_BOUNDS
    longitude_range: Tuple[float, float] = LONGITUDE_BOUNDS

    @classmethod
    def from_inputs(
        cls,
        genera: Optional[Iterable[str]],
        neighbourhood_filter_enabled: bool,
        neighbourhood: Optional[str],
        latitude_range: Tuple[float, float],
        longitude_range: Tuple[float, float],
    ) -> "FilterSpec":
        """Build a spec from raw widget values (selectize gives tuples or None)."""
        return cls(
            genera=frozenset(genera or ()),
            neighbourhood_filter_enabled=bool(neighbourhood_filter_enabled),
            neighbourhood=neighbourhood or None,
            latitude_range=(float(latitude_range[0]), float(latitude_range[1])),
            longitude_range=(float(longitude_range[0]), float(longitude_range[1])),
        )


def default_filter_spec(variant: AppVariant) -> FilterSpec:
    return FilterSpec(
        genera=frozenset(variant.default_genera),
        neighbourhood_filter_enabled=False,
        neighbourhood=DEFAULT_NEIGHBOURHOOD,
    )


class ResultStatus(Enum):
    READY = "ready"
    EMPTY = "empty"
    NOT_READY = "not_ready"


@dataclass(frozen=True, eq=False)
class ResultSet:
    status: ResultStatus
    rows: pd.DataFrame

    @property
    def is_blank(self) -> bool:
        return self.status is not ResultStatus.READY

    def __len__(self) -> int:
        return len(self.rows)


def _blank(table: pd.DataFrame, status: ResultStatus) -> ResultSet:
    return ResultSet(status=status, rows=table.iloc[0:0][TABLE_COLUMNS].copy())


def apply_filters(table: pd.DataFrame, spec: FilterSpec) -> ResultSet:
    """
    Apply the current sidebar selections to the prepared planting table.

    Every predicate is an inclusive conjunction over the same table, so
    the surviving rows keep their original relative order (and index
    labels).  An unset neighbourhood while the neighbourhood filter is on
    gives ``NOT_READY``; a legitimate zero-row match gives ``EMPTY``.
    """
    if spec.neighbourhood_filter_enabled and spec.neighbourhood is None:
        return _blank(table, ResultStatus.NOT_READY)

    mask = table["genus"].isin(spec.genera)
    if spec.neighbourhood_filter_enabled:
        mask &= table["neighbourhood"] == spec.neighbourhood

    lat_min, lat_max = spec.latitude_range
    lon_min, lon_max = spec.longitude_range
    mask &= table["latitude"].between(lat_min, lat_max, inclusive="both")
    mask &= table["longitude"].between(lon_min, lon_max, inclusive="both")

    if not mask.any():
        return _blank(table, ResultStatus.EMPTY)
    return ResultSet(status=ResultStatus.READY, rows=table.loc[mask, TABLE_COLUMNS].copy())


def aggregate_by_year_genus(result: ResultSet) -> pd.DataFrame:
    """Count planted trees per (year, genus) for the histogram."""
    if result.is_blank:
        return pd.DataFrame(
            {
                "year": pd.Series(dtype="int64"),
                "genus": pd.Series(dtype="object"),
                "count": pd.Series(dtype="int64"),
            }
        )
    return (
        result.rows.groupby(["year", "genus"], as_index=False)
        .size()
        .rename(columns={"size": "count"})
        .sort_values(["year", "genus"], ignore_index=True)
    )


def genus_choices(table: pd.DataFrame) -> List[str]:
    return sorted(table["genus"].dropna().unique().tolist())


def neighbourhood_choices(table: pd.DataFrame) -> List[str]:
    return sorted(table["neighbourhood"].dropna().unique().tolist())
