"""Unit tests for the filter-and-aggregate pipeline."""

from __future__ import annotations

import pandas as pd
import pytest

from street_trees.config import LATITUDE_BOUNDS, LONGITUDE_BOUNDS, TABLE_COLUMNS, VARIANTS
from street_trees.filters import (
    FilterSpec,
    ResultStatus,
    aggregate_by_year_genus,
    apply_filters,
    default_filter_spec,
    genus_choices,
    neighbourhood_choices,
)


def _spec(**overrides) -> FilterSpec:
    values = dict(
        genera=frozenset({"ACER"}),
        neighbourhood_filter_enabled=False,
        neighbourhood=None,
        latitude_range=(49.2, 49.29),
        longitude_range=(-123.2, -123.0),
    )
    values.update(overrides)
    return FilterSpec(**values)


def test_genus_filter_keeps_matching_records(scenario_table: pd.DataFrame) -> None:
    """Selecting ACER keeps both ACER records and counts them per year."""
    result = apply_filters(scenario_table, _spec())

    assert result.status is ResultStatus.READY
    assert result.rows["id"].tolist() == [101, 103]
    counts = aggregate_by_year_genus(result)
    assert counts.to_dict("records") == [{"year": 2000, "genus": "ACER", "count": 2}]


def test_no_match_gives_empty_marker(scenario_table: pd.DataFrame) -> None:
    """PRUNUS outside the latitude window is a legitimate zero-row result."""
    result = apply_filters(
        scenario_table,
        _spec(genera=frozenset({"PRUNUS"}), latitude_range=(49.26, 49.29)),
    )

    assert result.status is ResultStatus.EMPTY
    assert result.is_blank
    assert len(result) == 0
    assert aggregate_by_year_genus(result).empty


def test_unset_neighbourhood_gives_not_ready_marker(scenario_table: pd.DataFrame) -> None:
    """An uninitialised neighbourhood selector is distinct from an empty match."""
    result = apply_filters(
        scenario_table, _spec(neighbourhood_filter_enabled=True, neighbourhood=None)
    )

    assert result.status is ResultStatus.NOT_READY
    assert result.status is not ResultStatus.EMPTY
    assert result.is_blank
    assert list(result.rows.columns) == TABLE_COLUMNS


def test_unset_neighbourhood_is_ignored_when_filter_disabled(scenario_table: pd.DataFrame) -> None:
    """Without the neighbourhood filter the selector value does not matter."""
    result = apply_filters(scenario_table, _spec(neighbourhood=None))

    assert result.status is ResultStatus.READY


def test_neighbourhood_filter_keeps_only_that_neighbourhood(scenario_table: pd.DataFrame) -> None:
    """An enabled neighbourhood filter is an equality predicate."""
    result = apply_filters(
        scenario_table,
        _spec(
            genera=frozenset({"ACER", "PRUNUS"}),
            neighbourhood_filter_enabled=True,
            neighbourhood="KITSILANO",
        ),
    )

    assert result.rows["id"].tolist() == [102]


def test_empty_genus_selection_matches_nothing(scenario_table: pd.DataFrame) -> None:
    """Clearing every genus empties the result instead of lifting the constraint."""
    result = apply_filters(scenario_table, _spec(genera=frozenset()))

    assert result.status is ResultStatus.EMPTY


def test_single_point_range_matches_exact_coordinate(scenario_table: pd.DataFrame) -> None:
    """min == max keeps only records sitting exactly on that coordinate."""
    result = apply_filters(
        scenario_table,
        _spec(
            genera=frozenset({"ACER", "PRUNUS"}),
            latitude_range=(49.25, 49.25),
            longitude_range=(-123.10, -123.10),
        ),
    )

    assert result.rows["id"].tolist() == [101, 102]


def test_inverted_range_gives_empty_result(scenario_table: pd.DataFrame) -> None:
    """A min greater than max never raises."""
    result = apply_filters(scenario_table, _spec(latitude_range=(49.29, 49.2)))

    assert result.status is ResultStatus.EMPTY


@pytest.mark.parametrize(
    "genera",
    [{"ACER"}, {"PRUNUS"}, {"ACER", "PRUNUS"}, {"FRAXINUS"}],
)
@pytest.mark.parametrize("lat_range", [(49.2, 49.29), (49.26, 49.29), (49.2, 49.25)])
@pytest.mark.parametrize("lon_range", [(-123.2, -123.0), (-123.2, -123.08), (-123.06, -123.0)])
@pytest.mark.parametrize("neighbourhood", [None, "HASTINGS-SUNRISE", "KITSILANO"])
def test_result_rows_satisfy_predicates_and_keep_order(
    scenario_table: pd.DataFrame,
    genera: set,
    lat_range: tuple,
    lon_range: tuple,
    neighbourhood: str | None,
) -> None:
    """Every returned row passes all active predicates and appears in table order."""
    result = apply_filters(
        scenario_table,
        _spec(
            genera=frozenset(genera),
            latitude_range=lat_range,
            longitude_range=lon_range,
            neighbourhood_filter_enabled=neighbourhood is not None,
            neighbourhood=neighbourhood,
        ),
    )

    rows = result.rows
    assert result.status is not ResultStatus.NOT_READY
    assert rows["genus"].isin(genera).all()
    assert rows["latitude"].between(*lat_range).all()
    assert rows["longitude"].between(*lon_range).all()
    if neighbourhood is not None:
        assert (rows["neighbourhood"] == neighbourhood).all()
    assert rows.index.isin(scenario_table.index).all()
    assert rows.index.is_monotonic_increasing
    pd.testing.assert_frame_equal(rows, scenario_table.loc[rows.index])
    expected = scenario_table[
        scenario_table["genus"].isin(genera)
        & scenario_table["latitude"].between(*lat_range)
        & scenario_table["longitude"].between(*lon_range)
        & (True if neighbourhood is None else scenario_table["neighbourhood"] == neighbourhood)
    ]
    assert rows["id"].tolist() == expected["id"].tolist()


def test_apply_filters_is_idempotent_and_pure(scenario_table: pd.DataFrame) -> None:
    """Same spec, same table, same result; the table is left untouched."""
    before = scenario_table.copy()

    first = apply_filters(scenario_table, _spec())
    second = apply_filters(scenario_table, _spec())

    pd.testing.assert_frame_equal(first.rows, second.rows)
    assert first.status is second.status
    pd.testing.assert_frame_equal(scenario_table, before)


def test_aggregate_counts_by_year_and_genus(scenario_table: pd.DataFrame) -> None:
    """Counts are grouped by integer year and genus, sorted by year."""
    result = apply_filters(scenario_table, _spec(genera=frozenset({"ACER", "PRUNUS"})))

    counts = aggregate_by_year_genus(result)

    assert counts.to_dict("records") == [
        {"year": 2000, "genus": "ACER", "count": 2},
        {"year": 2001, "genus": "PRUNUS", "count": 1},
    ]


def test_from_inputs_normalises_widget_values() -> None:
    """Selectize tuples, empty strings and int slider values are normalised."""
    spec = FilterSpec.from_inputs(
        genera=None,
        neighbourhood_filter_enabled=True,
        neighbourhood="",
        latitude_range=(49, 50),
        longitude_range=[-124, -123],
    )

    assert spec.genera == frozenset()
    assert spec.neighbourhood is None
    assert spec.latitude_range == (49.0, 50.0)
    assert spec.longitude_range == (-124.0, -123.0)


def test_default_filter_spec_follows_variant() -> None:
    """Variant defaults seed the genus selection; ranges span the full bounds."""
    v1 = default_filter_spec(VARIANTS["v1"])
    v2 = default_filter_spec(VARIANTS["v2"])

    assert v1.genera == frozenset({"ACER", "PRUNUS", "FRAXINUS"})
    assert v2.genera == frozenset({"PRUNUS"})
    assert v1.neighbourhood_filter_enabled is False
    assert v1.latitude_range == LATITUDE_BOUNDS
    assert v1.longitude_range == LONGITUDE_BOUNDS


def test_choices_are_sorted_and_distinct(scenario_table: pd.DataFrame) -> None:
    """Selector choices list every distinct value once, sorted."""
    assert genus_choices(scenario_table) == ["ACER", "PRUNUS"]
    assert neighbourhood_choices(scenario_table) == ["HASTINGS-SUNRISE", "KITSILANO"]
