"""Pytest configuration and shared fixtures for the tree dashboard tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest


def pytest_sessionstart() -> None:
    """Add the project root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


@pytest.fixture
def scenario_table() -> pd.DataFrame:
    """Three prepared records: two ACER and one PRUNUS."""
    return pd.DataFrame(
        {
            "id": [101, 102, 103],
            "genus": ["ACER", "PRUNUS", "ACER"],
            "species": ["RUBRUM", "SERRULATA", "PLATANOIDES"],
            "neighbourhood": ["HASTINGS-SUNRISE", "KITSILANO", "HASTINGS-SUNRISE"],
            "latitude": [49.25, 49.25, 49.28],
            "longitude": [-123.10, -123.10, -123.05],
            "year": [2000, 2001, 2000],
        }
    )


@pytest.fixture
def raw_trees() -> pd.DataFrame:
    """Raw inventory rows in the lower-case ``datateachr`` layout."""
    return pd.DataFrame(
        {
            "tree_id": [1, 2, 3, 4, 5, 6],
            "civic_number": [100, 200, 300, 400, 500, 600],
            "std_street": ["W 10TH AV"] * 6,
            "genus_name": ["ACER", "PRUNUS", "ACER", "FRAXINUS", "ACER", "PRUNUS"],
            "species_name": ["RUBRUM", "SERRULATA", "RUBRUM", "AMERICANA", "CAMPESTRE", "SERRULATA"],
            "neighbourhood_name": [
                "KITSILANO",
                "KITSILANO",
                "HASTINGS-SUNRISE",
                "MARPOLE",
                "MARPOLE",
                "KITSILANO",
            ],
            "date_planted": [
                "1999-01-13",
                None,
                "2005-06-30",
                "not a date",
                "2010-11-02",
                "2012-03-04",
            ],
            "latitude": [49.26, 49.27, 49.28, 49.21, None, 49.25],
            "longitude": [-123.15, -123.15, -123.04, -123.12, -123.11, -123.16],
        }
    )
