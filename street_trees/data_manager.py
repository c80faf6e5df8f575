"""Data manager for loading and caching the prepared planting table.

Reading the full city inventory over the network takes a while, so the
prepared table is persisted to disk after the first run and reused on
later starts.  The cache file name includes a version tag to make it
easy to invalidate caches when the preparation logic changes.
"""

import os
import tempfile
import logging
from pathlib import Path
from functools import lru_cache

import pandas as pd

from . import pipeline
from .config import TABLE_COLUMNS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Cache setup
# ---------------------------------------------------------------------------
# Bump whenever ``pipeline.prepare_trees`` changes the table it produces.
CACHE_VERSION: str = "v1"


def _resolve_cache_dir() -> Path:
    """Select a writable directory for caching.

    The lookup order is:

    1. The ``DATA_CACHE_DIR`` environment variable, if set.
    2. A ``data`` folder at the repository root.
    3. A temporary directory in ``/tmp``.

    Each candidate path is tested for writability by attempting to
    create and delete a sentinel file.  The first path that succeeds
    is returned.
    """
    candidates: list[Path] = []
    env = os.getenv("DATA_CACHE_DIR")
    if env:
        candidates.append(Path(env).expanduser().resolve())

    candidates.append(Path(__file__).resolve().parent.parent / "data")
    candidates.append(Path(tempfile.gettempdir()) / "street_trees_cache")

    for path in candidates:
        try:
            path.mkdir(parents=True, exist_ok=True)
            test_file = path / ".write_test"
            test_file.write_text("ok", encoding="utf-8")
            test_file.unlink()
            return path
        except OSError:
            logger.debug("Cache directory %s is not writable", path)
            continue

    fallback = Path(tempfile.gettempdir()) / "street_trees_cache"
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


DATA_DIR: Path = _resolve_cache_dir()
TREES_CACHE: Path = DATA_DIR / f"trees_{CACHE_VERSION}.csv"


def _atomic_to_csv(df: pd.DataFrame, path: Path) -> None:
    """Write a DataFrame to CSV via a temporary file and rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    df.to_csv(tmp_path, index=False)
    tmp_path.replace(path)


def _read_cached_table(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path)
    pipeline.ensure_columns(df, TABLE_COLUMNS)
    if df.empty:
        return pipeline.empty_table()
    return df[TABLE_COLUMNS]


def save_trees(table: pd.DataFrame) -> Path:
    """Persist a prepared table as the current cache file."""
    _atomic_to_csv(table, TREES_CACHE)
    return TREES_CACHE


@lru_cache(maxsize=1)
def _compute_table() -> pd.DataFrame:
    """Runs the preparation pipeline against the configured source."""
    return pipeline.run_pipeline()


def load_trees(force_recompute: bool = False) -> pd.DataFrame:
    """
    Load the prepared table from disk cache if available, otherwise
    compute and save it.

    Parameters
    ----------
    force_recompute : bool, optional
        If ``True``, rebuild the table even if a cache file exists.

    Returns
    -------
    pd.DataFrame
        The prepared planting table (see :func:`pipeline.prepare_trees`).

    Raises
    ------
    street_trees.trees_fetch.DatasetLoadError
        If the cache is unusable and the source cannot be read.
    """
    if not force_recompute and TREES_CACHE.exists():
        logger.info("Loading tree table from cache directory %s", DATA_DIR)
        try:
            return _read_cached_table(TREES_CACHE)
        except (OSError, ValueError, KeyError) as exc:
            logger.warning(
                "Error reading cache file %s: %s; falling back to recompute",
                TREES_CACHE,
                exc,
            )

    if force_recompute:
        _compute_table.cache_clear()

    logger.info("Computing tree table – this may take a while…")
    table = _compute_table()

    try:
        save_trees(table)
        logger.info("Cache updated: %s", TREES_CACHE.name)
    except OSError as exc:
        logger.warning("Could not write cache file: %s", exc)

    return table
