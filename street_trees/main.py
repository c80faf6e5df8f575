"""
Build (or rebuild) the on-disk planting table cache used by the app.

Usage:
    street-trees-build [--source PATH_OR_URL] [--sep ";"] [--force]
"""

import argparse
import logging

from . import data_manager, pipeline
from .config import TREES_SEP, TREES_SOURCE
from .filters import genus_choices, neighbourhood_choices

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Prepare the Vancouver street tree planting table."
    )
    parser.add_argument(
        "--source",
        default=None,
        help=f"Path or URL to the raw tree CSV (default: {TREES_SOURCE}).",
    )
    parser.add_argument(
        "--sep",
        default=TREES_SEP,
        help=f"Delimiter used in the raw tree CSV (default: '{TREES_SEP}').",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Ignore an existing cache file and rebuild it.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)

    if args.source is None:
        table = data_manager.load_trees(force_recompute=args.force)
    else:
        # An explicit source always bypasses the cache lookup.
        table = pipeline.run_pipeline(source=args.source, sep=args.sep)
        data_manager.save_trees(table)

    logger.info("--- TREE TABLE READY ---")
    if table.empty:
        logger.info("Cache %s holds no rows", data_manager.TREES_CACHE)
        return
    logger.info(
        "Rows: %d | Years: %d–%d | Genera: %d | Neighbourhoods: %d",
        len(table),
        table["year"].min(),
        table["year"].max(),
        len(genus_choices(table)),
        len(neighbourhood_choices(table)),
    )
    logger.info("Saved to %s", data_manager.TREES_CACHE)


if __name__ == "__main__":
    main()
