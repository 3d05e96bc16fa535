"""Catalog snapshot build pipeline.

This module loads the raw catalog tables from CSV, normalizes them into a
CatalogSnapshot and saves the snapshot where the API store loads it from.
"""

import logging

from src.catalog.snapshot import CatalogSnapshot, build_snapshot
from src.catalog.utils import load_catalog_tables, save_snapshot
from src.config import DEFAULT_CSV_DIR, DEFAULT_SNAPSHOT_DIR

# Configure module logger
logger = logging.getLogger(__name__)


def build_catalog(
    csv_dir: str = DEFAULT_CSV_DIR,
    output_dir: str = DEFAULT_SNAPSHOT_DIR,
) -> CatalogSnapshot:
    """Build and persist a catalog snapshot from CSV tables.

    This is the main entry point for catalog builds: loading the tables,
    normalizing prices, joining names, and saving the snapshot.

    Args:
        csv_dir: Directory with the five catalog CSV tables.
        output_dir: Directory where the snapshot will be saved.

    Returns:
        The built CatalogSnapshot.

    Raises:
        FileNotFoundError: If the CSV directory or a table is missing.
        ValueError: If a table is missing required columns.
        OSError: If unable to save the snapshot.

    Example:
        >>> snapshot = build_catalog("data/catalog", output_dir="catalog")
        >>> print(f"Built snapshot with {snapshot.product_count} products")
    """
    logger.info("=" * 60)
    logger.info("Starting catalog snapshot build")
    logger.info("=" * 60)

    try:
        tables = load_catalog_tables(csv_dir)

        snapshot = build_snapshot(tables)
        if snapshot.product_count == 0:
            logger.warning("Catalog snapshot has no products")

        dropped = len(tables["products"]) - snapshot.product_count
        if dropped:
            logger.warning(
                f"{dropped} products left out (malformed id or unknown category/brand)"
            )

        save_snapshot(snapshot, output_dir)

        logger.info("=" * 60)
        logger.info("Catalog build completed successfully!")
        logger.info("=" * 60)

        return snapshot

    except Exception as e:
        logger.error(f"Catalog build failed: {e}", exc_info=True)
        raise


def main() -> None:
    """Main entry point for command-line execution."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        build_catalog(DEFAULT_CSV_DIR, DEFAULT_SNAPSHOT_DIR)
    except Exception as e:
        logger.error(f"Failed to build catalog: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
