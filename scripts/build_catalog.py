"""Command-line interface for building the catalog snapshot.

This script builds the snapshot the ShopCatalog API serves from a directory
of raw catalog CSV tables.

Example:
    Build with default settings:
        $ python scripts/build_catalog.py data/catalog

    Build into a custom directory:
        $ python scripts/build_catalog.py data/catalog --output-dir catalog/production
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.catalog.build import build_catalog
from src.catalog.facets import compute_facets
from src.config import DEFAULT_SNAPSHOT_DIR


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise, use INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Build the catalog snapshot from CSV tables.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build with default settings
  python scripts/build_catalog.py data/catalog

  # Build into a custom output directory with verbose logging
  python scripts/build_catalog.py data/catalog --output-dir catalog/prod --verbose
        """,
    )

    parser.add_argument(
        "csv_dir",
        type=str,
        help="Directory with products.csv, categories.csv, brands.csv, "
        "product_pictures.csv and product_sizes.csv",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=DEFAULT_SNAPSHOT_DIR,
        help=f"Directory where the snapshot will be saved (default: {DEFAULT_SNAPSHOT_DIR})",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args()


def validate_csv_dir(csv_dir: str) -> None:
    """Validate that the CSV directory exists.

    Raises:
        FileNotFoundError: If the directory does not exist.
        ValueError: If the path is not a directory.
    """
    path = Path(csv_dir)
    if not path.exists():
        raise FileNotFoundError(f"CSV directory not found: {csv_dir}")
    if not path.is_dir():
        raise ValueError(f"Path is not a directory: {csv_dir}")


def main() -> int:
    """Main entry point for the build script.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    try:
        args = parse_arguments()

        setup_logging(verbose=args.verbose)
        logger = logging.getLogger(__name__)

        logger.info(f"Validating CSV directory: {args.csv_dir}")
        validate_csv_dir(args.csv_dir)

        snapshot = build_catalog(csv_dir=args.csv_dir, output_dir=args.output_dir)
        facets = compute_facets(snapshot)

        logger.info("=" * 70)
        logger.info("Build Summary")
        logger.info("=" * 70)
        logger.info(f"Products:    {snapshot.product_count}")
        logger.info(f"Categories:  {len(facets.categories)}")
        logger.info(f"Brands:      {len(facets.brands)}")
        logger.info(
            f"Price range: {facets.price_range.min_price} - {facets.price_range.max_price}"
        )
        logger.info(f"Snapshot saved to: {Path(args.output_dir).absolute()}")
        logger.info("=" * 70)
        return 0

    except FileNotFoundError as e:
        logging.error(f"File error: {e}")
        return 1
    except ValueError as e:
        logging.error(f"Validation error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Build interrupted by user")
        return 130
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
