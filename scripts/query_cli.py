"""CLI script for querying the catalog snapshot.

Useful for testing and evaluation. Runs a listing query or a similar-product
lookup against a built snapshot and prints the result to the console.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.api.exceptions import ShopCatalogException
from src.catalog.models import CatalogRequest, Product
from src.catalog.query import query_catalog
from src.catalog.recommend import recommend_similar_products
from src.catalog.store import CatalogStore
from src.config import DEFAULT_SNAPSHOT_DIR

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def format_product(product: Product) -> str:
    """One display line for a product."""
    price = f"{product.price:.2f}"
    if product.discount_price is not None:
        price = f"{product.discount_price:.2f} (was {product.price:.2f})"
    return (
        f"  [{product.id}] {product.product_name} | {product.brand_name} | "
        f"{product.category_name} | {price}"
    )


def print_products(products: List[Product]) -> None:
    for product in products:
        print(format_product(product))


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Query the product catalog snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/query_cli.py list --category Violins --sort priceAsc
  python scripts/query_cli.py list --search yamaha --min-price 1000 --page 2
  python scripts/query_cli.py recommend 42
        """
    )

    parser.add_argument(
        "--snapshot-dir",
        type=str,
        default=DEFAULT_SNAPSHOT_DIR,
        help=f"Directory containing the catalog snapshot (default: {DEFAULT_SNAPSHOT_DIR})"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List one page of products")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--limit", type=int, default=9)
    list_parser.add_argument("--search", type=str, default="")
    list_parser.add_argument("--category", type=str, default=None)
    list_parser.add_argument("--brand", type=str, default=None)
    list_parser.add_argument(
        "--sort",
        type=str,
        default="default",
        help="default, priceAsc, priceDesc, oldest or newest"
    )
    list_parser.add_argument("--min-price", type=str, default=None)
    list_parser.add_argument("--max-price", type=str, default=None)

    recommend_parser = subparsers.add_parser("recommend", help="Similar products for a product")
    recommend_parser.add_argument("product_id", type=int, help="Source product ID")
    recommend_parser.add_argument(
        "--limit",
        type=int,
        default=4,
        help="Number of recommendations to return (default: 4)"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    store = CatalogStore(args.snapshot_dir)

    try:
        snapshot = store.snapshot()

        if args.command == "list":
            request = CatalogRequest(
                page=args.page,
                limit=args.limit,
                search=args.search,
                category=args.category,
                brand=args.brand,
                sort=args.sort,
                min_price=args.min_price,
                max_price=args.max_price,
            )
            page = query_catalog(snapshot, request)
            print(
                f"\nPage {request.page} of {page.total_pages}: "
                f"{page.total} matching of {page.overall_total} products"
            )
            print_products(page.products)
        else:
            recommendations = recommend_similar_products(
                snapshot, args.product_id, limit=args.limit
            )
            print(f"\nProducts similar to {args.product_id}:")
            if not recommendations:
                print("  (none)")
            print_products(recommendations)

    except ShopCatalogException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()


if __name__ == "__main__":
    main()
