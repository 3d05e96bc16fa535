"""Generate a fake storefront catalog for testing and development.

This module creates the five raw catalog tables (categories, brands,
products, product pictures and product sizes) as CSV files, with a mix of
discounted and full-price products so every filter has something to match.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_catalog
        tables = generate_fake_catalog(num_products=200)
"""

import random
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

# Default configuration constants
DEFAULT_NUM_PRODUCTS = 120
DEFAULT_CATEGORIES = ["Violins", "Violas", "Cellos", "Bows", "Strings", "Cases"]
DEFAULT_BRANDS = ["Yamaha", "Stentor", "Eastman", "Pirastro", "Thomastik", "Gewa"]
DEFAULT_MIN_PRICE = 500
DEFAULT_MAX_PRICE = 50000
DISCOUNT_PROBABILITY = 0.3
SIZED_CATEGORIES = {"Violins", "Violas", "Cellos"}
SIZE_LABELS = ["1/4", "1/2", "3/4", "4/4"]


def generate_fake_catalog(
    num_products: int = DEFAULT_NUM_PRODUCTS,
    categories: Optional[list] = None,
    brands: Optional[list] = None,
    random_seed: Optional[int] = None,
) -> Dict[str, pd.DataFrame]:
    """Generate synthetic catalog tables.

    Args:
        num_products: Number of products to create. Must be positive.
        categories: Category names (default: string instruments and parts).
        brands: Brand names.
        random_seed: Seed for reproducible output.

    Returns:
        Dictionary with ``categories``, ``brands``, ``products``,
        ``pictures`` and ``sizes`` DataFrames, laid out like the CSV files
        load_catalog_tables() reads.

    Raises:
        ValueError: If num_products is not positive or a name list is empty.
    """
    if num_products <= 0:
        raise ValueError("num_products must be positive")

    categories = categories or DEFAULT_CATEGORIES
    brands = brands or DEFAULT_BRANDS
    if not categories or not brands:
        raise ValueError("categories and brands must not be empty")

    rng = random.Random(random_seed)

    category_rows = [{"id": i + 1, "name": name} for i, name in enumerate(categories)]
    brand_rows = [{"id": i + 1, "name": name} for i, name in enumerate(brands)]

    products, pictures, sizes = [], [], []
    picture_id = 1
    for product_id in range(1, num_products + 1):
        category = rng.choice(category_rows)
        brand = rng.choice(brand_rows)
        price = rng.randrange(DEFAULT_MIN_PRICE, DEFAULT_MAX_PRICE, 100)
        discount = None
        if rng.random() < DISCOUNT_PROBABILITY:
            discount = int(price * rng.uniform(0.6, 0.95))

        products.append({
            "id": product_id,
            "product_name": f"{brand['name']} {category['name'][:-1]} {product_id:03d}",
            "price": price,
            "discount_price": discount,
            "description": f"{category['name']} by {brand['name']}",
            "category_id": category["id"],
            "brand_id": brand["id"],
        })

        # "-1." is the default picture, "-2." the hover picture
        for index in range(1, rng.randint(2, 4) + 1):
            pictures.append({
                "id": picture_id,
                "product_id": product_id,
                "picture_url": f"{product_id:03d}-{index}.jpg",
            })
            picture_id += 1

        if category["name"] in SIZED_CATEGORIES:
            for label in rng.sample(SIZE_LABELS, rng.randint(1, len(SIZE_LABELS))):
                sizes.append({"product_id": product_id, "size": label, "stock": rng.randint(0, 20)})
        else:
            sizes.append({"product_id": product_id, "size": None, "stock": rng.randint(0, 50)})

    return {
        "categories": pd.DataFrame(category_rows),
        "brands": pd.DataFrame(brand_rows),
        "products": pd.DataFrame(products),
        "pictures": pd.DataFrame(pictures),
        "sizes": pd.DataFrame(sizes),
    }


def write_catalog_csvs(tables: Dict[str, pd.DataFrame], output_dir: Path) -> None:
    """Write generated tables using the filenames the loader expects."""
    from src.catalog.utils import CATALOG_TABLES

    output_dir.mkdir(parents=True, exist_ok=True)
    for name, (filename, _) in CATALOG_TABLES.items():
        tables[name].to_csv(output_dir / filename, index=False)


def main() -> None:
    """Generate the default fake catalog into data/catalog/."""
    import sys

    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

    print(f"Generating {DEFAULT_NUM_PRODUCTS} fake products...")

    try:
        tables = generate_fake_catalog()
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    output_dir = project_root / "data" / "catalog"
    write_catalog_csvs(tables, output_dir)

    products = tables["products"]
    print(f"\nData generated successfully!")
    print(f"Saved to: {output_dir}")
    print(f"\nData preview:")
    print(products.head(10))
    print(f"\nData summary:")
    print(f"  Products: {len(products)}")
    print(f"  Discounted: {products['discount_price'].notna().sum()}")
    print(f"  Pictures: {len(tables['pictures'])}")
    print(f"  Size rows: {len(tables['sizes'])}")
    print(f"  Price range: {products['price'].min()} to {products['price'].max()}")


if __name__ == '__main__':
    main()
