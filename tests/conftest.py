"""Shared fixtures: a small, hand-built catalog with known answers.

Catalog layout (effective price in brackets):

    1  Yamaha Violin V5        Violins / Yamaha    1000, discount 800   [800]
    2  Yamaha Violin V7        Violins / Yamaha    2000                 [2000]
    3  Yamaha Violin V10       Violins / Yamaha    3000, discount 3500  [3000]
    4  Yamaha Violin V20       Violins / Yamaha    4000, discount 0     [4000]
    5  Stentor Student Violin  Violins / Stentor   500                  [500]
    6  Eastman Carbon Bow      Bows / Eastman      1500, discount 1200  [1200]
    7  Stentor Bow             Bows / Stentor      "abc" -> 0           [0]
    8  Eastman Rosin           Rosin / Eastman     50                   [50]
    9  Ghost                   unknown category, left out of the snapshot

"Cases" is a category without products.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Generator

import numpy as np
import pandas as pd
import pytest
from fastapi.testclient import TestClient

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.api.main import app
from src.api.metrics import metrics_service
from src.api.routes.products import get_catalog_store
from src.catalog.snapshot import CatalogSnapshot, build_snapshot
from src.catalog.store import CatalogStore
from src.catalog.utils import CATALOG_TABLES

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)


def make_catalog_tables() -> Dict[str, pd.DataFrame]:
    """Raw tables laid out like the CSV files."""
    categories = pd.DataFrame(
        {"id": [1, 2, 3, 4], "name": ["Violins", "Bows", "Cases", "Rosin"]}
    )
    brands = pd.DataFrame({"id": [1, 2, 3], "name": ["Yamaha", "Stentor", "Eastman"]})
    products = pd.DataFrame(
        {
            "id": [1, 2, 3, 4, 5, 6, 7, 8, 9],
            "product_name": [
                "Yamaha Violin V5",
                "Yamaha Violin V7",
                "Yamaha Violin V10",
                "Yamaha Violin V20",
                "Stentor Student Violin",
                "Eastman Carbon Bow",
                "Stentor Bow",
                "Eastman Rosin",
                "Ghost",
            ],
            "price": [1000, 2000, 3000, 4000, 500, 1500, "abc", 50, 100],
            "discount_price": [800, None, 3500, 0, None, 1200, None, None, None],
            "description": ["Full-size violin"] * 9,
            "category_id": [1, 1, 1, 1, 1, 2, 2, 4, 99],
            "brand_id": [1, 1, 1, 1, 2, 3, 2, 3, 1],
        }
    )
    pictures = pd.DataFrame(
        {
            "id": [1, 2, 3, 4, 5],
            "product_id": [1, 1, 1, 2, 6],
            "picture_url": ["001-2.jpg", "001-1.jpg", "001-3.jpg", "002-1.jpg", "006-2.jpg"],
        }
    )
    sizes = pd.DataFrame(
        {
            "product_id": [1, 1, 2, 6],
            "size": ["1/2", "4/4", "4/4", None],
            "stock": [3, 0, -4, 5],
        }
    )
    return {
        "categories": categories,
        "brands": brands,
        "products": products,
        "pictures": pictures,
        "sizes": sizes,
    }


def write_catalog_csvs(tables: Dict[str, pd.DataFrame], output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    for name, (filename, _) in CATALOG_TABLES.items():
        tables[name].to_csv(output_dir / filename, index=False)
    return output_dir


@pytest.fixture
def catalog_tables() -> Dict[str, pd.DataFrame]:
    return make_catalog_tables()


@pytest.fixture
def catalog_snapshot() -> CatalogSnapshot:
    return build_snapshot(make_catalog_tables())


@pytest.fixture
def catalog_store(catalog_snapshot: CatalogSnapshot) -> CatalogStore:
    return CatalogStore.from_snapshot(catalog_snapshot)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def api_client(catalog_store: CatalogStore) -> Generator[TestClient, None, None]:
    """Test client whose routes read the in-memory catalog."""
    metrics_service.reset()
    app.dependency_overrides[get_catalog_store] = lambda: catalog_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def write_csvs():
    """Writer for raw tables, using the filenames the loader expects."""
    return write_catalog_csvs
