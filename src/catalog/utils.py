"""Utility functions for the catalog engine.

This module provides helper functions for loading the raw catalog tables,
persisting built snapshots, and lenient numeric parsing used throughout the
catalog engine.
"""

import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import joblib
import pandas as pd

# Configure module logger
logger = logging.getLogger(__name__)

# Snapshot artifact filenames
SNAPSHOT_FILENAME = "catalog_snapshot.joblib"
SNAPSHOT_METADATA_FILENAME = "snapshot_metadata.joblib"

# Raw table filenames and the columns each one must carry
CATALOG_TABLES: Dict[str, Tuple[str, set]] = {
    "products": (
        "products.csv",
        {"id", "product_name", "price", "discount_price", "category_id", "brand_id"},
    ),
    "categories": ("categories.csv", {"id", "name"}),
    "brands": ("brands.csv", {"id", "name"}),
    "pictures": ("product_pictures.csv", {"id", "product_id", "picture_url"}),
    "sizes": ("product_sizes.csv", {"product_id", "size", "stock"}),
}

# Label-like columns are read as text so "38" does not become 38.0
TABLE_DTYPES: Dict[str, Dict[str, type]] = {
    "pictures": {"picture_url": str},
    "sizes": {"size": str},
}


def parse_number(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Parse a loosely typed numeric value.

    Strings, ints and floats are accepted. Empty strings, ``None``, NaN,
    infinities and anything unparseable return ``default``.

    Example:
        >>> parse_number("12.5")
        12.5
        >>> parse_number("abc", default=0.0)
        0.0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def load_catalog_tables(csv_dir: str) -> Dict[str, pd.DataFrame]:
    """Load the raw catalog tables from a directory of CSV files.

    Args:
        csv_dir: Directory containing products.csv, categories.csv,
            brands.csv, product_pictures.csv and product_sizes.csv.

    Returns:
        Dictionary mapping table name to its DataFrame.

    Raises:
        FileNotFoundError: If the directory or a required table is missing.
        ValueError: If a table is missing required columns.

    Example:
        >>> tables = load_catalog_tables("data/catalog")
        >>> print(f"Products: {len(tables['products'])}")
    """
    csv_path = Path(csv_dir)
    if not csv_path.exists():
        raise FileNotFoundError(f"Catalog directory not found: {csv_dir}")

    logger.info(f"Loading catalog tables from {csv_dir}")

    tables = {}
    for name, (filename, required_columns) in CATALOG_TABLES.items():
        table_file = csv_path / filename
        if not table_file.exists():
            raise FileNotFoundError(f"Catalog table not found: {table_file}")

        df = pd.read_csv(table_file, dtype=TABLE_DTYPES.get(name))

        if not required_columns.issubset(df.columns):
            missing = required_columns - set(df.columns)
            raise ValueError(f"{filename} missing required columns: {missing}")

        tables[name] = df
        logger.info(f"Loaded {len(df)} rows from {filename}")

    return tables


def save_snapshot(snapshot: Any, output_dir: str) -> Path:
    """Persist a built catalog snapshot with joblib.

    Writes the snapshot itself plus a small metadata file (build time and
    row counts) used by the status endpoint.

    Returns:
        Path of the written snapshot file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    snapshot_path = output_path / SNAPSHOT_FILENAME
    joblib.dump(snapshot, snapshot_path)
    logger.info(f"Saved catalog snapshot to {snapshot_path}")

    metadata = {
        "built_at": datetime.now(timezone.utc).isoformat(),
        "num_products": int(len(snapshot.products)),
        "num_categories": int(len(snapshot.categories)),
        "num_brands": int(len(snapshot.brands)),
    }
    joblib.dump(metadata, output_path / SNAPSHOT_METADATA_FILENAME)
    logger.info(f"Saved snapshot metadata: {metadata}")

    return snapshot_path


def load_snapshot(snapshot_dir: str) -> Tuple[Any, Dict[str, Any]]:
    """Load a persisted catalog snapshot and its metadata.

    Raises:
        FileNotFoundError: If the snapshot file is missing.
    """
    snapshot_path = Path(snapshot_dir) / SNAPSHOT_FILENAME
    if not snapshot_path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {snapshot_path}")

    snapshot = joblib.load(snapshot_path)
    logger.info(f"Loaded catalog snapshot from {snapshot_path}")

    metadata_path = Path(snapshot_dir) / SNAPSHOT_METADATA_FILENAME
    metadata = joblib.load(metadata_path) if metadata_path.exists() else {}

    return snapshot, metadata


def check_snapshot_exists(snapshot_dir: str) -> bool:
    """Check if a catalog snapshot has been built in ``snapshot_dir``."""
    return (Path(snapshot_dir) / SNAPSHOT_FILENAME).exists()
