"""Tests for table loading, snapshot persistence, the build pipeline and the store."""

from pathlib import Path

import pytest

from src.api.exceptions import SnapshotLoadError, SnapshotNotFoundError
from src.catalog.build import build_catalog
from src.catalog.store import CatalogStore
from src.catalog.utils import (
    SNAPSHOT_FILENAME,
    check_snapshot_exists,
    load_catalog_tables,
    load_snapshot,
    parse_number,
    round_half_up,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        (3, 3.0),
        ("", None),
        ("   ", None),
        (None, None),
        ("abc", None),
        ("nan", None),
        ("inf", None),
        (True, None),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_parse_number_default():
    assert parse_number("abc", default=0.0) == 0.0


@pytest.mark.parametrize("value, expected", [(1.5, 2), (2.5, 3), (2.4999, 2), (1400.0, 1400)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_load_catalog_tables(catalog_tables, write_csvs, tmp_path):
    csv_dir = write_csvs(catalog_tables, tmp_path / "csv")
    tables = load_catalog_tables(str(csv_dir))

    assert set(tables) == {"products", "categories", "brands", "pictures", "sizes"}
    assert len(tables["products"]) == 9
    # Size labels stay text
    assert tables["sizes"]["size"].tolist()[:2] == ["1/2", "4/4"]


def test_load_catalog_tables_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog_tables(str(tmp_path / "nope"))


def test_load_catalog_tables_missing_table(catalog_tables, write_csvs, tmp_path):
    csv_dir = write_csvs(catalog_tables, tmp_path / "csv")
    (csv_dir / "brands.csv").unlink()

    with pytest.raises(FileNotFoundError, match="brands.csv"):
        load_catalog_tables(str(csv_dir))


def test_load_catalog_tables_missing_columns(catalog_tables, write_csvs, tmp_path):
    catalog_tables["products"] = catalog_tables["products"].drop(columns=["brand_id"])
    csv_dir = write_csvs(catalog_tables, tmp_path / "csv")

    with pytest.raises(ValueError, match="brand_id"):
        load_catalog_tables(str(csv_dir))


def test_build_catalog_round_trip(catalog_tables, write_csvs, tmp_path):
    csv_dir = write_csvs(catalog_tables, tmp_path / "csv")
    output_dir = tmp_path / "snapshot"

    snapshot = build_catalog(str(csv_dir), str(output_dir))

    assert snapshot.product_count == 8
    assert check_snapshot_exists(str(output_dir))

    loaded, metadata = load_snapshot(str(output_dir))
    assert loaded.products["id"].tolist() == snapshot.products["id"].tolist()
    assert metadata["num_products"] == 8
    assert "built_at" in metadata


def test_store_loads_lazily(catalog_tables, write_csvs, tmp_path):
    csv_dir = write_csvs(catalog_tables, tmp_path / "csv")
    build_catalog(str(csv_dir), str(tmp_path / "snapshot"))

    store = CatalogStore(str(tmp_path / "snapshot"))
    assert not store.is_loaded
    assert store.status()["snapshot_loaded"] is False

    snapshot = store.snapshot()
    assert store.is_loaded
    assert store.snapshot() is snapshot

    status = store.status()
    assert status["snapshot_loaded"] is True
    assert status["num_products"] == 8
    assert status["built_at"] is not None
    assert status["timestamp_last_loaded"] is not None


def test_store_reload_picks_up_new_snapshot(catalog_tables, write_csvs, tmp_path):
    csv_dir = write_csvs(catalog_tables, tmp_path / "csv")
    snapshot_dir = str(tmp_path / "snapshot")
    build_catalog(str(csv_dir), snapshot_dir)

    store = CatalogStore(snapshot_dir)
    assert store.snapshot().product_count == 8

    catalog_tables["products"] = catalog_tables["products"].iloc[:3]
    write_csvs(catalog_tables, Path(csv_dir))
    build_catalog(str(csv_dir), snapshot_dir)

    assert store.snapshot().product_count == 8
    assert store.reload().product_count == 3


def test_store_missing_snapshot(tmp_path):
    store = CatalogStore(str(tmp_path))

    with pytest.raises(SnapshotNotFoundError) as exc_info:
        store.snapshot()
    assert exc_info.value.status_code == 503


def test_store_corrupt_snapshot(tmp_path):
    (tmp_path / SNAPSHOT_FILENAME).write_bytes(b"not a snapshot")
    store = CatalogStore(str(tmp_path))

    with pytest.raises(SnapshotLoadError):
        store.snapshot()
    assert not store.is_loaded
