"""Process-level catalog store.

Holds the current catalog snapshot behind a lazy, lock-guarded loader so
that every request reads one immutable snapshot. The snapshot can be
reloaded after a new one has been built on disk.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.api.exceptions import SnapshotLoadError, SnapshotNotFoundError
from src.catalog.snapshot import CatalogSnapshot
from src.catalog.utils import check_snapshot_exists, load_snapshot

# Configure module logger
logger = logging.getLogger(__name__)


class CatalogStore:
    """Lazily loads and caches a CatalogSnapshot from ``snapshot_dir``."""

    def __init__(self, snapshot_dir: str, snapshot: Optional[CatalogSnapshot] = None):
        self.snapshot_dir = snapshot_dir
        self._lock = threading.Lock()
        self._snapshot = snapshot
        self._metadata: Dict[str, Any] = {}
        self._loaded_at: Optional[str] = None
        if snapshot is not None:
            self._loaded_at = datetime.now(timezone.utc).isoformat()

    @classmethod
    def from_snapshot(cls, snapshot: CatalogSnapshot) -> "CatalogStore":
        """Wrap an in-memory snapshot (used by tests and scripts)."""
        return cls(snapshot_dir="<memory>", snapshot=snapshot)

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def snapshot(self) -> CatalogSnapshot:
        """Return the cached snapshot, loading it on first use.

        Raises:
            SnapshotNotFoundError: If no snapshot has been built.
            SnapshotLoadError: If the snapshot exists but cannot be read.
        """
        if self._snapshot is not None:
            return self._snapshot

        with self._lock:
            if self._snapshot is not None:
                return self._snapshot

            if not check_snapshot_exists(self.snapshot_dir):
                logger.error(f"Catalog snapshot not found in {self.snapshot_dir}")
                raise SnapshotNotFoundError(self.snapshot_dir)

            try:
                logger.info(f"Loading catalog snapshot from {self.snapshot_dir}")
                snapshot, metadata = load_snapshot(self.snapshot_dir)
            except Exception as e:
                logger.error(f"Failed to load catalog snapshot: {e}", exc_info=True)
                raise SnapshotLoadError(self.snapshot_dir, e) from e

            self._snapshot = snapshot
            self._metadata = metadata
            self._loaded_at = datetime.now(timezone.utc).isoformat()
            logger.info(
                "Catalog snapshot loaded",
                extra={"num_products": snapshot.product_count},
            )
            return snapshot

    def reload(self) -> CatalogSnapshot:
        """Drop the cached snapshot and load it again from disk."""
        logger.info("Reloading catalog snapshot...")
        with self._lock:
            self._snapshot = None
            self._metadata = {}
            self._loaded_at = None
        return self.snapshot()

    def status(self) -> Dict[str, Any]:
        return {
            "snapshot_loaded": self.is_loaded,
            "timestamp_last_loaded": self._loaded_at,
            "built_at": self._metadata.get("built_at"),
            "num_products": self._snapshot.product_count if self._snapshot is not None else 0,
        }
