"""Snapshot storage."""

from storage.snapshots import (
    InMemorySnapshotStore,
    JsonFileSnapshotStore,
    SnapshotStore,
    SnapshotStoreError,
    get_snapshot_store,
)

__all__ = [
    "SnapshotStore",
    "SnapshotStoreError",
    "InMemorySnapshotStore",
    "JsonFileSnapshotStore",
    "get_snapshot_store",
]
