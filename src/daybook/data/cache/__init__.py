from .snapshot_store import Clock, SnapshotStore

__all__ = ["Clock", "SnapshotStore"]
