"""
Snapshot storage package.

Holds the single in-memory copy of the property collection. Writers replace
the snapshot wholesale; readers never take a lock.
"""

from .snapshot import Snapshot, SnapshotStore

__all__ = ["Snapshot", "SnapshotStore"]
