"""Remote synchronization for busledger."""

from busledger.sync.base import NullSync, SyncPort

__all__ = ["SyncPort", "NullSync"]
