"""Key-value persistence for games, snapshots, events, users and standings."""

from .store import JsonFileStore, KeyValueStore, MemoryStore, StoreError

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "StoreError"]
