"""Key-value stores holding one value per entity kind.

Each store holds a single JSON document (a list of games, a mapping of
game uuid to snapshot, ...) and supports ``read()``/``write()`` plus a
non-blocking ``read_cached()`` that returns the last value read or written.
Stores are single-writer: callers do read-modify-write without locking.
"""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..logging import logger

T = TypeVar("T")


class StoreError(RuntimeError):
    """Raised when a store cannot be read or written."""


class MemoryStore(Generic[T]):
    """In-process store; values are copied on the way in and out."""

    def __init__(self, name: str, default: T) -> None:
        self.name = name
        self._default = default
        self._value: T | None = None

    def read(self) -> T:
        return self.read_cached()

    def write(self, value: T) -> T:
        self._value = deepcopy(value)
        return value

    def read_cached(self) -> T:
        if self._value is None:
            return deepcopy(self._default)
        return deepcopy(self._value)


class JsonFileStore(Generic[T]):
    """Local file store for one JSON document.

    Stores the document at ``{storage_dir}/{name}.json``. A missing file reads
    as the default value. Values are validated through a pydantic TypeAdapter
    on read and serialized with camelCase aliases on write.
    """

    def __init__(self, storage_dir: str | Path, name: str, adapter: TypeAdapter[T], default: T) -> None:
        self.name = name
        self.path = Path(storage_dir) / f"{name}.json"
        self._adapter = adapter
        self._default = default
        self._cached: T | None = None

    def read(self) -> T:
        """Load the document from disk and refresh the cached value."""
        if not self.path.exists():
            logger.debug("store_miss", store=self.name, path=str(self.path))
            return self.read_cached()

        try:
            raw = self.path.read_text(encoding="utf-8")
            value = self._adapter.validate_python(json.loads(raw))
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.error("store_read_error", store=self.name, path=str(self.path), error=str(exc))
            raise StoreError(f"Failed to read store {self.name}: {exc}") from exc

        self._cached = value
        return deepcopy(value)

    def write(self, value: T) -> T:
        """Persist the document atomically and update the cached value."""
        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            payload = self._adapter.dump_json(value, by_alias=True, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except (OSError, ValueError) as exc:
            logger.error("store_write_error", store=self.name, path=str(self.path), error=str(exc))
            raise StoreError(f"Failed to write store {self.name}: {exc}") from exc

        self._cached = deepcopy(value)
        logger.debug("store_saved", store=self.name, path=str(self.path), size_kb=len(payload) // 1024)
        return value

    def read_cached(self) -> T:
        """Return the last value read or written.

        Only the first call after startup touches disk, to pick up the
        document left by a previous process.
        """
        if self._cached is None:
            if self.path.exists():
                return self.read()
            return deepcopy(self._default)
        return deepcopy(self._cached)


class KeyValueStore(Protocol[T]):
    """The read/write surface services depend on."""

    def read(self) -> T: ...

    def write(self, value: T) -> T: ...

    def read_cached(self) -> T: ...
