"""Key/value storage contract and the in-memory backend."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

from kvrpc.core.rwlock import ReadWriteLock


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class KeyNotFoundError(StorageError):
    """Raised when a key is read or deleted but is not stored."""

    def __init__(self, key: str):
        super().__init__("key not found")
        self.key = key


class Storage(ABC):
    """Operations every backend must provide.

    ``post`` and ``put`` are both upserts: neither refuses to overwrite an
    existing key.
    """

    @abstractmethod
    def get(self, key: str) -> str:
        ...

    @abstractmethod
    def post(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class InMemoryStorage(Storage):
    """Dict-backed store guarded by a reader/writer lock.

    Lives as long as the object that owns it; nothing is written to disk.
    """

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = ReadWriteLock()

    def get(self, key: str) -> str:
        with self._lock.read_locked():
            try:
                return self._data[key]
            except KeyError:
                raise KeyNotFoundError(key) from None

    def post(self, key: str, value: str) -> None:
        self._upsert(key, value)

    def put(self, key: str, value: str) -> None:
        self._upsert(key, value)

    def delete(self, key: str) -> None:
        with self._lock.write_locked():
            if key not in self._data:
                raise KeyNotFoundError(key)
            del self._data[key]

    def _upsert(self, key: str, value: str) -> None:
        with self._lock.write_locked():
            self._data[key] = value

    def __contains__(self, key: object) -> bool:
        with self._lock.read_locked():
            return key in self._data

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._data)
