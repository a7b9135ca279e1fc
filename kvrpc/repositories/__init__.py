"""
Storage backends.

The dispatcher depends on the ``Storage`` contract only, so another backend
can be swapped in without touching the RPC layer.
"""

from .storage import InMemoryStorage, KeyNotFoundError, Storage, StorageError

__all__ = ["Storage", "InMemoryStorage", "StorageError", "KeyNotFoundError"]
