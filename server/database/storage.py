"""Key-value storage interface for bot state."""
from abc import ABC, abstractmethod
from typing import Any, Iterable
import asyncio
import copy
import logging

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Stores JSON-serializable state documents by key."""

    @abstractmethod
    async def read(self, keys: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Return the documents found for the given keys. Missing keys are omitted."""
        ...

    @abstractmethod
    async def write(self, changes: dict[str, dict[str, Any]]) -> None:
        """Create or replace documents."""
        ...

    @abstractmethod
    async def delete(self, keys: Iterable[str]) -> None:
        ...


class MemoryStorage(Storage):
    """
    In-process storage for development and tests.

    Documents are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None):
        self._memory: dict[str, dict[str, Any]] = copy.deepcopy(initial or {})
        self._lock = asyncio.Lock()

    async def read(self, keys: Iterable[str]) -> dict[str, dict[str, Any]]:
        async with self._lock:
            return {
                key: copy.deepcopy(self._memory[key])
                for key in keys
                if key in self._memory
            }

    async def write(self, changes: dict[str, dict[str, Any]]) -> None:
        async with self._lock:
            for key, document in changes.items():
                self._memory[key] = copy.deepcopy(document)
        logger.debug(f"Wrote {len(changes)} state document(s)")

    async def delete(self, keys: Iterable[str]) -> None:
        async with self._lock:
            for key in keys:
                self._memory.pop(key, None)
