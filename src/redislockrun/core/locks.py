"""Abstract interface for the key-value store used as the lock."""

from __future__ import annotations

import abc
from typing import Optional


class LockStore(abc.ABC):
    """Store primitives the lock protocol relies on.

    ``set_if_absent`` and ``get_and_set`` must be atomic with respect to every
    other client of the same store. Implementations raise
    :class:`~redislockrun.core.errors.StoreError` on transport failures.
    """

    @abc.abstractmethod
    async def set_if_absent(self, key: str, value: str) -> bool:  # pragma: no cover - interface
        """Store ``value`` only if ``key`` does not exist. Return True when stored."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_and_set(self, key: str, value: str) -> Optional[str]:  # pragma: no cover - interface
        """Store ``value`` and return the previous value, or None if absent."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:  # pragma: no cover - interface
        """Return the stored value, or None if absent."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete(self, key: str) -> None:  # pragma: no cover - interface
        """Remove ``key``; a missing key is not an error."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release client resources."""
