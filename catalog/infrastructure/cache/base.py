"""Cache store contract and operation results.

Every cache operation reports its outcome as a ``CacheResult`` instead of
raising. A routine miss and a backend failure are different statuses, so
callers check them explicitly at each call site:

- ``HIT``: ``get`` found a live entry, the payload is in ``value``
- ``MISS``: the key is absent or expired (``get`` and ``set_expiry``)
- ``OK``: a write (``set``, ``set_expiry``, ``delete``) or ``ping`` succeeded
- ``ERROR``: the backend failed (down, timeout, protocol error)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Protocol


class CacheStatus(Enum):
    """Outcome of a single cache operation."""

    HIT = "hit"
    MISS = "miss"
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class CacheResult:
    """Result of a cache operation.

    Attributes:
        status: The operation outcome.
        value: Payload returned by a ``get`` hit.
        reason: Short failure class for errors (timeout, connection, ...).
        error: The underlying exception for errors.
    """

    status: CacheStatus
    value: bytes | None = None
    reason: str | None = None
    error: BaseException | None = None

    @classmethod
    def hit(cls, value: bytes) -> CacheResult:
        return cls(CacheStatus.HIT, value=value)

    @classmethod
    def miss(cls) -> CacheResult:
        return cls(CacheStatus.MISS)

    @classmethod
    def ok(cls) -> CacheResult:
        return cls(CacheStatus.OK)

    @classmethod
    def failed(cls, error: BaseException, reason: str) -> CacheResult:
        return cls(CacheStatus.ERROR, reason=reason, error=error)

    @property
    def is_error(self) -> bool:
        """Whether the backend failed."""
        return self.status is CacheStatus.ERROR


class CacheStore(Protocol):
    """Key/value store with per-key expiry.

    Implementations never raise for backend failures; they return a
    ``CacheResult`` with ``CacheStatus.ERROR`` instead.
    """

    async def get(self, key: str) -> CacheResult:
        """Return HIT with the payload, MISS, or ERROR."""
        ...

    async def set(self, key: str, value: bytes, ttl: timedelta) -> CacheResult:
        """Store ``value`` under ``key`` for ``ttl``, overwriting any entry."""
        ...

    async def set_expiry(self, key: str, ttl: timedelta) -> CacheResult:
        """Reset the expiry of ``key``. MISS when the key does not exist."""
        ...

    async def delete(self, key: str) -> CacheResult:
        """Remove ``key``. Removing an absent key is OK."""
        ...

    async def ping(self) -> CacheResult:
        """Check that the backend answers."""
        ...

    async def close(self) -> None:
        """Release backend connections."""
        ...
