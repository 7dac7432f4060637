"""Acquire/verify/release protocol for a single expiry-stamped lock key.

The stored value is the holder's expiry as integer Unix seconds. There is no
holder token: two holders that compute the same instant cannot be told apart.
A stale lock is taken over with GETSET, which overwrites before it knows who
won; the loser's write republishes an expiry from the same short window, so
the winner keeps a lock at least as long as its own.
"""

from __future__ import annotations

import datetime as dt
import math
import time
from typing import Callable, Optional, Union

from redislockrun.core.errors import StoreError, UsageError
from redislockrun.core.lifecycle import LockLifecycle
from redislockrun.core.locks import LockStore
from redislockrun.core.models import AcquireStatus, LockState, ReleaseStatus
from redislockrun.utils.logging import get_logger


GRACE_PERIOD = dt.timedelta(seconds=1)

Clock = Callable[[], float]


def parse_instant(key: str, raw: Union[str, bytes]) -> int:
    try:
        text = raw.decode("ascii") if isinstance(raw, bytes) else raw
        return int(text.strip())
    except (UnicodeDecodeError, ValueError) as exc:
        raise StoreError(f"Malformed expiry {raw!r} stored at '{key}'") from exc


class LockCoordinator:
    def __init__(
        self,
        store: LockStore,
        *,
        clock: Clock = time.time,
        grace: dt.timedelta = GRACE_PERIOD,
    ) -> None:
        self.store = store
        self._clock = clock
        self._grace = grace
        self.logger = get_logger("LockCoordinator")

    def now(self) -> float:
        return self._clock()

    def compute_expiry(self, now: float, timeout: dt.timedelta) -> int:
        """Return the expiry instant to store: now + timeout + grace, in whole seconds."""
        if timeout <= dt.timedelta(0):
            raise UsageError("lock timeout must be positive")
        return math.floor(now + timeout.total_seconds() + self._grace.total_seconds())

    async def try_acquire(self, key: str, expiry: int) -> AcquireStatus:
        if await self.store.set_if_absent(key, str(expiry)):
            return AcquireStatus.ACQUIRED
        return AcquireStatus.CONTENDED

    async def read_expiry(self, key: str) -> Optional[int]:
        """Return the stored expiry, or None when the key is absent."""
        raw = await self.store.get(key)
        if raw is None:
            return None
        return parse_instant(key, raw)

    async def reacquire_if_expired(self, key: str, new_expiry: int) -> AcquireStatus:
        previous_raw = await self.store.get_and_set(key, str(new_expiry))
        now = self.now()
        if previous_raw is None:
            self.logger.debug("Lock '%s' vanished before GETSET; now ours", key)
            return AcquireStatus.ACQUIRED

        previous = parse_instant(key, previous_raw)
        self.logger.debug("My lock expire is %s", new_expiry)
        self.logger.debug("Now %s", int(now))
        self.logger.debug("Current lock expire in Redis %s", previous)

        if previous < now:
            return AcquireStatus.ACQUIRED
        # Another process took the expired lock first. Our write is left in place.
        return AcquireStatus.DENIED

    async def release(self, key: str) -> ReleaseStatus:
        expiry = await self.read_expiry(key)
        now = self.now()
        if expiry is None:
            self.logger.warning("Lock '%s' is already gone", key)
            return ReleaseStatus.NOT_OWNED
        if now < expiry:
            self.logger.info("Deleting lock")
            await self.store.delete(key)
            return ReleaseStatus.RELEASED
        self.logger.warning("Lock '%s' expired at %s before release; leaving it in place", key, expiry)
        return ReleaseStatus.NOT_OWNED

    async def acquire(self, key: str, expiry: int, lifecycle: Optional[LockLifecycle] = None) -> AcquireStatus:
        """Run the full acquisition: SET NX, then take over only an expired lock.

        StoreError propagates; the caller must not run anything in that case.
        """
        lifecycle = lifecycle or LockLifecycle()
        lifecycle.advance(LockState.ATTEMPTING)
        if await self.try_acquire(key, expiry) is AcquireStatus.ACQUIRED:
            self.logger.debug("Acquired lock '%s' until %s", key, expiry)
            lifecycle.advance(LockState.ACQUIRED)
            return AcquireStatus.ACQUIRED

        lifecycle.advance(LockState.CONTENDED)
        current = await self.read_expiry(key)
        if current is None or current < self.now():
            self.logger.info("Lock is expired. Trying to acquire lock")
            status = await self.reacquire_if_expired(key, expiry)
            if status is AcquireStatus.ACQUIRED:
                self.logger.info("Acquired lock")
            else:
                self.logger.info("Failed: lock is already acquired by other process")
        else:
            self.logger.info("Locked")
            lifecycle.held_until = current
            status = AcquireStatus.DENIED

        lifecycle.advance(LockState.ACQUIRED if status is AcquireStatus.ACQUIRED else LockState.DENIED)
        return status

    def guard(self, key: str, lifecycle: LockLifecycle) -> "LockGuard":
        return LockGuard(self, key, lifecycle)


class LockGuard:
    """Async context manager that holds an acquired lock for one execution.

    Release runs on every exit path. A failing release is logged and never
    replaces the exception raised inside the block.
    """

    def __init__(self, coordinator: LockCoordinator, key: str, lifecycle: LockLifecycle) -> None:
        self._coordinator = coordinator
        self._key = key
        self._lifecycle = lifecycle
        self.release_status: Optional[ReleaseStatus] = None

    async def __aenter__(self) -> "LockGuard":
        if not self._lifecycle.may_execute:
            raise RuntimeError(f"Lock '{self._key}' is not held (state {self._lifecycle.state.value})")
        self._lifecycle.advance(LockState.RUNNING)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            self.release_status = await self._coordinator.release(self._key)
        except Exception as err:
            self._coordinator.logger.error("Failed to release lock '%s': %s", self._key, err)
            self.release_status = ReleaseStatus.FAILED

        if exc_type is not None:
            self._lifecycle.advance(LockState.CRASH_RELEASED)
        elif self.release_status is ReleaseStatus.RELEASED:
            self._lifecycle.advance(LockState.RELEASED)
        else:
            self._lifecycle.advance(LockState.NOT_OWNED)
