from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from redislockrun.core.errors import ChildExecutionError, StoreError
from redislockrun.core.locks import LockStore


NOW = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = NOW) -> None:
        self.value = now

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class InMemoryLockStore(LockStore):
    """Single-process stand-in with the same atomic primitives as Redis."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})
        self.calls: List[Tuple[str, str]] = []
        self.fail_on: set[str] = set()
        self.closed = False

    def _record(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if op in self.fail_on:
            raise StoreError(f"{op} {key} failed: connection refused")

    async def set_if_absent(self, key: str, value: str) -> bool:
        self._record("set_if_absent", key)
        if key in self.data:
            return False
        self.data[key] = value
        return True

    async def get_and_set(self, key: str, value: str) -> Optional[str]:
        self._record("get_and_set", key)
        previous = self.data.get(key)
        self.data[key] = value
        return previous

    async def get(self, key: str) -> Optional[str]:
        self._record("get", key)
        return self.data.get(key)

    async def delete(self, key: str) -> None:
        self._record("delete", key)
        self.data.pop(key, None)

    async def close(self) -> None:
        self.closed = True

    def ops(self) -> List[str]:
        return [op for op, _ in self.calls]


class DummyExecutor:
    def __init__(self, returncode: int = 0, *, launch_error: Optional[str] = None, on_run=None) -> None:
        self.returncode = returncode
        self.launch_error = launch_error
        self.on_run = on_run
        self.invocations: List[Tuple[str, List[str]]] = []

    async def run(self, name: str, args: Sequence[str]) -> int:
        self.invocations.append((name, list(args)))
        if self.on_run is not None:
            self.on_run()
        if self.launch_error is not None:
            raise ChildExecutionError(name, args, None, self.launch_error)
        if self.returncode != 0:
            raise ChildExecutionError(name, args, self.returncode, f"exit status {self.returncode}")
        return self.returncode


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryLockStore:
    return InMemoryLockStore()
