"""Result types shared by the coordinator and the runner."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AcquireStatus(str, Enum):
    ACQUIRED = "acquired"
    CONTENDED = "contended"
    DENIED = "denied"


class ReleaseStatus(str, Enum):
    RELEASED = "released"
    NOT_OWNED = "not_owned"
    FAILED = "failed"


class LockState(str, Enum):
    """States a single invocation moves through."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    CONTENDED = "contended"
    ACQUIRED = "acquired"
    DENIED = "denied"
    RUNNING = "running"
    RELEASED = "released"
    NOT_OWNED = "not_owned"
    CRASH_RELEASED = "crash_released"


class RunResult(BaseModel):
    """Outcome of one guarded execution."""

    key: str
    exit_code: int
    state: LockState
    expiry: int
    acquire_status: Optional[AcquireStatus] = None
    release_status: Optional[ReleaseStatus] = None
    child_returncode: Optional[int] = None
    error: Optional[str] = None

    @property
    def ran(self) -> bool:
        return self.state in {LockState.RELEASED, LockState.NOT_OWNED, LockState.CRASH_RELEASED}
