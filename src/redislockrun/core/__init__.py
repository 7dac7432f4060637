"""Lock protocol and guarded execution."""

from .coordinator import LockCoordinator, LockGuard
from .errors import (
    ChildExecutionError,
    ConfigurationError,
    LockDenied,
    RedisLockRunError,
    StoreError,
    UsageError,
)
from .lifecycle import LockLifecycle
from .locks import LockStore
from .models import AcquireStatus, LockState, ReleaseStatus, RunResult
from .runner import GuardedRunner
from .settings import LockRunSettings

__all__ = [
    "AcquireStatus",
    "ChildExecutionError",
    "ConfigurationError",
    "GuardedRunner",
    "LockCoordinator",
    "LockDenied",
    "LockGuard",
    "LockLifecycle",
    "LockRunSettings",
    "LockState",
    "LockStore",
    "RedisLockRunError",
    "ReleaseStatus",
    "RunResult",
    "StoreError",
    "UsageError",
]
