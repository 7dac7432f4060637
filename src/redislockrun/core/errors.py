"""Error taxonomy for guarded runs."""

from __future__ import annotations

from typing import Optional, Sequence


class RedisLockRunError(Exception):
    """Base exception for redislockrun."""


class UsageError(RedisLockRunError):
    """Raised when the invocation itself is invalid (e.g. nothing to execute)."""


class ConfigurationError(UsageError):
    """Raised when settings fail validation."""


class StoreError(RedisLockRunError):
    """Raised when the lock store is unreachable or holds malformed data."""


class LockDenied(RedisLockRunError):
    """Raised when another holder actively owns the lock."""

    def __init__(self, key: str, expiry: Optional[int] = None) -> None:
        self.key = key
        self.expiry = expiry
        detail = f" until {expiry}" if expiry is not None else ""
        super().__init__(f"Lock '{key}' is held by another process{detail}")


class ChildExecutionError(RedisLockRunError):
    """Raised when the guarded command cannot be launched or exits non-zero."""

    def __init__(self, name: str, args: Sequence[str], returncode: Optional[int], reason: str) -> None:
        self.name = name
        self.args_list = list(args)
        self.returncode = returncode
        super().__init__(f"Error running {name} {self.args_list}: {reason}")
