"""Orchestrates one guarded execution: acquire, run, release."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from redislockrun.core.coordinator import LockCoordinator
from redislockrun.core.errors import ChildExecutionError, LockDenied, StoreError, UsageError
from redislockrun.core.lifecycle import LockLifecycle
from redislockrun.core.models import AcquireStatus, RunResult
from redislockrun.core.settings import LockRunSettings
from redislockrun.services.process import ProcessExecutor
from redislockrun.utils.logging import get_logger


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class Executor(Protocol):
    async def run(self, name: str, args: Sequence[str]) -> int: ...


class GuardedRunner:
    """Runs a command only while this process holds the configured lock."""

    def __init__(
        self,
        coordinator: LockCoordinator,
        settings: LockRunSettings,
        *,
        executor: Optional[Executor] = None,
    ) -> None:
        self.coordinator = coordinator
        self.settings = settings
        self.executor = executor or ProcessExecutor()
        self.logger = get_logger("GuardedRunner")

    async def run(self, command: Sequence[str]) -> RunResult:
        if not command:
            raise UsageError("No command given")

        key = self.settings.key
        name, args = command[0], list(command[1:])
        lifecycle = LockLifecycle()
        expiry = self.coordinator.compute_expiry(self.coordinator.now(), self.settings.lock_timeout)
        self.logger.debug("Config: %s", self.settings.redacted())

        try:
            acquired = await self.coordinator.acquire(key, expiry, lifecycle)
        except StoreError as exc:
            self.logger.error("Not running %s: %s", name, exc)
            return RunResult(
                key=key,
                exit_code=EXIT_FAILURE,
                state=lifecycle.state,
                expiry=expiry,
                error=str(exc),
            )

        if acquired is not AcquireStatus.ACQUIRED:
            return RunResult(
                key=key,
                exit_code=EXIT_FAILURE,
                state=lifecycle.state,
                expiry=expiry,
                acquire_status=acquired,
                error=str(LockDenied(key, lifecycle.held_until)),
            )

        guard = self.coordinator.guard(key, lifecycle)
        try:
            async with guard:
                self.logger.info("Running %s %s", name, args)
                returncode = await self.executor.run(name, args)
                self.logger.info("Finished running %s %s", name, args)
        except ChildExecutionError as exc:
            self.logger.error("%s", exc)
            return RunResult(
                key=key,
                exit_code=EXIT_FAILURE,
                state=lifecycle.state,
                expiry=expiry,
                acquire_status=acquired,
                release_status=guard.release_status,
                child_returncode=exc.returncode,
                error=str(exc),
            )

        return RunResult(
            key=key,
            exit_code=EXIT_OK,
            state=lifecycle.state,
            expiry=expiry,
            acquire_status=acquired,
            release_status=guard.release_status,
            child_returncode=returncode,
        )
