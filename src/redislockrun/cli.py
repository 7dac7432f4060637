"""CLI entrypoint: run a command while holding a Redis lock."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from redislockrun.core.coordinator import Clock, LockCoordinator
from redislockrun.core.errors import UsageError
from redislockrun.core.locks import LockStore
from redislockrun.core.locks_redis import RedisLockStore
from redislockrun.core.runner import EXIT_USAGE, Executor, GuardedRunner
from redislockrun.core.settings import LockRunSettings
from redislockrun.utils.logging import get_logger, set_level, verbosity_to_level


logger = get_logger("redislockrun")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redislockrun",
        description="Run a command only if no other host currently holds the Redis lock.",
        epilog=(
            "Environment: REDISLOCKRUN_ADDR, REDISLOCKRUN_PASSWORD, REDISLOCKRUN_DB, "
            "REDISLOCKRUN_KEY, REDISLOCKRUN_TIMEOUT, REDIS_URL. "
            "The timeout bounds how long the lock is valid, not how long the command may run."
        ),
    )
    parser.add_argument("--timeout", default=None, help="Lock timeout, e.g. 30m, 1h30m, 90s (default: 30m)")
    parser.add_argument("--key", default=None, help="Lock key (default: lock)")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML settings file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log config and lock timestamps")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command and arguments to run")
    return parser


def _command_from(args: argparse.Namespace) -> List[str]:
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    return command


async def main(
    argv: Optional[Sequence[str]] = None,
    *,
    store: Optional[LockStore] = None,
    executor: Optional[Executor] = None,
    clock: Clock = time.time,
) -> int:
    args = build_parser().parse_args(argv)
    set_level(verbosity_to_level(args.verbose))

    try:
        settings = LockRunSettings.load(
            config_path=args.config,
            overrides={"key": args.key, "lock_timeout": args.timeout},
        )
        command = _command_from(args)
        if not command:
            raise UsageError("No command given")
        owns_store = store is None
        lock_store = store if store is not None else RedisLockStore.from_settings(settings)
    except UsageError as exc:
        logger.error("%s", exc)
        return EXIT_USAGE

    runner = GuardedRunner(LockCoordinator(lock_store, clock=clock), settings, executor=executor)
    try:
        result = await runner.run(command)
    finally:
        if owns_store:
            await lock_store.close()

    logger.debug("Result: %s", result.model_dump())
    return result.exit_code


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
