"""Child process execution with inherited stdout/stderr."""

from __future__ import annotations

import asyncio
from typing import Sequence

from redislockrun.core.errors import ChildExecutionError
from redislockrun.utils.logging import get_logger


class ProcessExecutor:
    """Spawn one command and wait for it. No supervision beyond start/wait."""

    def __init__(self) -> None:
        self.logger = get_logger("ProcessExecutor")

    async def run(self, name: str, args: Sequence[str]) -> int:
        try:
            proc = await asyncio.create_subprocess_exec(name, *args)
        except OSError as exc:
            raise ChildExecutionError(name, args, None, str(exc)) from exc

        self.logger.debug("Started %s with PID %s", name, proc.pid)
        returncode = await proc.wait()
        if returncode != 0:
            raise ChildExecutionError(name, args, returncode, f"exit status {returncode}")
        return returncode
