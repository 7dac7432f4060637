from __future__ import annotations

import sys

import pytest

from redislockrun.core.errors import ChildExecutionError
from redislockrun.services.process import ProcessExecutor


@pytest.mark.asyncio
async def test_successful_child_returns_zero():
    assert await ProcessExecutor().run(sys.executable, ["-c", "print('hi')"]) == 0


@pytest.mark.asyncio
async def test_nonzero_exit_raises_with_returncode():
    with pytest.raises(ChildExecutionError) as info:
        await ProcessExecutor().run(sys.executable, ["-c", "import sys; sys.exit(4)"])
    assert info.value.returncode == 4


@pytest.mark.asyncio
async def test_missing_binary_raises_without_returncode(tmp_path):
    missing = str(tmp_path / "no-such-command")
    with pytest.raises(ChildExecutionError) as info:
        await ProcessExecutor().run(missing, ["x"])
    assert info.value.returncode is None
    assert info.value.args_list == ["x"]
