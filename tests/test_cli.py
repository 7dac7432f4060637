from __future__ import annotations

import pytest

from conftest import DummyExecutor, InMemoryLockStore
from redislockrun.cli import build_parser, main
from redislockrun.utils.env import ENV_FIELDS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_FIELDS:
        monkeypatch.delenv(name, raising=False)


def test_parser_keeps_command_flags_for_the_child():
    args = build_parser().parse_args(["--timeout", "5m", "rsync", "-a", "--delete", "src/", "dst/"])
    assert args.timeout == "5m"
    assert args.command == ["rsync", "-a", "--delete", "src/", "dst/"]


@pytest.mark.asyncio
async def test_success_exits_zero(store, clock):
    executor = DummyExecutor()
    code = await main(["--key", "job", "--", "echo", "hi"], store=store, executor=executor, clock=clock)
    assert code == 0
    assert executor.invocations == [("echo", ["hi"])]
    assert store.data == {}
    assert not store.closed


@pytest.mark.asyncio
async def test_held_lock_exits_one(clock):
    store = InMemoryLockStore({"lock": str(int(clock()) + 600)})
    executor = DummyExecutor()
    assert await main(["echo", "hi"], store=store, executor=executor, clock=clock) == 1
    assert executor.invocations == []


@pytest.mark.asyncio
async def test_child_failure_exits_one(store, clock):
    assert await main(["false"], store=store, executor=DummyExecutor(returncode=1), clock=clock) == 1
    assert store.data == {}


@pytest.mark.asyncio
async def test_missing_command_is_usage_error(store, clock):
    assert await main(["--timeout", "5m"], store=store, executor=DummyExecutor(), clock=clock) == 2
    assert store.calls == []


@pytest.mark.asyncio
async def test_invalid_timeout_is_usage_error(store, clock):
    assert await main(["--timeout=-1m", "echo"], store=store, executor=DummyExecutor(), clock=clock) == 2


@pytest.mark.asyncio
async def test_environment_key_is_used(monkeypatch, store, clock):
    monkeypatch.setenv("REDISLOCKRUN_KEY", "from-env")
    executor = DummyExecutor(on_run=lambda: None)
    assert await main(["-v", "echo"], store=store, executor=executor, clock=clock) == 0
    assert ("set_if_absent", "from-env") in store.calls


@pytest.mark.asyncio
async def test_invalid_redis_url_is_usage_error(monkeypatch, clock):
    monkeypatch.setenv("REDIS_URL", "cache.internal:6379")
    executor = DummyExecutor()
    assert await main(["echo", "hi"], executor=executor, clock=clock) == 2
    assert executor.invocations == []
