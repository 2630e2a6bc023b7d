import asyncio

import pytest

from pwcheck.pwned import BreachResult
from pwcheck.session import BreachCheckSession, SessionRegistry


def test_tokens_are_monotonic():
    s = BreachCheckSession()
    a, b = s.begin(), s.begin()
    assert b > a
    assert s.is_current(b)
    assert not s.is_current(a)


def test_observe_rejects_older_tokens():
    s = BreachCheckSession()
    assert s.observe(5)
    assert not s.observe(3)
    assert s.observe(5)
    assert s.is_current(5)


def test_close_makes_everything_stale():
    s = BreachCheckSession()
    t = s.begin()
    s.close()
    assert not s.is_current(t)
    assert not s.observe(t + 1)


@pytest.mark.asyncio
async def test_superseded_check_is_discarded():
    s = BreachCheckSession()
    release = asyncio.Event()

    async def slow(password):
        await release.wait()
        return BreachResult.found(len(password))

    async def fast(password):
        return BreachResult.not_found()

    first = asyncio.create_task(s.run("older", slow))
    await asyncio.sleep(0)
    second = await s.run("newer", fast)
    release.set()

    assert await first is None
    assert second == BreachResult.not_found()


@pytest.mark.asyncio
async def test_closed_session_drops_in_flight_result():
    s = BreachCheckSession()
    release = asyncio.Event()

    async def slow(password):
        await release.wait()
        return BreachResult.found(1)

    task = asyncio.create_task(s.run("pw", slow))
    await asyncio.sleep(0)
    s.close()
    release.set()
    assert await task is None


@pytest.mark.asyncio
async def test_stale_on_arrival_skips_checker():
    s = BreachCheckSession()
    s.observe(10)
    called = []

    async def checker(password):
        called.append(password)
        return BreachResult.not_found()

    assert await s.run("pw", checker, token=4) is None
    assert called == []


def test_registry_reuses_and_replaces_sessions():
    reg = SessionRegistry()
    a = reg.get("tab-1")
    assert reg.get("tab-1") is a
    reg.close("tab-1")
    assert a.closed
    assert reg.get("tab-1") is not a
    assert len(reg) == 1


def test_registry_prunes_idle_sessions():
    reg = SessionRegistry(idle_sec=0)
    a = reg.get("tab-1")
    a.touched -= 1
    reg.get("tab-2")
    assert a.closed
    assert len(reg) == 1
