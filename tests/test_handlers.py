"""Tests for :func:`guildbot.handlers.add_handler`."""

import asyncio
import logging

from fakes import FakeClient, FakeGuild

from guildbot.handlers import add_handler, child_signal
from guildbot.session import Session


def test_faulting_handler_is_contained(session: Session, client: FakeClient, caplog) -> None:
    """A handler that raises does not stop the handlers around it."""
    seen: list[str] = []

    async def first(ctx, sess, guild) -> None:
        seen.append(f"first {guild.id}")

    async def faulty(ctx, sess, guild) -> None:
        raise ZeroDivisionError("boom")

    async def last(ctx, sess, guild) -> None:
        seen.append(f"last {guild.id}")

    async def scenario() -> None:
        stop = asyncio.Event()
        for handler in (first, faulty, last):
            add_handler(stop, session, "guild_join", handler)
        results = await asyncio.gather(
            *client.dispatch("guild_join", FakeGuild(1, "G1")), return_exceptions=True
        )
        assert results == [None, None, None]
        # the next event is still delivered to every handler
        await asyncio.gather(*client.dispatch("guild_join", FakeGuild(2, "G2")))

    with caplog.at_level(logging.ERROR, logger="guildbot"):
        asyncio.run(scenario())

    assert sorted(seen) == ["first 1", "first 2", "last 1", "last 2"]
    faults = [r for r in caplog.records if "recovered from exception" in r.getMessage()]
    assert len(faults) == 2
    assert faults[0].exc_info is not None


def test_handler_receives_session_and_context(session: Session, client: FakeClient) -> None:
    captured = {}

    async def handler(ctx, sess, value) -> None:
        captured["ctx"] = ctx
        captured["set_during"] = ctx.is_set()
        captured["session"] = sess
        captured["value"] = value

    async def scenario() -> None:
        add_handler(asyncio.Event(), session, "on_custom", handler)
        await asyncio.gather(*client.dispatch("custom", 7))

    asyncio.run(scenario())
    assert captured["session"] is session
    assert captured["value"] == 7
    assert captured["set_during"] is False
    # the per-invocation context ends with the handler
    assert captured["ctx"].is_set()


def test_context_follows_stop_signal(session: Session, client: FakeClient) -> None:
    observed = []

    async def handler(ctx, sess) -> None:
        await asyncio.wait_for(ctx.wait(), timeout=1)
        observed.append("cancelled")

    async def scenario() -> None:
        stop = asyncio.Event()
        add_handler(stop, session, "ready", handler)
        tasks = client.dispatch("ready")
        await asyncio.sleep(0)
        stop.set()
        await asyncio.gather(*tasks)

    asyncio.run(scenario())
    assert observed == ["cancelled"]


def test_events_after_stop_are_ignored(session: Session, client: FakeClient) -> None:
    calls = []

    async def handler(ctx, sess) -> None:
        calls.append(1)

    async def scenario() -> None:
        stop = asyncio.Event()
        add_handler(stop, session, "ready", handler)
        stop.set()
        await asyncio.gather(*client.dispatch("ready"))

    asyncio.run(scenario())
    assert calls == []


def test_remove_deregisters(session: Session, client: FakeClient) -> None:
    calls = []

    async def handler(ctx, sess) -> None:
        calls.append(1)

    async def scenario() -> None:
        remove = add_handler(None, session, "ready", handler)
        await asyncio.gather(*client.dispatch("ready"))
        remove()
        assert client.dispatch("ready") == []

    asyncio.run(scenario())
    assert calls == [1]


def test_child_signal_without_parent() -> None:
    async def scenario() -> asyncio.Event:
        async with child_signal(None) as ctx:
            assert not ctx.is_set()
        return ctx

    assert asyncio.run(scenario()).is_set()


def test_child_signal_with_parent_already_set() -> None:
    async def scenario() -> bool:
        parent = asyncio.Event()
        parent.set()
        async with child_signal(parent) as ctx:
            return ctx.is_set()

    assert asyncio.run(scenario())
