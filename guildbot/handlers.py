"""Event handler registration with fault containment."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from .session import Session

log = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[None]]


@contextlib.asynccontextmanager
async def child_signal(parent: asyncio.Event | None) -> AsyncIterator[asyncio.Event]:
    """Yield an event that is set once ``parent`` is set or the block exits."""
    child = asyncio.Event()
    watcher: asyncio.Task[None] | None = None
    if parent is not None:
        if parent.is_set():
            child.set()
        else:

            async def propagate() -> None:
                await parent.wait()
                child.set()

            watcher = asyncio.create_task(propagate())
    try:
        yield child
    finally:
        child.set()
        if watcher is not None:
            watcher.cancel()


def add_handler(
    stop: asyncio.Event | None,
    session: Session,
    event: str,
    handler: Handler,
) -> Callable[[], None]:
    """Subscribe ``handler`` to ``event`` on the session's gateway client.

    The handler is called as ``handler(ctx, session, *event_args)`` where
    ``ctx`` is an :class:`asyncio.Event` that is set when ``stop`` fires or
    when the handler returns.  An exception raised by the handler is logged
    with its traceback and does not reach the client, so later events are
    still delivered.  Events arriving after ``stop`` is set are ignored.

    Returns a callable that removes the subscription.
    """
    name = event if event.startswith("on_") else f"on_{event}"

    async def wrapper(*args: Any) -> None:
        if stop is not None and stop.is_set():
            log.debug("ignoring %s after shutdown was requested", name)
            return
        try:
            async with child_signal(stop) as ctx:
                await handler(ctx, session, *args)
        except Exception:
            log.exception("recovered from exception in %s handler %r", name, handler)

    session.client.add_listener(wrapper, name)

    def remove() -> None:
        session.client.remove_listener(wrapper, name)

    return remove
