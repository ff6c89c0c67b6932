"""Lifecycle of a Discord bot that owns a set of guild commands.

:class:`Bot` registers its commands in every guild it is a member of,
including guilds joined while it is running, and removes all of them again
when it shuts down.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .commands.register import register_guild_commands, unregister_commands
from .config import Settings, load_settings
from .core.ledger import RegistrationLedger
from .core.models import CommandSpec
from .errors import ConnectError, GuildBotError, NoTokenError, SessionError
from .handlers import add_handler
from .session import Session

log = logging.getLogger(__name__)

SessionFactory = Callable[[str], Session]


class LifecycleState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    SESSION_READY = "session_ready"
    CONNECTED = "connected"
    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


class Bot:
    """A Discord bot whose guild commands live exactly as long as :meth:`run`.

    ``commands`` is iterated once per guild, so it must be re-iterable; it is
    kept by reference.  ``session_factory`` receives the token and returns a
    :class:`~guildbot.session.Session`; it defaults to a real Discord session.
    """

    def __init__(
        self,
        commands: Iterable[CommandSpec | Mapping[str, Any]],
        session_factory: SessionFactory | None = None,
        settings: Settings | None = None,
    ) -> None:
        if iter(commands) is commands:
            raise TypeError("commands must be re-iterable, not a one-shot iterator")
        self.commands = commands
        self.settings = settings
        self.ledger = RegistrationLedger()
        self.state = LifecycleState.UNINITIALIZED
        self._session_factory = session_factory
        self._init_lock = threading.Lock()
        self._initialized = False
        self._session: Session | None = None
        self._error: GuildBotError | None = None
        self._ran = False
        self._halted = False

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def _init(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            try:
                self._session = self._create_session()
            except GuildBotError as exc:
                self._error = exc
            finally:
                self._initialized = True

    def _create_session(self) -> Session:
        settings = self.settings or load_settings()
        if not settings.token:
            raise NoTokenError()
        try:
            if self._session_factory is None:
                return Session(settings.token, api_base=settings.api_base)
            return self._session_factory(settings.token)
        except Exception as exc:
            raise SessionError(f"create Discord session: {exc}") from exc

    def session(self) -> Session:
        """Return the session, creating it on first use.

        Creation happens once even when called from several threads at the
        same time; a creation failure is raised again on every call.
        """
        self._init()
        if self._error is not None:
            raise self._error
        assert self._session is not None
        return self._session

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------
    def _transition(self, state: LifecycleState) -> None:
        log.debug("lifecycle %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Connect, serve guild events until ``stop`` is set, then clean up.

        Registered commands are removed before the connection closes.  Only
        startup failures are raised: :class:`~guildbot.errors.NoTokenError`,
        :class:`~guildbot.errors.SessionError` and
        :class:`~guildbot.errors.ConnectError`.  The latter is also raised,
        after cleanup, if the gateway connection dies on its own.

        A bot can only be run once.
        """
        if self._ran:
            raise RuntimeError("Bot.run may only be called once")
        self._ran = True

        try:
            session = self.session()
        except GuildBotError:
            self._transition(LifecycleState.CLOSED)
            raise
        self._transition(LifecycleState.SESSION_READY)

        stop = stop if stop is not None else asyncio.Event()
        add_handler(stop, session, "ready", self._on_ready)
        add_handler(stop, session, "guild_available", self._on_guild)
        add_handler(stop, session, "guild_join", self._on_guild)

        try:
            await session.open()
        except asyncio.CancelledError:
            await self._release(session)
            raise
        except Exception as exc:
            await self._release(session)
            raise ConnectError(f"open Discord session: {exc}") from exc
        self._transition(LifecycleState.CONNECTED)

        failure: BaseException | None = None
        try:
            self._transition(LifecycleState.RUNNING)
            failure = await self._wait(stop, session)
        finally:
            # guild events stop registering even if the gateway died first
            self._halted = True
            self._transition(LifecycleState.DRAINING)
            try:
                await self._teardown(session)
            finally:
                try:
                    await session.close()
                finally:
                    self._transition(LifecycleState.CLOSED)

        if failure is not None:
            raise ConnectError(f"open Discord session: {failure}") from failure

    async def _wait(self, stop: asyncio.Event, session: Session) -> BaseException | None:
        waiter = asyncio.create_task(stop.wait())
        watched: set[asyncio.Future[Any]] = {waiter}
        if session.gateway is not None:
            watched.add(session.gateway)
        try:
            await asyncio.wait(watched, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if stop.is_set():
            log.info("shutdown requested")
            return None
        gateway = session.gateway
        if gateway is None or gateway.cancelled():
            return None
        exc = gateway.exception()
        if exc is not None:
            log.error("gateway connection failed: %s", exc)
        else:
            log.info("gateway connection closed")
        return exc

    async def _teardown(self, session: Session) -> None:
        try:
            await unregister_commands(session, self.ledger)
        except Exception:
            log.exception("teardown did not complete")

    async def _release(self, session: Session) -> None:
        try:
            await session.close()
        except Exception:
            log.exception("failed to release session")
        self._transition(LifecycleState.CLOSED)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    async def _on_ready(self, ctx: asyncio.Event, session: Session) -> None:
        session.refresh_user()
        log.info("authenticated successfully as %s", session.user)

    async def _on_guild(self, ctx: asyncio.Event, session: Session, guild: Any) -> None:
        if self._halted:
            log.info("ignoring guild %s: shutting down", guild.id)
            return
        await register_guild_commands(
            session,
            self.ledger,
            self.commands,
            guild.id,
            getattr(guild, "name", None),
        )


__all__ = ["Bot", "LifecycleState"]
