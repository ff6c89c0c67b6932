"""Authenticated connection to Discord shared by every component.

A :class:`Session` pairs the gateway client, which delivers events, with the
REST adapter used to register commands and answer interactions.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

import discord
from discord import app_commands
from discord.ext import commands

from .adapters.base import Adapter
from .adapters.discord import DiscordAdapter
from .config import DEFAULT_API_BASE
from .errors import SessionError

log = logging.getLogger(__name__)


class _RestCommandTree(app_commands.CommandTree):
    """Command tree that stays quiet about commands registered over REST."""

    async def on_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, app_commands.CommandNotFound):
            return
        await super().on_error(interaction, error)


class GatewayClient(commands.Bot):
    """``discord.py`` client used only for the gateway connection and events."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the client with the minimal intents required."""
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        # Guild events are all we need; message content intent not needed.
        intents.message_content = False
        super().__init__(
            command_prefix=kwargs.pop("command_prefix", commands.when_mentioned),
            intents=intents,
            tree_cls=_RestCommandTree,
            **kwargs,
        )


def _check_token(token: str) -> None:
    if not token or not token.strip():
        raise ValueError("token is empty")
    if any(ch.isspace() for ch in token):
        raise ValueError("token contains whitespace")


class Session:
    """Gateway client plus REST adapter, authenticated with one bot token."""

    def __init__(
        self,
        token: str,
        client: Any | None = None,
        api: Adapter | None = None,
        api_base: str = DEFAULT_API_BASE,
    ) -> None:
        _check_token(token)
        self.token = token
        self.client = client if client is not None else GatewayClient()
        self.api = api if api is not None else DiscordAdapter(token, api_base=api_base)
        self.state_lock = threading.RLock()
        self.gateway: asyncio.Task[None] | None = None
        self._user: Any | None = None
        self._closed = False

    @property
    def user(self) -> Any | None:
        with self.state_lock:
            return self._user

    @property
    def user_id(self) -> str:
        """Identifier of the bot user; also used as the application id."""
        with self.state_lock:
            user = self._user
        if user is None:
            raise SessionError("session is not authenticated")
        return str(user.id)

    def refresh_user(self) -> None:
        """Capture the authenticated identity from the gateway client."""
        with self.state_lock:
            self._user = self.client.user

    async def open(self) -> None:
        """Authenticate, then run the gateway connection in the background."""
        await self.client.login(self.token)
        self.refresh_user()
        self.gateway = asyncio.create_task(
            self.client.connect(reconnect=True), name="guildbot-gateway"
        )

    async def close(self) -> None:
        """Close the gateway and the REST adapter.  Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.client.close()
        finally:
            if self.gateway is not None:
                if not self.gateway.done():
                    self.gateway.cancel()
                # Any gateway failure has already been reported by the caller.
                await asyncio.gather(self.gateway, return_exceptions=True)
            await self.api.close()
        log.debug("session closed")

    @property
    def closed(self) -> bool:
        return self._closed
