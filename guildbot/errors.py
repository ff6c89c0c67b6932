"""Exceptions raised to code embedding :class:`guildbot.bot.Bot`.

Only startup failures surface as exceptions.  Failures while registering or
unregistering individual commands, and faults inside event handlers, are
logged and never raised.
"""

from __future__ import annotations

from .config import TOKEN_ENV


class GuildBotError(Exception):
    """Base class for all errors raised by :mod:`guildbot`."""


class NoTokenError(GuildBotError):
    """The bot token could not be found in the environment."""

    def __init__(self, message: str = f"{TOKEN_ENV} environment variable not set") -> None:
        super().__init__(message)


class SessionError(GuildBotError):
    """The Discord session could not be created or is not authenticated."""


class ConnectError(GuildBotError):
    """The connection to Discord could not be opened or was lost fatally."""
