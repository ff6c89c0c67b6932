"""Lifecycle helpers for Discord bots that own guild application commands.

The package exposes :class:`Bot`, which registers a fixed set of commands in
every guild the bot belongs to and removes them on shutdown, along with the
handler and interaction helpers used to build on top of it.
"""

from .bot import Bot, LifecycleState
from .core.ledger import RegistrationLedger
from .core.models import CommandSpec, RegisteredCommand
from .errors import ConnectError, GuildBotError, NoTokenError, SessionError
from .handlers import add_handler
from .interaction import setup_response, update_response
from .session import Session

__all__ = [
    "Bot",
    "CommandSpec",
    "ConnectError",
    "GuildBotError",
    "LifecycleState",
    "NoTokenError",
    "RegisteredCommand",
    "RegistrationLedger",
    "Session",
    "SessionError",
    "add_handler",
    "setup_response",
    "update_response",
]
