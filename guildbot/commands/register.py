"""Registration of application commands into guilds and their removal."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.ledger import RegistrationLedger
from ..core.models import CommandSpec, RegisteredCommand, command_payload
from ..session import Session

log = logging.getLogger(__name__)


async def register_guild_commands(
    session: Session,
    ledger: RegistrationLedger,
    commands: Iterable[CommandSpec | Mapping[str, Any]],
    guild_id: str | int,
    guild_name: str | None = None,
) -> int:
    """Register every command in ``commands`` into one guild.

    A failed registration is logged and the next command is attempted.
    Returns the number of commands recorded in ``ledger``.
    """
    guild_id = str(guild_id)
    log.info("entered guild %s (%s)", guild_id, guild_name)

    user_id = session.user_id

    recorded = 0
    async with ledger.lock:
        if ledger.drained:
            log.info("not registering commands in guild %s: shutting down", guild_id)
            return 0

        for command in commands:
            payload = command_payload(command)
            name = payload.get("name")
            try:
                data = await session.api.create_guild_command(user_id, guild_id, payload)
                registered = RegisteredCommand.from_payload(data, guild_id=guild_id)
            except Exception as exc:
                log.error(
                    "failed to register command %s in guild %s: %s", name, guild_id, exc
                )
                continue

            if ledger.record(registered):
                recorded += 1
                log.info("command %s registered in guild %s", name, guild_id)
            else:
                log.info("command %s already registered in guild %s", name, guild_id)
    return recorded


async def unregister_commands(session: Session, ledger: RegistrationLedger) -> int:
    """Delete every command held in ``ledger`` and drain it.

    Each entry gets exactly one attempt; failures are logged and do not stop
    the remaining deletions.  Returns the number of successful deletions.
    """
    user_id = session.user_id

    removed = 0
    async with ledger.lock:
        entries = ledger.drain()
        for index, cmd in enumerate(entries):
            try:
                await session.api.delete_guild_command(user_id, cmd.guild_id, cmd.id)
            except asyncio.CancelledError:
                skipped = entries[index:]
                log.error(
                    "teardown cancelled, %d commands left registered: %s",
                    len(skipped),
                    ", ".join(f"{c.name} in guild {c.guild_id}" for c in skipped),
                )
                raise
            except Exception as exc:
                log.error(
                    "failed to unregister command %s in guild %s: %s",
                    cmd.name,
                    cmd.guild_id,
                    exc,
                )
                continue
            removed += 1
            log.info("command %s unregistered from guild %s", cmd.name, cmd.guild_id)

    if removed != len(entries):
        log.warning("unregistered %d of %d commands", removed, len(entries))
    return removed
