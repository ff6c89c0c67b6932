from __future__ import annotations

import asyncio
import signal
from typing import Any

from .bot import Bot
from .config import load_settings
from .errors import GuildBotError
from .core.models import CommandSpec
from .handlers import add_handler
from .interaction import setup_response, update_response
from .logging_config import setup_logging
from .session import Session

COMMANDS = (CommandSpec(name="ping", description="Check that the bot is responding"),)


async def on_interaction(ctx: asyncio.Event, session: Session, interaction: Any) -> None:
    data = interaction.data or {}
    if data.get("name") != "ping":
        return
    await setup_response(session, interaction)
    await update_response(session, interaction, "Pong!")


def main() -> int:
    settings = load_settings()
    log = setup_logging(settings.log_level)
    if not settings.token:
        log.error(
            "DISCORD_TOKEN is not set. "
            "Export it in your environment before running."
        )
        return 2
    bot = Bot(COMMANDS, settings=settings)
    try:
        session = bot.session()
    except GuildBotError as exc:
        log.error("%s", exc)
        return 2

    async def runner() -> int:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except NotImplementedError:  # pragma: no cover - Windows
                pass
        add_handler(stop, session, "interaction", on_interaction)
        await bot.run(stop)
        log.info("Shut down cleanly")
        return 0

    try:
        return asyncio.run(runner())
    except GuildBotError as exc:
        log.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        log.info("Shutting down...")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
