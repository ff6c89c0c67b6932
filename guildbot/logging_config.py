import logging
import sys
from typing import TextIO

NOISY_LOGGERS = ("discord", "discord.client", "discord.gateway", "discord.http", "httpx")


def setup_logging(level: int | str = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Configure the ``guildbot`` logger once and return it."""
    logger = logging.getLogger("guildbot")
    if logger.handlers:
        return logger  # already configured
    logger.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    # gateway chatter and one INFO line per REST request; keep them quiet
    # unless we are debugging
    quiet = logging.DEBUG if logger.level == logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return logger
