import os
from collections.abc import Mapping
from dataclasses import dataclass

TOKEN_ENV = "DISCORD_TOKEN"
DEFAULT_API_BASE = "https://discord.com/api/v10"


@dataclass(frozen=True)
class Settings:
    # ``None`` when the variable is absent or blank
    token: str | None
    api_base: str = DEFAULT_API_BASE
    log_level: str = "INFO"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    token = env.get(TOKEN_ENV, "").strip()
    return Settings(
        token=token or None,
        api_base=env.get("DISCORD_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        log_level=env.get("GUILDBOT_LOG_LEVEL", "INFO").upper(),
    )
