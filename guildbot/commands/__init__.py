from .register import register_guild_commands, unregister_commands

__all__ = ["register_guild_commands", "unregister_commands"]
