"""Data models for application commands.

:class:`CommandSpec` describes a command the embedding application wants in
every guild; :class:`RegisteredCommand` is what Discord handed back after a
successful registration.  Both are immutable :mod:`pydantic` models.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CHAT_INPUT = 1


class CommandSpec(BaseModel):
    """An application command to register in each guild.

    Attributes
    ----------
    name:
        Command name as typed by users after ``/``.
    description:
        Text shown in the command picker.
    options:
        Raw option objects passed through to Discord unchanged.
    type:
        Application command type; defaults to a chat input command.

    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    options: list[dict[str, Any]] = Field(default_factory=list)
    type: int = CHAT_INPUT

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump()
        if not payload["options"]:
            del payload["options"]
        return payload


class RegisteredCommand(BaseModel):
    """A command successfully registered in a single guild."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    guild_id: str
    name: str
    application_id: str | None = None

    @classmethod
    def from_payload(
        cls, data: Mapping[str, Any], guild_id: str | int | None = None
    ) -> RegisteredCommand:
        """Build from a create-command response.

        ``guild_id`` fills in the guild when the response omits it.
        """
        fields = dict(data)
        if fields.get("guild_id") is None:
            fields["guild_id"] = guild_id
        for key in ("id", "guild_id", "application_id"):
            if fields.get(key) is not None:
                fields[key] = str(fields[key])
        return cls.model_validate(fields)


def command_payload(command: CommandSpec | Mapping[str, Any]) -> dict[str, Any]:
    """Return the request body for ``command``."""
    if isinstance(command, CommandSpec):
        return command.to_payload()
    return dict(command)
