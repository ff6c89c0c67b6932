"""Discord adapter implementing the :class:`~guildbot.adapters.base.Adapter`.

Application commands are registered through Discord's HTTP API rather than
through ``discord.py``'s command tree so that each guild can be given its
own registrations and cleaned up individually.  :mod:`httpx` keeps the
implementation fully asynchronous.
"""

from __future__ import annotations

from typing import Any

import httpx

from ..config import DEFAULT_API_BASE
from .base import Adapter


class DiscordAdapter(Adapter):
    """Adapter that sends requests directly to the Discord HTTP API."""

    def __init__(
        self,
        token: str,
        client: httpx.AsyncClient | None = None,
        api_base: str = DEFAULT_API_BASE,
    ) -> None:
        """Store authentication ``token`` and optional HTTP ``client``."""
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.client = client or httpx.AsyncClient()

    def _auth(self) -> dict[str, str]:
        return {"Authorization": f"Bot {self.token}"}

    # ------------------------------------------------------------------
    async def create_guild_command(
        self, application_id: str, guild_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Create (or overwrite, by name) a guild command.

        Parameters
        ----------
        application_id:
            Identifier of the application owning the command.
        guild_id:
            Guild the command is scoped to.
        payload:
            Command definition as accepted by Discord.

        """
        url = f"{self.api_base}/applications/{application_id}/guilds/{guild_id}/commands"
        response = await self.client.post(url, json=payload, headers=self._auth())
        response.raise_for_status()
        data: dict[str, Any] = response.json()
        return data

    async def delete_guild_command(
        self, application_id: str, guild_id: str, command_id: str
    ) -> None:
        """Delete a guild command."""
        url = (
            f"{self.api_base}/applications/{application_id}"
            f"/guilds/{guild_id}/commands/{command_id}"
        )
        response = await self.client.delete(url, headers=self._auth())
        response.raise_for_status()

    async def create_interaction_response(
        self, interaction_id: str, token: str, payload: dict[str, Any]
    ) -> None:
        # Interaction webhooks are authenticated by the token in the path.
        url = f"{self.api_base}/interactions/{interaction_id}/{token}/callback"
        response = await self.client.post(url, json=payload)
        response.raise_for_status()

    async def edit_original_response(
        self, application_id: str, token: str, payload: dict[str, Any]
    ) -> None:
        url = f"{self.api_base}/webhooks/{application_id}/{token}/messages/@original"
        response = await self.client.patch(url, json=payload)
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
