"""Base adapter interface for the platform REST calls the bot needs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Adapter(ABC):
    """Abstract adapter for application command and interaction endpoints."""

    @abstractmethod
    async def create_guild_command(
        self, application_id: str, guild_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Register a command in ``guild_id`` and return the created command."""

    @abstractmethod
    async def delete_guild_command(
        self, application_id: str, guild_id: str, command_id: str
    ) -> None:
        """Remove a previously registered command from ``guild_id``."""

    @abstractmethod
    async def create_interaction_response(
        self, interaction_id: str, token: str, payload: dict[str, Any]
    ) -> None:
        """Send the initial response to an interaction."""

    @abstractmethod
    async def edit_original_response(
        self, application_id: str, token: str, payload: dict[str, Any]
    ) -> None:
        """Edit the initial response of an interaction."""

    async def close(self) -> None:
        """Release any resources held by the adapter."""
