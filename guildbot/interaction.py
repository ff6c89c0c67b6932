"""Helpers for answering slash command interactions."""

from __future__ import annotations

from typing import Any

from .session import Session

DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
EPHEMERAL = 1 << 6


async def setup_response(session: Session, interaction: Any) -> None:
    """Acknowledge ``interaction`` with a deferred, ephemeral placeholder."""
    await session.api.create_interaction_response(
        str(interaction.id),
        interaction.token,
        {
            "type": DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE,
            "data": {"content": "Working on it...", "flags": EPHEMERAL},
        },
    )


async def update_response(session: Session, interaction: Any, content: str) -> None:
    """Replace the content of a response set up by :func:`setup_response`."""
    await session.api.edit_original_response(
        str(interaction.application_id), interaction.token, {"content": content}
    )
