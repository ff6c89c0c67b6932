"""In-memory record of commands awaiting cleanup."""

from __future__ import annotations

import asyncio

from .models import RegisteredCommand


class RegistrationLedger:
    """Commands registered during this process, in the order they were recorded.

    Every mutation must happen while holding :attr:`lock`.  Guild events
    hold it for a whole guild's batch and teardown holds it for the whole
    drain, so the two never interleave.  Nothing is persisted: a restarted
    process starts with an empty ledger.
    """

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self._entries: list[RegisteredCommand] = []
        self._keys: set[tuple[str, str]] = set()
        self.drained = False

    def _check_locked(self) -> None:
        if not self.lock.locked():
            raise RuntimeError("ledger lock must be held")

    def record(self, entry: RegisteredCommand) -> bool:
        """Append ``entry``; return ``False`` if it is already recorded."""
        self._check_locked()
        if self.drained:
            raise RuntimeError("ledger has already been drained")
        key = (entry.guild_id, entry.id)
        if key in self._keys:
            return False
        self._keys.add(key)
        self._entries.append(entry)
        return True

    def drain(self) -> list[RegisteredCommand]:
        """Remove and return every entry.  Only the first call returns anything."""
        self._check_locked()
        entries, self._entries = self._entries, []
        self._keys.clear()
        self.drained = True
        return entries

    def entries(self) -> tuple[RegisteredCommand, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
