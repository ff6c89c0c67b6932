"""Shared fixtures built on the fakes in :mod:`fakes`."""

from __future__ import annotations

import pytest
from fakes import FakeAdapter, FakeClient

from guildbot.session import Session


@pytest.fixture
def journal() -> list[str]:
    return []


@pytest.fixture
def client(journal: list[str]) -> FakeClient:
    return FakeClient(journal=journal)


@pytest.fixture
def adapter(journal: list[str]) -> FakeAdapter:
    return FakeAdapter(journal=journal)


@pytest.fixture
def session(client: FakeClient, adapter: FakeAdapter) -> Session:
    return Session("TOKEN", client=client, api=adapter)
