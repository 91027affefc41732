"""Shared fixtures.

Every test that could reach the network points the relay and archive
settings at ``.test`` hosts so that an unmatched route fails loudly under
``respx`` instead of leaving the machine.
"""

from __future__ import annotations

import pytest

from samples import ARCHIVE_API, RELAY_ONE, RELAY_TWO


@pytest.fixture
def fetch_settings(monkeypatch: pytest.MonkeyPatch):
    """Point the fetch chain at fake relays and a fake archive API."""
    monkeypatch.setattr("newsdesk.config.settings.proxy_templates", (RELAY_ONE, RELAY_TWO))
    monkeypatch.setattr("newsdesk.config.settings.archive_api_url", ARCHIVE_API)
    yield


@pytest.fixture
def single_relay(monkeypatch: pytest.MonkeyPatch):
    """Feed sources route through exactly one fake relay."""
    monkeypatch.setattr("newsdesk.config.settings.proxy_templates", (RELAY_ONE,))
    yield
