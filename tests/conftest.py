"""Shared fixtures: every test gets default settings and no installed bus."""

import pytest

from pubsub.runtime_state import reset_bus
from pubsub.utils.settings_store import clear_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("PUBSUB_SETTINGS", str(tmp_path / "bus_settings.json"))
    monkeypatch.delenv("PUBSUB_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PUBSUB_ERROR_POLICY", raising=False)
    clear_settings()
    reset_bus()
    yield
    clear_settings()
    reset_bus()
