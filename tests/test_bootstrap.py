"""Tests for the process-wide bus handle and the composition root."""

import pytest

from pubsub.bootstrap import bootstrap
from pubsub.event_bus import EventBus
from pubsub.runtime_state import get_bus, reset_bus, set_bus


class TestRuntimeState:
    """Test suite for get_bus/set_bus/reset_bus."""

    def test_get_bus_is_lazy_singleton(self):
        """Test that get_bus returns the same default bus every time."""
        bus = get_bus()
        assert isinstance(bus, EventBus)
        assert get_bus() is bus

    def test_set_bus_installs_instance(self):
        """Test that an explicitly built bus is returned afterwards."""
        bus = EventBus(error_policy="raise")
        set_bus(bus)
        assert get_bus() is bus

    def test_reset_gives_fresh_registry(self):
        """Test that reset_bus drops registered subscriptions."""
        get_bus().subscribe("x", lambda data: None)
        reset_bus()
        assert get_bus().event_names() == []


class TestBootstrap:
    """Test suite for bootstrap()."""

    @pytest.fixture
    def workdir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        # setenv first so the value loaded from .env is removed afterwards.
        monkeypatch.setenv("PUBSUB_ERROR_POLICY", "")
        monkeypatch.delenv("PUBSUB_ERROR_POLICY")
        return tmp_path

    def test_bootstrap_installs_default_bus(self, workdir, capsys):
        """Test that bootstrap builds and installs an isolating bus."""
        bus = bootstrap()

        assert get_bus() is bus
        assert bus.error_policy == "isolate"
        assert "[BOOT][INFO] Event bus ready (error_policy=isolate)" in capsys.readouterr().out

    def test_bootstrap_reads_env_file(self, workdir):
        """Test that .env values feed the settings."""
        (workdir / ".env").write_text("PUBSUB_ERROR_POLICY=raise\n")

        bus = bootstrap()

        assert bus.error_policy == "raise"

    def test_bootstrap_keeps_existing_env(self, workdir, monkeypatch):
        """Test that variables already set are not overridden by .env."""
        (workdir / ".env").write_text("PUBSUB_ERROR_POLICY=raise\n")
        monkeypatch.setenv("PUBSUB_ERROR_POLICY", "isolate")

        assert bootstrap().error_policy == "isolate"

    def test_bootstrap_rejects_bad_policy(self, workdir, monkeypatch):
        """Test that an invalid configured policy fails loudly."""
        monkeypatch.setenv("PUBSUB_ERROR_POLICY", "retry")

        with pytest.raises(ValueError):
            bootstrap()

    def test_bootstrap_enables_deep_trace_from_settings(self, workdir, monkeypatch):
        """Test that log_level DEEP turns on bus tracing."""
        monkeypatch.setenv("PUBSUB_LOG_LEVEL", "DEEP")

        assert bootstrap().deep_trace is True

    def test_bootstrap_trace_off_by_default(self, workdir):
        """Test that the default log level leaves tracing off."""
        assert bootstrap().deep_trace is False
