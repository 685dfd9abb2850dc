"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from kill_on_startup.config import KillOnStartupSettings, reset_default_values

_SETTINGS_ENV = (
    "KILL_ON_STARTUP_CONFIRMATION_DISPLAY_SECONDS",
    "KILL_ON_STARTUP_DEFAULT_GRACE_PERIOD_SECONDS",
    "KILL_ON_STARTUP_CUSTOM_MESSAGE",
    "KILL_ON_STARTUP_CUSTOM_URL",
    "KILL_ON_STARTUP_GRACEFUL_TIMEOUT_SECONDS",
    "KILL_ON_STARTUP_FORCE_KILL_TIMEOUT_SECONDS",
    "KILL_ON_STARTUP_LOG_DIR",
    "KILL_ON_STARTUP_LOG_APPEND",
    "KILL_ON_STARTUP_QUIET_CONSOLE",
)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Keep host environment and .env files out of every test."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("kill_on_startup.config.runtime._DOTENV_CANDIDATES", (tmp_path / ".env",))
    reset_default_values()
    yield
    reset_default_values()


@pytest.fixture
def fast_settings() -> KillOnStartupSettings:
    """Settings with a short confirmation window so timer tests stay quick."""
    return KillOnStartupSettings(confirmation_display_seconds=0.05)
