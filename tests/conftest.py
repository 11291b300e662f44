"""Shared pytest fixtures."""

import pytest

from snipesniff.logging.context import clear_log_context
from tests.helpers import EngineFactory, ManualClock


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Minimal valid environment for load_config()."""
    monkeypatch.setenv("SNIPE_API_TOKEN", "env-token-123")
    monkeypatch.delenv("SNIPE_API_ADDRESS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def engine_factory(manual_clock):
    return EngineFactory(manual_clock)


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()
