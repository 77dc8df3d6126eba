"""Shared fixtures for AI module tests."""
from unittest.mock import MagicMock, patch

import pytest


# =============================================================================
# Mock Settings Fixtures
# =============================================================================


@pytest.fixture
def mock_settings_helicone_enabled():
    """Mock settings with Helicone enabled."""
    with patch("livora_api.ai.client_factory.settings") as mock:
        mock.OPENAI_API_KEY = "sk-test-openai"
        mock.HELICONE_ENABLED = True
        mock.HELICONE_API_KEY = "sk-test-helicone"
        mock.ENVIRONMENT = "test"
        yield mock


@pytest.fixture
def mock_settings_helicone_disabled():
    """Mock settings with Helicone disabled."""
    with patch("livora_api.ai.client_factory.settings") as mock:
        mock.OPENAI_API_KEY = "sk-test-openai"
        mock.HELICONE_ENABLED = False
        mock.HELICONE_API_KEY = None
        mock.ENVIRONMENT = "development"
        yield mock


@pytest.fixture
def mock_openai_class():
    """Patch the OpenAI client class so no HTTP client is built."""
    with patch("openai.OpenAI") as mock_class:
        mock_class.return_value = MagicMock()
        yield mock_class


@pytest.fixture
def no_sleep():
    """Skip tenacity backoff waits; yields the patched sleep."""
    with patch("tenacity.nap.time.sleep") as mock_sleep:
        yield mock_sleep
