"""Tests for PostHog fire-and-forget capture."""

from unittest.mock import patch

import pytest

import focusforge.core.posthog as posthog_mod


@pytest.fixture(autouse=True)
def _reset_module_state():
    posthog_mod._initialized = False
    posthog_mod._environment = "development"
    yield
    posthog_mod._initialized = False
    posthog_mod._environment = "development"


def _settings(mock_settings, enabled=True, api_key="phc_test"):
    mock_settings.return_value.posthog_enabled = enabled
    mock_settings.return_value.posthog_api_key = api_key
    mock_settings.return_value.posthog_host = "https://eu.posthog.com"
    mock_settings.return_value.environment = "production"
    mock_settings.return_value.debug = False


class TestInitPosthog:
    @pytest.mark.unit
    def test_disabled_without_key(self):
        with patch("focusforge.core.posthog.get_settings") as mock_settings:
            _settings(mock_settings, api_key="")
            posthog_mod.init_posthog()

        assert posthog_mod._initialized is False

    @pytest.mark.unit
    def test_enabled_with_key(self):
        with patch("focusforge.core.posthog.get_settings") as mock_settings:
            _settings(mock_settings)
            with patch("focusforge.core.posthog._posthog") as client:
                posthog_mod.init_posthog()

        assert posthog_mod._initialized is True
        assert posthog_mod._environment == "production"
        assert client.api_key == "phc_test"


class TestShutdownPosthog:
    @pytest.mark.unit
    def test_flushes_when_initialized(self):
        posthog_mod._initialized = True

        with patch("focusforge.core.posthog._posthog") as client:
            posthog_mod.shutdown_posthog()

        client.flush.assert_called_once()
        assert posthog_mod._initialized is False

    @pytest.mark.unit
    def test_noop_when_disabled(self):
        with patch("focusforge.core.posthog._posthog") as client:
            posthog_mod.shutdown_posthog()

        client.flush.assert_not_called()


class TestCapture:
    @pytest.mark.unit
    def test_noop_when_not_initialized(self):
        with patch("focusforge.core.posthog._posthog") as client:
            posthog_mod.capture("user-1", posthog_mod.SESSION_COMPLETED, {"xp": 10})

        client.capture.assert_not_called()

    @pytest.mark.unit
    def test_sends_event_with_environment(self):
        posthog_mod._initialized = True
        posthog_mod._environment = "staging"

        with patch("focusforge.core.posthog._posthog") as client:
            posthog_mod.capture("user-1", posthog_mod.SESSION_COMPLETED, {"xp": 10})

        client.capture.assert_called_once_with(
            distinct_id="user-1",
            event="session_completed",
            properties={"environment": "staging", "xp": 10},
        )

    @pytest.mark.unit
    def test_swallows_errors(self):
        posthog_mod._initialized = True

        with patch("focusforge.core.posthog._posthog") as client:
            client.capture.side_effect = RuntimeError("network")
            posthog_mod.capture("user-1", posthog_mod.LEVEL_REACHED)
