"""
Tests for environment-driven settings and logger setup.
"""

import logging

import pytest  # type: ignore
from pydantic import ValidationError  # type: ignore

from zoom_webinars.config.constants.zoom import DEFAULT_BASE_URL, ZoomAuthType
from zoom_webinars.config.settings import HTTPSettings, ZoomSettings, get_settings, reset_settings
from zoom_webinars.utils.logger import create_logger


@pytest.mark.unit
class TestZoomSettings:
    def test_defaults(self):
        settings = ZoomSettings.from_env()

        assert settings.auth_type is ZoomAuthType.TOKEN
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.http.max_retries == 0
        assert settings.http.rate_limit is None

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ZOOM_AUTH_TYPE", "server_to_server")
        monkeypatch.setenv("ZOOM_BASE_URL", "https://api.zoom.test/v2/")
        monkeypatch.setenv("ZOOM_ACCOUNT_ID", "acct")
        monkeypatch.setenv("ZOOM_CLIENT_ID", "id")
        monkeypatch.setenv("ZOOM_CLIENT_SECRET", "secret")
        monkeypatch.setenv("ZOOM_TIMEOUT", "5")
        monkeypatch.setenv("ZOOM_MAX_RETRIES", "3")
        monkeypatch.setenv("ZOOM_RATE_LIMIT", "20")

        settings = ZoomSettings.from_env()

        assert settings.auth_type is ZoomAuthType.SERVER_TO_SERVER
        assert settings.base_url == "https://api.zoom.test/v2"
        assert (settings.account_id, settings.client_id, settings.client_secret) == ("acct", "id", "secret")
        assert settings.http.model_dump() == HTTPSettings(timeout=5.0, max_retries=3, rate_limit=20.0).model_dump()

    def test_rejects_negative_retries(self):
        with pytest.raises(ValidationError):
            HTTPSettings(max_retries=-1)

    def test_unknown_auth_type(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ZOOM_AUTH_TYPE", "jwt")
        with pytest.raises(ValueError):
            ZoomSettings.from_env()


@pytest.mark.unit
class TestSettingsSingleton:
    def test_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ZOOM_ACCESS_TOKEN", "first")
        first = get_settings()
        monkeypatch.setenv("ZOOM_ACCESS_TOKEN", "second")

        assert get_settings() is first

        reset_settings()
        assert get_settings().access_token == "second"


@pytest.mark.unit
class TestCreateLogger:
    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ZOOM_LOG_LEVEL", "debug")
        logger = create_logger("zoom_webinars.tests.env_level")
        assert logger.level == logging.DEBUG

    def test_no_duplicate_handlers(self):
        first = create_logger("zoom_webinars.tests.handlers", "WARNING")
        second = create_logger("zoom_webinars.tests.handlers", "WARNING")

        assert first is second
        assert len(second.handlers) == 1
        assert second.propagate is False
