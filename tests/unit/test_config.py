"""
Tests de la configuration pydantic-settings.
"""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from romart.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isole les tests des variables ROMART_ de l'environnement."""
    for key in list(os.environ):
        if key.startswith("ROMART_"):
            monkeypatch.delenv(key)


class TestSettingsDefaults:
    """Valeurs par defaut."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.system_id is None
        assert settings.media_type == "box-2D"
        assert settings.region_priority == ["us", "wor", "eu", "jp"]
        assert settings.skip_existing is True
        assert settings.user_agent == "Wget/1.21.2"
        assert settings.request_timeout == 30.0
        assert settings.libretro.enabled is True
        assert settings.libretro.priority == 1
        assert settings.screenscraper.enabled is False
        assert settings.screenscraper_enabled is False


class TestSettingsEnvironment:
    """Chargement depuis les variables d'environnement."""

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROMART_SYSTEM_ID", "4")
        monkeypatch.setenv("ROMART_MEDIA_TYPE", "ss")
        monkeypatch.setenv("ROMART_REGION_PRIORITY", '["jp", "us"]')

        settings = Settings(_env_file=None)

        assert settings.system_id == 4
        assert settings.media_type == "ss"
        assert settings.region_priority == ["jp", "us"]

    def test_nested_screenscraper_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROMART_SCREENSCRAPER__ENABLED", "true")
        monkeypatch.setenv("ROMART_SCREENSCRAPER__CREDENTIALS__DEV_ID", "dev")
        monkeypatch.setenv("ROMART_SCREENSCRAPER__CREDENTIALS__DEV_PASSWORD", "devpwd")
        monkeypatch.setenv("ROMART_SCREENSCRAPER__CREDENTIALS__USER_ID", "user")
        monkeypatch.setenv("ROMART_SCREENSCRAPER__CREDENTIALS__USER_PASSWORD", "pwd")

        settings = Settings(_env_file=None)

        assert settings.screenscraper_enabled is True
        assert settings.screenscraper.credentials is not None
        assert settings.screenscraper.credentials.user_id == "user"

    def test_enabled_without_credentials(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROMART_SCREENSCRAPER__ENABLED", "true")

        assert Settings(_env_file=None).screenscraper_enabled is False


class TestSettingsValidation:
    """Validation des valeurs."""

    def test_expands_home(self) -> None:
        settings = Settings(_env_file=None, download_dir="~/roms")
        assert settings.download_dir == Path.home() / "roms"

    def test_timeout_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, request_timeout_ms=10)

    def test_rate_limit_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, screenscraper={"rate_limit_ms": 50})
