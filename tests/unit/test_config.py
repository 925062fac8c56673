"""Unit tests for settings loading."""
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

import pytest

from festival_admin.utils import config
from festival_admin.utils.config import (
    EndBeforeStartPolicy,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)
from festival_admin.utils.date_utils import normalize_schedule


ENV_VARS = [
    "FESTIVAL_API_BASE_URL",
    "FESTIVAL_API_TIMEOUT",
    "FESTIVAL_TIMEZONE",
    "FESTIVAL_END_BEFORE_START",
    "FESTIVAL_TITLE",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate each test from the real environment and any .env file."""
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


class TestLoadSettings:
    """Test load_settings function."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.api_base_url == "http://localhost:5000"
        assert settings.request_timeout == 10.0
        assert settings.end_before_start is EndBeforeStartPolicy.REJECT
        assert settings.festival_title == "DU Lit 2025"
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FESTIVAL_API_BASE_URL", "https://api.festival.example/")
        monkeypatch.setenv("FESTIVAL_API_TIMEOUT", "2.5")
        monkeypatch.setenv("FESTIVAL_TIMEZONE", "Asia/Kolkata")
        monkeypatch.setenv("FESTIVAL_END_BEFORE_START", "Roll_Over")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.api_base_url == "https://api.festival.example"
        assert settings.request_timeout == 2.5
        assert settings.timezone == ZoneInfo("Asia/Kolkata")
        assert settings.end_before_start is EndBeforeStartPolicy.ROLL_OVER
        assert settings.log_level == "DEBUG"

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("FESTIVAL_API_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="FESTIVAL_API_TIMEOUT"):
            load_settings()

    def test_bad_policy(self, monkeypatch):
        monkeypatch.setenv("FESTIVAL_END_BEFORE_START", "ignore")

        with pytest.raises(ValueError, match="FESTIVAL_END_BEFORE_START"):
            load_settings()

    def test_bad_scheme(self, monkeypatch):
        monkeypatch.setenv("FESTIVAL_API_BASE_URL", "ftp://festival")

        with pytest.raises(ValueError, match="http"):
            load_settings()


class TestSettings:
    """Test Settings dataclass."""

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValueError, match="timeout"):
            Settings(request_timeout=0)

    def test_local_timezone_when_unset(self):
        assert isinstance(Settings().timezone, tzinfo)

    def test_get_settings_is_cached_until_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("FESTIVAL_TITLE", "Other Fest")

        assert get_settings() is first

        reset_settings()
        assert get_settings().festival_title == "Other Fest"


class TestLocalTimezone:
    """Test the default editor timezone."""

    def test_unset_uses_machine_zone(self, monkeypatch):
        london = ZoneInfo("Europe/London")
        monkeypatch.setattr(config, "get_localzone", lambda: london)

        assert Settings().timezone is london

    def test_local_zone_follows_dst(self, monkeypatch):
        """Winter and summer dates in the same zone get different UTC offsets."""
        monkeypatch.setattr(config, "get_localzone", lambda: ZoneInfo("Europe/London"))
        tz = Settings().timezone

        winter_start, _ = normalize_schedule(date(2025, 1, 10), "09:00", "10:00", tz)
        summer_start, _ = normalize_schedule(date(2025, 7, 10), "09:00", "10:00", tz)

        assert winter_start == datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
        assert summer_start == datetime(2025, 7, 10, 8, 0, tzinfo=timezone.utc)
