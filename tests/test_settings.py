"""Tests for settings validation."""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError
from tzlocal import get_localzone

from app.shared.config.settings import Settings


def test_defaults_normalised(test_settings):
    assert test_settings.is_testing
    assert test_settings.LOG_FORMAT == "text"
    assert test_settings.reminder_timezone == ZoneInfo("UTC")


def test_local_timezone_when_unset(tmp_path):
    settings = Settings(TIMEZONE=None, PHOTO_STORAGE_DIR=tmp_path)
    assert settings.reminder_timezone == get_localzone()


@pytest.mark.parametrize(
    "overrides",
    [
        {"TIMEZONE": "Mars/Olympus_Mons"},
        {"DEFAULT_REMINDER_HOUR": 24},
        {"DEFAULT_REMINDER_MINUTE": 60},
        {"ENVIRONMENT": "qa"},
        {"LOG_LEVEL": "chatty"},
        {"LOG_FORMAT": "xml"},
        {"REMINDER_RECONCILE_INTERVAL_MINUTES": -1},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)
