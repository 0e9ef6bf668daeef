# tests/test_config.py
from datetime import time

import pytest
from pydantic import ValidationError

from cpe_calculator.core.config import Settings, get_settings


def test_settings_defaults(settings):
    assert settings.SESSION_START is None
    assert settings.SESSION_END is None
    assert settings.ROUNDING_INCREMENT == 0.5
    assert settings.MATCH_THRESHOLD == 0.65
    assert settings.AMBIGUITY_GAP == 0.2
    assert settings.MAX_MATCH_CANDIDATES == 3


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("SESSION_START", "09:00")
    monkeypatch.setenv("SESSION_END", "10:30")
    monkeypatch.setenv("ROUNDING_INCREMENT", "1.0")

    settings = get_settings()

    assert settings.SESSION_START == time(9, 0)
    assert settings.SESSION_END == time(10, 30)
    assert settings.ROUNDING_INCREMENT == 1.0
    # cached
    assert get_settings() is settings


def test_settings_reject_unsupported_increment():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ROUNDING_INCREMENT=0.25)


def test_settings_reject_out_of_range_threshold():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, MATCH_THRESHOLD=1.5)
