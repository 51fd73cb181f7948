"""
Unit tests for configuration settings
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.errors import ConfigError
from config import settings


@pytest.fixture
def parse_errors(monkeypatch):
    errors = []
    monkeypatch.setattr(settings, '_PARSE_ERRORS', errors)
    return errors


class TestEnvNumber:
    """Tests for _env_number function."""

    def test_reads_value(self, monkeypatch, parse_errors):
        monkeypatch.setenv('SAVE_DELAY_SECONDS', '2.5')

        assert settings._env_number('SAVE_DELAY_SECONDS', 5) == 2.5
        assert parse_errors == []

    def test_missing_or_blank_uses_default(self, monkeypatch, parse_errors):
        monkeypatch.delenv('SELENIUM_TIMEOUT', raising=False)
        assert settings._env_number('SELENIUM_TIMEOUT', 30, int) == 30

        monkeypatch.setenv('SELENIUM_TIMEOUT', '  ')
        assert settings._env_number('SELENIUM_TIMEOUT', 30, int) == 30
        assert parse_errors == []

    def test_bad_value_is_recorded_not_raised(self, monkeypatch, parse_errors):
        monkeypatch.setenv('SAVE_DELAY_SECONDS', 'abc')

        assert settings._env_number('SAVE_DELAY_SECONDS', 5) == 5.0
        assert parse_errors == ["SAVE_DELAY_SECONDS must be a number, got 'abc'"]

    def test_fractional_integer_is_recorded(self, monkeypatch, parse_errors):
        monkeypatch.setenv('LOG_RETENTION_DAYS', '1.5')

        assert settings._env_number('LOG_RETENTION_DAYS', 14, int) == 14
        assert len(parse_errors) == 1


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_defaults_are_valid(self, parse_errors):
        assert settings.validate_config() is True

    def test_unparsable_value_is_config_error(self, parse_errors):
        parse_errors.append("SAVE_DELAY_SECONDS must be a number, got 'abc'")

        with pytest.raises(ConfigError, match="SAVE_DELAY_SECONDS must be a number"):
            settings.validate_config()

    def test_saving_timeout_above_cap(self, monkeypatch, parse_errors):
        monkeypatch.setattr(settings, 'SAVING_TIMEOUT_SECONDS', 90.0)

        with pytest.raises(ConfigError, match="SAVING_TIMEOUT_SECONDS"):
            settings.validate_config()
