"""
Unit tests for environment configuration.
"""

from pathlib import Path

import pytest

from core import config
from core.memory import DEFAULT_WEIGHTS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(config.WEIGHT_ENV_VARS) + [
        "SRS_LOG_DIR", "SRS_LOG_LEVEL", "SRS_SESSION_SIZE", "SRS_ABORT_ON_PERSIST_FAILURE",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = config.load_settings()
        assert settings.log_dir == Path("logs/sessions")
        assert settings.log_level == "INFO"
        assert settings.session_size == 20
        assert settings.abort_on_persist_failure is False
        assert settings.weights == DEFAULT_WEIGHTS

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SRS_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("SRS_LOG_LEVEL", "debug")
        monkeypatch.setenv("SRS_SESSION_SIZE", "5")
        monkeypatch.setenv("SRS_ABORT_ON_PERSIST_FAILURE", "yes")
        monkeypatch.setenv("SRS_SPEED_WEIGHT", "0.5")
        monkeypatch.setenv("SRS_STREAK_THRESHOLD", "4")

        settings = config.load_settings()
        assert settings.log_dir == tmp_path
        assert settings.log_level == "DEBUG"
        assert settings.session_size == 5
        assert settings.abort_on_persist_failure is True
        assert settings.weights.speed_weight == 0.5
        assert settings.weights.streak_threshold == 4
        assert settings.weights.bonus_weight == DEFAULT_WEIGHTS.bonus_weight

    @pytest.mark.parametrize("name, value", [
        ("SRS_SPEED_WEIGHT", "fast"),
        ("SRS_STREAK_THRESHOLD", "2.5"),
        ("SRS_ABORT_ON_PERSIST_FAILURE", "maybe"),
        ("SRS_SESSION_SIZE", "0"),
        ("SRS_REACTION_TIME_MS", "0"),
        ("SRS_SPEED_MULTIPLIER", "-1"),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match=name):
            config.load_settings()


class TestLogging:
    def test_configure_logging(self):
        from loguru import logger

        messages = []
        config.configure_logging("WARNING", sink=messages.append)
        logger.info("hidden")
        logger.warning("shown")
        assert len(messages) == 1
        assert "shown" in messages[0]
