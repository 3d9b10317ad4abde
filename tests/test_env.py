"""
Tests for settings and .env loading.
"""

import os
import pytest

from jobboard.env import ConfigError, Settings, load_env


class TestSettings:
    """Test settings parsing and checks."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.debounce_ms == 500
        assert settings.debounce_seconds == 0.5
        assert settings.upload_latency == 2.0
        assert settings.upload_success_rate == 0.9
        assert settings.save_latency == 1.5
        assert (settings.points_min, settings.points_max) == (10, 50)
        assert settings.initial_points == 450

    def test_overrides(self):
        settings = Settings.from_env({
            "JOBBOARD_DEBOUNCE_MS": "250",
            "JOBBOARD_UPLOAD_SUCCESS_RATE": "0.5",
            "JOBBOARD_POINTS_MAX": "80",
            "JOBBOARD_LOG_LEVEL": "debug",
        })
        assert settings.debounce_seconds == 0.25
        assert settings.upload_success_rate == 0.5
        assert settings.points_max == 80
        assert settings.log_level == "debug"

    def test_blank_value_falls_back_to_default(self):
        assert Settings.from_env({"JOBBOARD_DEBOUNCE_MS": " "}).debounce_ms == 500

    @pytest.mark.parametrize("env", [
        {"JOBBOARD_DEBOUNCE_MS": "soon"},
        {"JOBBOARD_UPLOAD_LATENCY": "fast"},
        {"JOBBOARD_UPLOAD_SUCCESS_RATE": "1.5"},
        {"JOBBOARD_POINTS_MIN": "60"},
        {"JOBBOARD_INITIAL_POINTS": "-1"},
        {"JOBBOARD_LOG_LEVEL": "LOUD"},
    ])
    def test_invalid_values(self, env):
        with pytest.raises(ConfigError):
            Settings.from_env(env)


class TestLoadEnv:
    """Test .env loading."""

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_loads_without_overriding(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("JOBBOARD_TEST_NEW=from-file\nJOBBOARD_TEST_SET=from-file\n")
        monkeypatch.delenv("JOBBOARD_TEST_NEW", raising=False)
        monkeypatch.setenv("JOBBOARD_TEST_SET", "from-env")

        load_env(env_file)

        assert os.environ["JOBBOARD_TEST_NEW"] == "from-file"
        assert os.environ["JOBBOARD_TEST_SET"] == "from-env"
        monkeypatch.delenv("JOBBOARD_TEST_NEW")
