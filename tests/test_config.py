"""Tests for configuration loading."""

import pytest

from ubizy.config import Config, load_config


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.conf")
        assert config == Config()

    def test_parses_values(self, tmp_path):
        path = tmp_path / "ubizy.conf"
        path.write_text(
            "# Ubizy settings\n"
            "ASSISTANT_NAME = \"Tiny Helper\"  # shown in greetings\n"
            "THINKING_DELAY = 0\n"
            "CHAT_MODEL = gpt-4o-mini # cheaper\n"
            "CHAT_API_KEY = 'sk-123'\n"
            "CHAT_TIMEOUT = 10\n"
            "URGENT_DAYS = 2\n"
            "SOON_DAYS = 14\n"
            "UNKNOWN_FREQUENCY_DUE = false\n"
            "log_level = debug\n"
            "not a setting\n"
        )

        config = load_config(path)

        assert config.assistant_name == "Tiny Helper"
        assert config.thinking_delay == 0.0
        assert config.chat_model == "gpt-4o-mini"
        assert config.chat_api_key == "sk-123"
        assert config.chat_timeout == 10
        assert config.urgent_days == 2
        assert config.soon_days == 14
        assert config.unknown_frequency_due is False
        assert config.log_level == "DEBUG"

    def test_invalid_values_keep_defaults(self, tmp_path, caplog):
        path = tmp_path / "ubizy.conf"
        path.write_text("CHAT_TIMEOUT = soon\nUNKNOWN_FREQUENCY_DUE = maybe\nURGENT_DAYS = 3\n")

        config = load_config(path)

        assert config.chat_timeout == 30
        assert config.unknown_frequency_due is True
        assert config.urgent_days == 3
        assert "CHAT_TIMEOUT" in caplog.text

    def test_api_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert load_config(tmp_path / "nope.conf").chat_api_key == "sk-env"

    def test_file_key_wins_over_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        path = tmp_path / "ubizy.conf"
        path.write_text("CHAT_API_KEY = sk-file\n")
        assert load_config(path).chat_api_key == "sk-file"
