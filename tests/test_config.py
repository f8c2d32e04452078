# tests/test_config.py
"""Test configuration loading and validation"""

from pathlib import Path

import pytest

from album_sync.core.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
    SERVER_URL_ENV,
    load_config,
)
from album_sync.core.exceptions import ConfigError


def _write(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test config.yaml parsing"""

    def test_minimal_config(self, config_file, tmp_path):
        """Defaults fill everything but the URL"""
        config = load_config(config_file)

        assert config.server.url == "http://localhost:8080"
        assert config.server.timeout == DEFAULT_TIMEOUT
        assert config.sync.concurrency == DEFAULT_CONCURRENCY
        assert config.logging.directory == (tmp_path / "logs").resolve()

    def test_full_config(self, tmp_path, monkeypatch):
        """Every field is read"""
        monkeypatch.delenv(SERVER_URL_ENV, raising=False)
        path = _write(
            tmp_path,
            "server:\n  url: https://nas.local:9000\n  timeout: 5.5\n"
            "sync:\n  concurrency: 3\n",
        )
        config = load_config(path)

        assert config.server.url == "https://nas.local:9000"
        assert config.server.timeout == 5.5
        assert config.sync.concurrency == 3
        assert config.logging.directory == Path("~/.album-sync/logs").expanduser().resolve()

    def test_env_overrides_url(self, config_file, monkeypatch):
        """ALBUM_SYNC_SERVER_URL wins over the file"""
        monkeypatch.setenv(SERVER_URL_ENV, "http://other:1234/")
        assert load_config(config_file).server.url == "http://other:1234"

    def test_missing_file(self, tmp_path):
        """A missing file is a ConfigError"""
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML is a ConfigError"""
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(_write(tmp_path, "server: [unclosed\n"))

    @pytest.mark.parametrize("content, message", [
        ("- just\n- a list\n", "YAML dictionary"),
        ("sync:\n  concurrency: 2\n", "Missing required section"),
        ("server:\n  url: localhost:8080\n", "http://"),
        ("server:\n  url: http://x\n  timeout: 0\n", "server.timeout"),
        ("server:\n  url: http://x\n  timeout: true\n", "server.timeout"),
        ("server:\n  url: http://x\nsync:\n  concurrency: 0\n", "sync.concurrency"),
        ("server:\n  url: http://x\nsync:\n  concurrency: 2.5\n", "sync.concurrency"),
        ("server:\n  url: http://x\nlogging:\n  directory: ''\n", "logging.directory"),
        ("server:\n  url: http://x\nsync: 5\n", "must be a dictionary"),
    ])
    def test_invalid_values(self, tmp_path, monkeypatch, content, message):
        """Invalid values are rejected with a clear message"""
        monkeypatch.delenv(SERVER_URL_ENV, raising=False)
        with pytest.raises(ConfigError, match=message):
            load_config(_write(tmp_path, content))

    def test_config_is_frozen(self, config_file):
        """Config can't be modified after loading"""
        config = load_config(config_file)
        with pytest.raises(AttributeError):
            config.server.url = "http://changed"
